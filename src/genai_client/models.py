"""Pydantic models for Generative Language API requests and responses."""

from __future__ import annotations

import base64
from enum import StrEnum
from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from genai_client.errors import ResponseError

Role = Literal["user", "model", "function", "system"]


class WireModel(BaseModel):
    """Base model whose wire form uses camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready body, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_payload(cls, payload: Any) -> Self:
        """Validate a decoded response body, raising :class:`ResponseError` when it does not fit."""
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            message = f"Unexpected {cls.__name__} body: {exc.error_count()} field(s) failed validation."
            raise ResponseError(message, payload) from exc


class HarmCategory(StrEnum):
    """Safety categories understood by the API."""

    UNSPECIFIED = "HARM_CATEGORY_UNSPECIFIED"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"


class HarmBlockThreshold(StrEnum):
    """Probability threshold at which content is blocked."""

    UNSPECIFIED = "HARM_BLOCK_THRESHOLD_UNSPECIFIED"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_NONE = "BLOCK_NONE"


class FunctionCallingMode(StrEnum):
    """How the model may call declared functions."""

    UNSPECIFIED = "MODE_UNSPECIFIED"
    AUTO = "AUTO"
    ANY = "ANY"
    NONE = "NONE"


class TaskType(StrEnum):
    """Intended downstream use of an embedding."""

    UNSPECIFIED = "TASK_TYPE_UNSPECIFIED"
    RETRIEVAL_QUERY = "RETRIEVAL_QUERY"
    RETRIEVAL_DOCUMENT = "RETRIEVAL_DOCUMENT"
    SEMANTIC_SIMILARITY = "SEMANTIC_SIMILARITY"
    CLASSIFICATION = "CLASSIFICATION"
    CLUSTERING = "CLUSTERING"


class FileState(StrEnum):
    """Processing state of an uploaded file."""

    UNSPECIFIED = "STATE_UNSPECIFIED"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"


# Parts


class _PartModel(WireModel):
    model_config = ConfigDict(extra="forbid")


class Blob(WireModel):
    """Base64 encoded bytes tagged with a MIME type."""

    mime_type: str
    data: str


class FunctionCall(WireModel):
    """A call the model asks the caller to perform."""

    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class FunctionResponse(WireModel):
    """The caller's result for an earlier :class:`FunctionCall`."""

    name: str
    response: dict[str, Any]


class FileData(WireModel):
    """Reference to a file uploaded through the files API."""

    mime_type: str
    file_uri: str


class TextPart(_PartModel):
    """Plain text."""

    text: str


class InlineDataPart(_PartModel):
    """Bytes embedded directly in the request."""

    inline_data: Blob

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> InlineDataPart:
        """Encode raw bytes into an inline data part."""
        return cls(inline_data=Blob(mime_type=mime_type, data=base64.b64encode(data).decode()))


class FunctionCallPart(_PartModel):
    """A function call, as echoed back in conversation history."""

    function_call: FunctionCall


class FunctionResponsePart(_PartModel):
    """A function result; only ever sent under the ``function`` role."""

    function_response: FunctionResponse


class FileDataPart(_PartModel):
    """Content stored in an uploaded file."""

    file_data: FileData


Part = TextPart | InlineDataPart | FunctionCallPart | FunctionResponsePart | FileDataPart


class Content(WireModel):
    """A role-tagged, ordered group of parts."""

    role: Role | None = None
    parts: list[Part]


# Request options


class GenerationConfig(WireModel):
    """Sampling and output options."""

    candidate_count: int | None = None
    stop_sequences: list[str] | None = None
    max_output_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    response_mime_type: str | None = None
    response_schema: dict[str, Any] | None = None


class SafetySetting(WireModel):
    """Blocking threshold for one harm category."""

    category: HarmCategory
    threshold: HarmBlockThreshold


class FunctionDeclaration(WireModel):
    """A function the model may call."""

    name: str
    description: str | None = None
    parameters: dict[str, Any] | None = None


class Tool(WireModel):
    """Tools the model may use while generating."""

    function_declarations: list[FunctionDeclaration] | None = None
    code_execution: dict[str, Any] | None = None
    google_search_retrieval: dict[str, Any] | None = None


class FunctionCallingConfig(WireModel):
    """Constraints on function calling."""

    mode: FunctionCallingMode | None = None
    allowed_function_names: list[str] | None = None


class ToolConfig(WireModel):
    """Configuration shared by all tools in a request."""

    function_calling_config: FunctionCallingConfig | None = None


class CachedContent(WireModel):
    """Reference to server-side cached content."""

    name: str | None = None
    model: str | None = None
    display_name: str | None = None


# Requests


class BaseParams(WireModel):
    """Options shared by model parameters and generate requests."""

    generation_config: GenerationConfig | None = None
    safety_settings: list[SafetySetting] | None = None


class ModelParams(BaseParams):
    """Defaults attached to a model handle and applied to each request."""

    model: str
    tools: list[Tool] | None = None
    tool_config: ToolConfig | None = None
    system_instruction: str | Content | Part | None = None
    cached_content: CachedContent | None = None


class GenerateContentRequest(BaseParams):
    """Body of a ``generateContent`` call."""

    contents: list[Content]
    tools: list[Tool] | None = None
    tool_config: ToolConfig | None = None
    system_instruction: str | Content | Part | None = None
    cached_content: str | None = None


class GenerateContentRequestInternal(GenerateContentRequest):
    """Generate request that also names its model, as nested in count-tokens calls."""

    model: str | None = None


class CountTokensRequest(WireModel):
    """Caller-facing count-tokens request; at most one field may be set."""

    contents: list[Content] | None = None
    generate_content_request: GenerateContentRequest | None = None


class CountTokensEnvelope(WireModel):
    """Body of a ``countTokens`` call."""

    generate_content_request: GenerateContentRequestInternal


class EmbedContentRequest(WireModel):
    """Body of an ``embedContent`` call, and one entry of a batch."""

    content: Content
    task_type: TaskType | None = None
    title: str | None = None
    model: str | None = None


class BatchEmbedContentsRequest(WireModel):
    """Body of a ``batchEmbedContents`` call."""

    requests: list[EmbedContentRequest]


class RequestOptions(BaseModel):
    """Per-handle overrides for the transport."""

    timeout: float | None = Field(default=None, gt=0)
    api_version: str | None = None
    base_url: str | None = None
    custom_headers: dict[str, str] = Field(default_factory=dict)


# Files


class FileMetadata(WireModel):
    """Caller-supplied description of a file to upload."""

    mime_type: str
    display_name: str | None = None
    name: str | None = None


class FileMetadataResponse(WireModel):
    """Server-side record of an uploaded file."""

    name: str
    display_name: str | None = None
    mime_type: str
    size_bytes: str | None = None
    create_time: str | None = None
    update_time: str | None = None
    expiration_time: str | None = None
    sha256_hash: str | None = None
    uri: str
    state: FileState = FileState.UNSPECIFIED
    error: dict[str, Any] | None = None
    video_metadata: dict[str, Any] | None = None


class UploadFileResponse(WireModel):
    """Response to a file upload."""

    file: FileMetadataResponse


class ListFilesResponse(WireModel):
    """One page of uploaded files."""

    files: list[FileMetadataResponse] = Field(default_factory=list)
    next_page_token: str | None = None


# Responses


class ResponsePart(WireModel):
    """A part as returned by the server; unknown kinds are tolerated."""

    text: str | None = None
    inline_data: Blob | None = None
    function_call: FunctionCall | None = None
    function_response: FunctionResponse | None = None
    file_data: FileData | None = None
    executable_code: dict[str, Any] | None = None
    code_execution_result: dict[str, Any] | None = None


class ResponseContent(WireModel):
    """Content generated by the model."""

    role: str | None = None
    parts: list[ResponsePart] = Field(default_factory=list)


class SafetyRating(WireModel):
    """Probability of harm for one category."""

    category: str
    probability: str
    blocked: bool | None = None


class PromptFeedback(WireModel):
    """Why the prompt was blocked, if it was."""

    block_reason: str | None = None
    block_reason_message: str | None = None
    safety_ratings: list[SafetyRating] = Field(default_factory=list)


class Candidate(WireModel):
    """One generated alternative."""

    index: int | None = None
    content: ResponseContent | None = None
    finish_reason: str | None = None
    finish_message: str | None = None
    safety_ratings: list[SafetyRating] = Field(default_factory=list)
    citation_metadata: dict[str, Any] | None = None


class UsageMetadata(WireModel):
    """Token accounting for a generate call."""

    prompt_token_count: int | None = None
    candidates_token_count: int | None = None
    cached_content_token_count: int | None = None
    total_token_count: int | None = None


class GenerateContentResponse(WireModel):
    """Response to a ``generateContent`` call."""

    candidates: list[Candidate] = Field(default_factory=list)
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None


class CountTokensResponse(WireModel):
    """Response to a ``countTokens`` call."""

    total_tokens: int
    cached_content_token_count: int | None = None


class ContentEmbedding(WireModel):
    """An embedding vector."""

    values: list[float]


class EmbedContentResponse(WireModel):
    """Response to an ``embedContent`` call."""

    embedding: ContentEmbedding


class BatchEmbedContentsResponse(WireModel):
    """Response to a ``batchEmbedContents`` call."""

    embeddings: list[ContentEmbedding] = Field(default_factory=list)
