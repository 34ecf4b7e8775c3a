from __future__ import annotations

from typing import TYPE_CHECKING, Any

from genai_client.errors import MissingApiKeyError
from genai_client.logger import BaseComponent
from genai_client.models import (
    BatchEmbedContentsRequest,
    BatchEmbedContentsResponse,
    CountTokensResponse,
    EmbedContentResponse,
    GenerateContentRequest,
    GenerateContentResponse,
    ModelParams,
)
from genai_client.requests.helpers import (
    format_batch_embed_contents_input,
    format_count_tokens_input,
    format_embed_content_input,
    format_generate_content_input,
    format_system_instruction,
)
from genai_client.requests.request import RequestUrl, Task, normalize_model_name
from genai_client.requests.transport import HttpTransport, resolve_request_options

if TYPE_CHECKING:
    from collections.abc import Iterable

    from genai_client.models import RequestOptions
    from genai_client.requests.helpers import CountTokensInput, EmbedContentInput, GenerateContentInput
    from genai_client.settings import Settings


class GenerativeModel(BaseComponent):
    """Handle on one model; model-level defaults apply to every request it sends."""

    def __init__(
        self,
        api_key: str,
        model_params: ModelParams,
        request_options: RequestOptions | None = None,
        *,
        transport: HttpTransport | None = None,
        app_settings: Settings | None = None,
    ) -> None:
        """Bind the handle to an API key, a model and its defaults."""
        if not api_key:
            message = "An API key is required to call the model."
            raise MissingApiKeyError(message)
        self.api_key = api_key
        self.model = normalize_model_name(model_params.model)
        self.model_params = model_params.model_copy(
            update={
                "model": self.model,
                "system_instruction": format_system_instruction(model_params.system_instruction),
            },
        )
        self._request_options = resolve_request_options(request_options, app_settings)
        self._transport = transport or HttpTransport(app_settings=app_settings)

    def generate_content(self, request: GenerateContentInput) -> GenerateContentResponse:
        """Generate a response for a prompt, a list of parts or a full request."""
        formatted = self._apply_model_defaults(format_generate_content_input(request))
        self.log_start("generate_content", model=self.model, turns=len(formatted.contents))
        payload = self._post(Task.GENERATE_CONTENT, formatted.to_payload())
        result = GenerateContentResponse.from_payload(payload)
        self.log_end("generate_content", candidates=len(result.candidates))
        return result

    def count_tokens(self, request: CountTokensInput) -> CountTokensResponse:
        """Count the tokens the request would consume."""
        envelope = format_count_tokens_input(request, self.model_params)
        self.log_start("count_tokens", model=self.model)
        result = CountTokensResponse.from_payload(self._post(Task.COUNT_TOKENS, envelope.to_payload()))
        self.log_end("count_tokens", total_tokens=result.total_tokens)
        return result

    def embed_content(self, request: EmbedContentInput) -> EmbedContentResponse:
        """Embed one piece of content."""
        formatted = format_embed_content_input(request)
        self.log_start("embed_content", model=self.model)
        result = EmbedContentResponse.from_payload(self._post(Task.EMBED_CONTENT, formatted.to_payload()))
        self.log_end("embed_content", dimensions=len(result.embedding.values))
        return result

    def batch_embed_contents(
        self,
        requests: BatchEmbedContentsRequest | Iterable[EmbedContentInput],
    ) -> BatchEmbedContentsResponse:
        """Embed several pieces of content in one call."""
        entries = requests.requests if isinstance(requests, BatchEmbedContentsRequest) else requests
        batch = BatchEmbedContentsRequest(requests=format_batch_embed_contents_input(entries, self.model))
        self.log_start("batch_embed_contents", model=self.model, count=len(batch.requests))
        payload = self._post(Task.BATCH_EMBED_CONTENTS, batch.to_payload())
        result = BatchEmbedContentsResponse.from_payload(payload)
        self.log_end("batch_embed_contents", count=len(result.embeddings))
        return result

    def _apply_model_defaults(self, request: GenerateContentRequest) -> GenerateContentRequest:
        params = self.model_params
        defaults: dict[str, Any] = {
            "generation_config": params.generation_config,
            "safety_settings": params.safety_settings,
            "tools": params.tools,
            "tool_config": params.tool_config,
            "system_instruction": params.system_instruction,
            "cached_content": params.cached_content.name if params.cached_content else None,
        }
        missing = {
            name: value for name, value in defaults.items() if value is not None and getattr(request, name) is None
        }
        return request.model_copy(update=missing) if missing else request

    def _post(self, task: Task, body: dict[str, Any]) -> Any:
        url = RequestUrl(self.model, task, self.api_key, request_options=self._request_options)
        return self._transport.post_json(url, body)
