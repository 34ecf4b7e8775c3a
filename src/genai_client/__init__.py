"""Request construction and transport for the Generative Language REST API."""

from genai_client.errors import (
    GenerativeAIError,
    InvalidRequestError,
    MissingApiKeyError,
    ResponseError,
    TransportError,
)
from genai_client.files.manager import FileManager
from genai_client.files.multipart import MultipartUpload, build_multipart_upload
from genai_client.generative.client import GenerativeAI
from genai_client.generative.model import GenerativeModel
from genai_client.requests.helpers import (
    format_batch_embed_contents_input,
    format_count_tokens_input,
    format_embed_content_input,
    format_generate_content_input,
    format_new_content,
    format_system_instruction,
)

__all__ = [
    "FileManager",
    "GenerativeAI",
    "GenerativeAIError",
    "GenerativeModel",
    "InvalidRequestError",
    "MissingApiKeyError",
    "MultipartUpload",
    "ResponseError",
    "TransportError",
    "build_multipart_upload",
    "format_batch_embed_contents_input",
    "format_count_tokens_input",
    "format_embed_content_input",
    "format_generate_content_input",
    "format_new_content",
    "format_system_instruction",
]
