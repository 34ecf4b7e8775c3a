"""Endpoint URLs for model and file operations."""

from __future__ import annotations

from enum import StrEnum
from importlib import metadata
from urllib.parse import quote, urlencode

from genai_client.models import RequestOptions
from genai_client.settings import settings

PACKAGE_LOG_HEADER = "genai-py"


class Task(StrEnum):
    """Model methods exposed by the API."""

    GENERATE_CONTENT = "generateContent"
    COUNT_TOKENS = "countTokens"
    EMBED_CONTENT = "embedContent"
    BATCH_EMBED_CONTENTS = "batchEmbedContents"


class FilesTask(StrEnum):
    """File operations exposed by the API."""

    UPLOAD = "upload"
    LIST = "list"
    GET = "get"
    DELETE = "delete"


def normalize_model_name(model: str) -> str:
    """Prefix a bare model id with ``models/``; names with a collection are kept."""
    return model if "/" in model else f"models/{model}"


def _base_url(request_options: RequestOptions | None) -> str:
    base_url = request_options.base_url if request_options and request_options.base_url else settings.base_url
    return base_url.rstrip("/")


def _api_version(request_options: RequestOptions | None) -> str:
    if request_options and request_options.api_version:
        return request_options.api_version
    return settings.api_version


class RequestUrl:
    """URL of a model method call."""

    def __init__(
        self,
        model: str,
        task: Task,
        api_key: str,
        *,
        request_options: RequestOptions | None = None,
    ) -> None:
        self.model = normalize_model_name(model)
        self.task = task
        self.api_key = api_key
        self.request_options = request_options

    def __str__(self) -> str:
        return f"{_base_url(self.request_options)}/{_api_version(self.request_options)}/{self.model}:{self.task}"


class FilesRequestUrl:
    """URL of a files API call; supports extra path segments and query parameters."""

    def __init__(self, task: FilesTask, api_key: str, request_options: RequestOptions | None = None) -> None:
        self.task = task
        self.api_key = api_key
        self.request_options = request_options
        self._path_segments: list[str] = []
        self._params: dict[str, str] = {}

    def append_path(self, segment: str) -> None:
        """Add a path segment after ``files``."""
        self._path_segments.append(quote(segment, safe=""))

    def append_param(self, key: str, value: str) -> None:
        """Add (or replace) a query parameter."""
        self._params[key] = value

    def __str__(self) -> str:
        prefix = "/upload" if self.task is FilesTask.UPLOAD else ""
        url = f"{_base_url(self.request_options)}{prefix}/{_api_version(self.request_options)}/files"
        if self._path_segments:
            url += "/" + "/".join(self._path_segments)
        if self._params:
            url += "?" + urlencode(self._params)
        return url


def get_client_headers() -> str:
    """Value of the ``x-goog-api-client`` header."""
    try:
        version = metadata.version("genai-client")
    except metadata.PackageNotFoundError:
        version = "0.0.0"
    return f"{PACKAGE_LOG_HEADER}/{version}"
