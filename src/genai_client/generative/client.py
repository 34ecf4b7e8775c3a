from __future__ import annotations

from typing import TYPE_CHECKING

from genai_client.errors import MissingApiKeyError
from genai_client.files.manager import FileManager
from genai_client.generative.model import GenerativeModel
from genai_client.models import ModelParams
from genai_client.settings import Settings, settings

if TYPE_CHECKING:
    from genai_client.models import RequestOptions
    from genai_client.requests.transport import HttpTransport


class GenerativeAI:
    """Entry point that hands out model handles and file managers sharing one key."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        app_settings: Settings | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        """Use ``api_key`` or fall back to ``GEMINI_API_KEY`` from settings."""
        self._settings = app_settings or settings
        self.api_key = api_key or self._settings.gemini_api_key.get_secret_value()
        if not self.api_key:
            message = "Set GEMINI_API_KEY or pass an API key explicitly."
            raise MissingApiKeyError(message)
        self._transport = transport

    def get_generative_model(
        self,
        model_params: ModelParams | str | None = None,
        request_options: RequestOptions | None = None,
    ) -> GenerativeModel:
        """Return a model handle; a bare string names the model, ``None`` uses the default."""
        if model_params is None:
            model_params = ModelParams(model=self._settings.default_model)
        elif isinstance(model_params, str):
            model_params = ModelParams(model=model_params)
        return GenerativeModel(
            self.api_key,
            model_params,
            request_options,
            transport=self._transport,
            app_settings=self._settings,
        )

    def get_file_manager(self, request_options: RequestOptions | None = None) -> FileManager:
        """Return a files API client using the same key."""
        return FileManager(
            self.api_key,
            request_options,
            transport=self._transport,
            app_settings=self._settings,
        )
