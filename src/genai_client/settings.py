from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_API_VERSION = "v1beta"


class Settings(BaseSettings):
    """Client configuration loaded from environment variables."""

    gemini_api_key: SecretStr = Field(default=SecretStr(""), validation_alias="GEMINI_API_KEY")
    base_url: str = Field(default=DEFAULT_BASE_URL, validation_alias="GENAI_BASE_URL")
    api_version: str = Field(default=DEFAULT_API_VERSION, validation_alias="GENAI_API_VERSION")
    default_model: str = Field(default="gemini-1.5-flash", validation_alias="GENAI_MODEL")
    timeout: float = Field(default=60.0, validation_alias="GENAI_TIMEOUT", gt=0)
    http_proxy: str | None = Field(default=None, validation_alias="HTTP_PROXY")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_destination: Literal["stdout", "file", "both"] = Field(default="stdout", validation_alias="LOG_DESTINATION")
    log_file_path: str = Field(default="logs/genai_client.log", validation_alias="LOG_FILE_PATH")
    log_verbose: bool = Field(default=False, validation_alias="LOG_VERBOSE")
    allow_sensitive_logging: bool = Field(default=False, validation_alias="ALLOW_SENSITIVE_LOGGING")
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize the base URL so path segments can be appended safely."""
        stripped = value.rstrip("/")
        if not stripped:
            error_message = "GENAI_BASE_URL must not be empty"
            raise ValueError(error_message)
        return stripped

    @field_validator("http_proxy")
    @classmethod
    def empty_proxy_is_unset(cls, value: str | None) -> str | None:
        """Treat an empty proxy variable as no proxy."""
        return value or None


settings = Settings()
