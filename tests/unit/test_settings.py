from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from genai_client.settings import DEFAULT_API_VERSION, DEFAULT_BASE_URL, Settings

if TYPE_CHECKING:
    from pathlib import Path


def _required_keys() -> dict[str, str]:
    return {"GEMINI_API_KEY": "test-gemini-key"}


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Endpoint, model and logging defaults are loaded when nothing is set."""
    monkeypatch.chdir(tmp_path)
    for name in ("GENAI_BASE_URL", "GENAI_API_VERSION", "GENAI_MODEL", "GENAI_TIMEOUT", "HTTP_PROXY"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.model_validate(_required_keys())

    assert settings.gemini_api_key.get_secret_value() == "test-gemini-key"
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.api_version == DEFAULT_API_VERSION == "v1beta"
    assert settings.default_model == "gemini-1.5-flash"
    assert settings.timeout == 60.0
    assert settings.http_proxy is None
    assert settings.log_destination == "stdout"
    assert settings.allow_sensitive_logging is False


def test_settings_overrides_via_env_names() -> None:
    """Every option can be overridden under its environment variable name."""
    env = {
        **_required_keys(),
        "GENAI_BASE_URL": "https://proxy.example.test/",
        "GENAI_API_VERSION": "v1",
        "GENAI_MODEL": "gemini-1.5-pro",
        "GENAI_TIMEOUT": "12.5",
        "HTTP_PROXY": "http://localhost:3128",
        "LOG_DESTINATION": "both",
        "ALLOW_SENSITIVE_LOGGING": "true",
    }

    settings = Settings.model_validate(env)

    assert settings.base_url == "https://proxy.example.test"
    assert settings.api_version == "v1"
    assert settings.default_model == "gemini-1.5-pro"
    assert settings.timeout == 12.5
    assert settings.http_proxy == "http://localhost:3128"
    assert settings.log_destination == "both"
    assert settings.allow_sensitive_logging is True


def test_empty_proxy_is_treated_as_unset() -> None:
    """An empty HTTP_PROXY does not configure a proxy."""
    settings = Settings.model_validate({**_required_keys(), "HTTP_PROXY": ""})

    assert settings.http_proxy is None


def test_invalid_values_are_rejected() -> None:
    """Non-positive timeouts and empty base URLs fail validation."""
    with pytest.raises(ValidationError):
        Settings.model_validate({**_required_keys(), "GENAI_TIMEOUT": "0"})
    with pytest.raises(ValidationError):
        Settings.model_validate({**_required_keys(), "GENAI_BASE_URL": "/"})
