from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, Literal

import httpx
import pytest
from pydantic import SecretStr

from genai_client.generative.model import GenerativeModel
from genai_client.logger import (
    PACKAGE_LOGGER,
    BaseComponent,
    configure_logging,
    get_logger,
    reset_logging,
    sanitize_log_payload,
)
from genai_client.models import ModelParams
from genai_client.settings import Settings


class SampleComponent(BaseComponent):
    """Lightweight component for exercising logging helpers."""


def _settings(
    tmp_path: Path,
    *,
    destination: Literal["stdout", "file", "both"] = "file",
    allow_sensitive_logging: bool = False,
) -> Settings:
    """Create settings tailored for logging tests."""
    return Settings(
        gemini_api_key=SecretStr("test-key"),
        log_destination=destination,
        log_file_path=str(tmp_path / "app.log"),
        log_level="INFO",
        allow_sensitive_logging=allow_sensitive_logging,
    )


def _plain(text: str) -> str:
    return re.sub(r"\x1b\[[\d;]*m", "", text)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    yield
    reset_logging()


def test_configure_logging_writes_structured_file(tmp_path: Path) -> None:
    """configure_logging writes JSON lines to the configured log file."""
    configure_logging(_settings(tmp_path), force=True)
    logger = get_logger(component="TestComponent")

    logger.info("hello", marker="value")
    package_handlers = logging.getLogger(PACKAGE_LOGGER).handlers
    handlers = [handler for handler in package_handlers if isinstance(handler, logging.FileHandler)]
    assert handlers, "File handler should be configured"
    handler = handlers[0]
    handler.flush()
    payload = json.loads(Path(handler.baseFilename).read_text().splitlines()[-1])
    handler.close()

    assert payload["event"] == "hello"
    assert payload["marker"] == "value"
    assert payload["component"] == "TestComponent"
    assert payload["level"] == "info"


def test_base_component_logs_start_event(tmp_path: Path, capsys: Any) -> None:
    """BaseComponent emits readable console logs with metadata."""
    configure_logging(_settings(tmp_path, destination="stdout"), force=True)
    component = SampleComponent()

    component.log_start("generate_content", model="models/gemini-1.5-flash")
    stdout = capsys.readouterr().out
    plain_stdout = _plain(stdout)

    assert "SampleComponent" in plain_stdout
    assert "start" in plain_stdout
    assert "generate_content" in plain_stdout
    assert "models/gemini-1.5-flash" in plain_stdout
    assert "INFO" in plain_stdout
    assert "\x1b[32m" in stdout


def test_log_io_redacts_text_and_marks_direction(tmp_path: Path, capsys: Any) -> None:
    """Request payload text is replaced by its length and the direction is shown."""
    configure_logging(_settings(tmp_path, destination="stdout"), force=True)
    component = SampleComponent()

    component.log_io(direction="request", prompt="hello world")
    plain_stdout = _plain(capsys.readouterr().out)

    assert "prompt" in plain_stdout
    assert "hello world" not in plain_stdout
    assert "<redacted text length=11>" in plain_stdout
    assert ">> request" in plain_stdout


def test_log_io_allows_full_payload_but_never_the_api_key(tmp_path: Path, capsys: Any) -> None:
    """Sensitive logging shows payloads verbatim yet still masks credentials."""
    configure_logging(_settings(tmp_path, destination="stdout", allow_sensitive_logging=True), force=True)
    component = SampleComponent()

    component.log_io(direction="response", prompt="example prompt text", headers={"x-goog-api-key": "secret-value"})
    plain_stdout = _plain(capsys.readouterr().out)

    assert "example prompt text" in plain_stdout
    assert "secret-value" not in plain_stdout
    assert "<masked>" in plain_stdout
    assert "<< response" in plain_stdout


def test_configure_logging_preserves_active_settings(tmp_path: Path, capsys: Any) -> None:
    """Subsequent configure_logging calls should not revert active settings."""
    configure_logging(_settings(tmp_path, destination="stdout", allow_sensitive_logging=True), force=True)

    configure_logging()
    SampleComponent().log_io(direction="request", prompt="persisted prompt")
    plain_stdout = _plain(capsys.readouterr().out)

    assert "persisted prompt" in plain_stdout
    assert "<redacted" not in plain_stdout


def test_sanitize_log_payload_masks_nested_secrets() -> None:
    """Secrets are masked at any depth; other values follow the redaction flag."""
    payload = {
        "api_key": "k",
        "headers": {"Authorization": "Bearer t", "x-trace": "abc"},
        "body": b"\x00\x01",
        "count": 3,
    }

    redacted = sanitize_log_payload(payload, allow_sensitive=False)
    verbatim = sanitize_log_payload(payload, allow_sensitive=True)

    assert redacted == {
        "api_key": "<masked>",
        "headers": {"Authorization": "<masked>", "x-trace": "<redacted text length=3>"},
        "body": "<bytes length=2>",
        "count": 3,
    }
    assert verbatim["headers"] == {"Authorization": "<masked>", "x-trace": "abc"}
    assert verbatim["body"] == b"\x00\x01"


def test_client_calls_leave_host_logging_alone(
    tmp_path: Path,
    mock_transport: Callable[..., Any],
) -> None:
    """Neither an API call nor configure_logging replaces the root logger's handlers."""
    root_logger = logging.getLogger()
    host_handler = logging.StreamHandler()
    root_logger.addHandler(host_handler)
    root_level = root_logger.level
    try:
        transport = mock_transport(lambda _request: httpx.Response(200, json={"totalTokens": 1}))
        GenerativeModel("secret-key", ModelParams(model="gemini-1.5-flash"), transport=transport).count_tokens("hi")
        assert host_handler in root_logger.handlers

        configure_logging(_settings(tmp_path, destination="stdout"), force=True)
        assert host_handler in root_logger.handlers
        assert root_logger.level == root_level
        assert logging.getLogger(PACKAGE_LOGGER).propagate is False
    finally:
        root_logger.removeHandler(host_handler)


def test_unconfigured_events_propagate_to_host(caplog: pytest.LogCaptureFixture) -> None:
    """Before configure_logging, events reach the host's handlers as key=value lines."""
    caplog.set_level(logging.INFO, logger=PACKAGE_LOGGER)

    SampleComponent().log_start("embed_content", model="models/text-embedding-004")

    record = caplog.records[-1]
    assert record.name == PACKAGE_LOGGER
    assert "component='SampleComponent'" in record.getMessage()
    assert "event='start'" in record.getMessage()
    assert "action='embed_content'" in record.getMessage()
