"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator

os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest

from genai_client.requests.transport import HttpTransport


class FixedRandom:
    """Random source replaying a fixed sequence of draws."""

    def __init__(self, *values: float) -> None:
        self._values: Iterator[float] = iter(values)

    def random(self) -> float:
        return next(self._values)


@pytest.fixture
def fixed_random() -> Callable[..., FixedRandom]:
    """Build a deterministic random source for boundary generation."""
    return FixedRandom


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests seen by :func:`mock_transport`."""
    return []


@pytest.fixture
def mock_transport(
    recorded_requests: list[httpx.Request],
) -> Callable[[Callable[[httpx.Request], httpx.Response]], HttpTransport]:
    """Build an :class:`HttpTransport` whose client answers with ``handler``."""

    def build(handler: Callable[[httpx.Request], httpx.Response]) -> HttpTransport:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return HttpTransport(client=httpx.Client(transport=httpx.MockTransport(recording_handler)))

    return build
