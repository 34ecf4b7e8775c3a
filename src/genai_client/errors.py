"""Exception hierarchy raised by the client."""

from __future__ import annotations

from typing import Any

ERROR_PREFIX = "[GenerativeAI Error]: "

type ErrorDetails = dict[str, Any]


class GenerativeAIError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str) -> None:
        """Store the unprefixed message and prefix the rendered one."""
        super().__init__(f"{ERROR_PREFIX}{message}")
        self.message = message


class InvalidRequestError(GenerativeAIError):
    """Caller input breaks a structural rule of the request format."""


class MissingApiKeyError(GenerativeAIError):
    """No API key was supplied or configured."""


class ResponseError(GenerativeAIError):
    """A response arrived but cannot provide what was asked of it."""

    def __init__(self, message: str, response: object | None = None) -> None:
        """Keep the offending response for inspection."""
        super().__init__(message)
        self.response = response


class TransportError(GenerativeAIError):
    """The HTTP exchange failed or the server answered with an error status."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        status_text: str | None = None,
        error_details: list[ErrorDetails] | None = None,
    ) -> None:
        """Attach the HTTP status and any structured details the server sent."""
        super().__init__(message)
        self.status = status
        self.status_text = status_text
        self.error_details = error_details
