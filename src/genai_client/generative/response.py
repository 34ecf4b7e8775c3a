"""Readers for generate-content responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from genai_client.errors import ResponseError
from genai_client.logger import get_logger

if TYPE_CHECKING:
    from genai_client.models import Candidate, FunctionCall, GenerateContentResponse

BAD_FINISH_REASONS = frozenset({"RECITATION", "SAFETY", "LANGUAGE"})


def response_text(response: GenerateContentResponse) -> str:
    """Join the text parts of the first candidate.

    Raises :class:`ResponseError` when the candidate stopped for a blocking
    reason or when the prompt itself was blocked.
    """
    if response.candidates:
        if len(response.candidates) > 1:
            get_logger(component="response").warning(
                "multiple_candidates",
                count=len(response.candidates),
                used="first",
            )
        candidate = response.candidates[0]
        _raise_for_finish_reason(candidate, response)
        if candidate.content is None:
            return ""
        return "".join(part.text for part in candidate.content.parts if part.text)
    if response.prompt_feedback is not None:
        message = f"Text not available. {format_block_message(response)}"
        raise ResponseError(message, response)
    return ""


def function_calls(response: GenerateContentResponse) -> list[FunctionCall]:
    """Return the function calls requested by the first candidate."""
    if not response.candidates:
        if response.prompt_feedback is not None:
            message = f"Function call not available. {format_block_message(response)}"
            raise ResponseError(message, response)
        return []
    candidate = response.candidates[0]
    _raise_for_finish_reason(candidate, response)
    if candidate.content is None:
        return []
    return [part.function_call for part in candidate.content.parts if part.function_call is not None]


def format_block_message(response: GenerateContentResponse) -> str:
    """Describe why the response was blocked or cut short."""
    message = ""
    feedback = response.prompt_feedback
    if not response.candidates and feedback is not None:
        message += "Response was blocked"
        if feedback.block_reason:
            message += f" due to {feedback.block_reason}"
        if feedback.block_reason_message:
            message += f": {feedback.block_reason_message}"
    elif response.candidates:
        candidate = response.candidates[0]
        if candidate.finish_reason in BAD_FINISH_REASONS:
            message += f"Candidate was blocked due to {candidate.finish_reason}"
            if candidate.finish_message:
                message += f": {candidate.finish_message}"
    return message


def _raise_for_finish_reason(candidate: Candidate, response: GenerateContentResponse) -> None:
    if candidate.finish_reason in BAD_FINISH_REASONS:
        message = format_block_message(response)
        raise ResponseError(message, response)
