"""Normalization of loosely typed caller input into canonical request bodies.

Callers may hand the model a plain string, a sequence mixing strings with
parts, or an already structured request. Each ``format_*`` function resolves
that input, in the order string, sequence, structured object, into one
request model. Structural mistakes surface here as
:class:`~genai_client.errors.InvalidRequestError` before anything touches the
network.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, cast

from pydantic import TypeAdapter, ValidationError

from genai_client.errors import InvalidRequestError
from genai_client.models import (
    Content,
    CountTokensEnvelope,
    CountTokensRequest,
    EmbedContentRequest,
    FunctionResponsePart,
    GenerateContentRequest,
    GenerateContentRequestInternal,
    ModelParams,
    Part,
    TextPart,
)

type PartLike = str | Part | Mapping[str, Any]
type ContentInput = str | Sequence[PartLike]
type SystemInstructionInput = str | Part | Content | Mapping[str, Any]
type GenerateContentInput = ContentInput | GenerateContentRequest | Mapping[str, Any]
type CountTokensInput = ContentInput | CountTokensRequest | Mapping[str, Any]
type EmbedContentInput = ContentInput | EmbedContentRequest | Mapping[str, Any]

MIXED_PARTS_MESSAGE = (
    "Within a single message, FunctionResponse cannot be mixed with other type of part "
    "in the request for sending chat message."
)
NO_CONTENT_MESSAGE = "No content is provided for sending chat message."
COUNT_TOKENS_CONFLICT_MESSAGE = "CountTokensRequest must have one of contents or generateContentRequest, not both."

_PART_ADAPTER: TypeAdapter[Part] = TypeAdapter(Part)


def format_system_instruction(value: SystemInstructionInput | None) -> Content | None:
    """Promote a system instruction to a :class:`Content` with role ``system``.

    A Content that already names its role is returned untouched; an empty
    value means no system instruction.
    """
    if not value:
        return None
    if isinstance(value, str):
        return Content(role="system", parts=[TextPart(text=value)])
    if isinstance(value, Mapping):
        value = _validate(Content if "parts" in value else _PART_ADAPTER, value)
    if isinstance(value, Content):
        if value.role is None:
            return Content(role="system", parts=value.parts)
        return value
    if isinstance(value, Part):
        return Content(role="system", parts=[value])
    message = f"Unsupported system instruction type: {type(value).__name__}."
    raise InvalidRequestError(message)


def format_new_content(value: ContentInput) -> Content:
    """Turn a string or a sequence of strings and parts into one user or function turn."""
    if isinstance(value, str):
        parts: list[Part] = [TextPart(text=value)]
    elif isinstance(value, Sequence):
        parts = [_coerce_part(item) for item in value]
    else:
        message = f"Expected a string or a sequence of parts, got {type(value).__name__}."
        raise InvalidRequestError(message)
    return _assign_role(parts)


def format_generate_content_input(value: GenerateContentInput) -> GenerateContentRequest:
    """Resolve caller input into a ``generateContent`` body."""
    if isinstance(value, str | Sequence):
        request = GenerateContentRequest(contents=[format_new_content(cast("ContentInput", value))])
    elif isinstance(value, GenerateContentRequest):
        request = value
    elif isinstance(value, Mapping) and "contents" in value:
        request = _validate(GenerateContentRequest, value)
    else:
        message = "GenerateContentRequest must provide contents."
        raise InvalidRequestError(message)

    if request.system_instruction is not None:
        system_instruction = format_system_instruction(request.system_instruction)
        request = request.model_copy(update={"system_instruction": system_instruction})
    return request


def format_count_tokens_input(
    value: CountTokensInput,
    model_params: ModelParams | None = None,
) -> CountTokensEnvelope:
    """Resolve caller input into a ``countTokens`` body.

    The nested generate request starts from the model-level defaults. Fields
    set on an explicit ``generate_content_request`` win over those defaults.
    """
    formatted = _request_defaults(model_params)

    if isinstance(value, str | Sequence):
        formatted.contents = [format_new_content(cast("ContentInput", value))]
        return CountTokensEnvelope(generate_content_request=formatted)

    request = value if isinstance(value, CountTokensRequest) else _validate(CountTokensRequest, value)
    if request.contents is not None and request.generate_content_request is not None:
        raise InvalidRequestError(COUNT_TOKENS_CONFLICT_MESSAGE)

    if request.contents is not None:
        formatted.contents = request.contents
    elif request.generate_content_request is not None:
        explicit = request.generate_content_request
        overrides = {
            name: getattr(explicit, name) for name in explicit.model_fields_set if getattr(explicit, name) is not None
        }
        formatted = formatted.model_copy(update=overrides)
    else:
        message = "CountTokensRequest must provide contents or generateContentRequest."
        raise InvalidRequestError(message)

    if formatted.system_instruction is not None:
        formatted.system_instruction = format_system_instruction(formatted.system_instruction)
    return CountTokensEnvelope(generate_content_request=formatted)


def format_embed_content_input(value: EmbedContentInput) -> EmbedContentRequest:
    """Resolve caller input into an ``embedContent`` body."""
    if isinstance(value, str | Sequence):
        return EmbedContentRequest(content=format_new_content(cast("ContentInput", value)))
    if isinstance(value, EmbedContentRequest):
        return value
    return _validate(EmbedContentRequest, value)


def format_batch_embed_contents_input(
    requests: Iterable[EmbedContentInput],
    model: str,
) -> list[EmbedContentRequest]:
    """Format every entry of a batch and stamp it with the model name."""
    return [format_embed_content_input(request).model_copy(update={"model": model}) for request in requests]


def _request_defaults(model_params: ModelParams | None) -> GenerateContentRequestInternal:
    if model_params is None:
        return GenerateContentRequestInternal(contents=[])
    cached_content = model_params.cached_content.name if model_params.cached_content else None
    return GenerateContentRequestInternal(
        model=model_params.model,
        contents=[],
        generation_config=model_params.generation_config,
        safety_settings=model_params.safety_settings,
        tools=model_params.tools,
        tool_config=model_params.tool_config,
        system_instruction=format_system_instruction(model_params.system_instruction),
        cached_content=cached_content,
    )


def _coerce_part(item: PartLike) -> Part:
    if isinstance(item, str):
        return TextPart(text=item)
    if isinstance(item, Part):
        return item
    if isinstance(item, Mapping):
        return _validate(_PART_ADAPTER, item)
    message = f"Unsupported part type: {type(item).__name__}."
    raise InvalidRequestError(message)


def _assign_role(parts: Iterable[Part]) -> Content:
    # Function responses travel under their own role and cannot share a turn.
    user_parts: list[Part] = []
    function_parts: list[Part] = []
    for part in parts:
        if isinstance(part, FunctionResponsePart):
            function_parts.append(part)
        else:
            user_parts.append(part)

    if user_parts and function_parts:
        raise InvalidRequestError(MIXED_PARTS_MESSAGE)
    if user_parts:
        return Content(role="user", parts=user_parts)
    if function_parts:
        return Content(role="function", parts=function_parts)
    raise InvalidRequestError(NO_CONTENT_MESSAGE)


def _validate[T](target: type[T] | TypeAdapter[T], value: object) -> T:
    try:
        if isinstance(target, TypeAdapter):
            return target.validate_python(value)
        return cast("Any", target).model_validate(value)
    except ValidationError as exc:
        raise InvalidRequestError(str(exc)) from exc
