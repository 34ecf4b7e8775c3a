"""Structured logging for the client.

Every event goes to the ``genai_client`` stdlib logger through a structlog
wrapper; the root logger and the global structlog configuration are never
touched. Until :func:`configure_logging` runs, events propagate to whatever
the host application has set up. Configuring attaches this package's own
sinks (rich console and/or JSON lines) and stops propagation.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import structlog
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from structlog.processors import CallsiteParameter

from genai_client.settings import Settings, settings

if TYPE_CHECKING:
    from structlog.typing import EventDict, Processor, WrappedLogger

PACKAGE_LOGGER = "genai_client"
MASK = "<masked>"

# Matched case-insensitively against payload keys at any depth.
SECRET_KEY_MARKERS: tuple[str, ...] = ("api_key", "apikey", "x-goog-api-key", "authorization")

type Direction = Literal["request", "response"]
type LogValue = (
    str
    | bytes
    | int
    | float
    | bool
    | None
    | Mapping[str, "LogValue"]
    | list["LogValue"]
    | tuple["LogValue", ...]
)

_LEVEL_STYLES = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bright_red",
}
_DIRECTION_MARKERS = {"request": "[cyan]>> request[/]", "response": "[magenta]<< response[/]"}


@dataclass
class _Sinks:
    """Settings in effect and the handlers this package attached."""

    settings: Settings = field(default_factory=lambda: settings)
    handlers: list[logging.Handler] = field(default_factory=list)

    @property
    def attached(self) -> bool:
        return bool(self.handlers)


_SINKS = _Sinks()

_CALLSITE = structlog.processors.CallsiteParameterAdder(
    parameters=(CallsiteParameter.MODULE, CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO),
    additional_ignores=[__name__],
)
_PLAIN = structlog.processors.KeyValueRenderer(key_order=["component", "event"], drop_missing=True)


def _add_callsite(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    if _SINKS.settings.log_verbose:
        return _CALLSITE(logger, method_name, event_dict)
    return event_dict


def _hand_off(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> Any:
    # Our handlers render the event dict themselves; host handlers get one key=value line.
    if _SINKS.attached:
        return structlog.stdlib.ProcessorFormatter.wrap_for_formatter(logger, method_name, event_dict)
    return _PLAIN(logger, method_name, event_dict)


_PROCESSORS: list[Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    _add_callsite,
    structlog.processors.format_exc_info,
    _hand_off,
]


def _render_console(_logger: WrappedLogger, _method_name: str, event_dict: EventDict) -> str:
    level = str(event_dict.pop("level", "")).upper()
    timestamp = event_dict.pop("timestamp", None)
    component = event_dict.pop("component", None)
    event = event_dict.pop("event", "")
    direction = event_dict.pop("direction", None)

    line = [f"[{_LEVEL_STYLES.get(level, 'white')}]{level:>8}[/]"]
    if timestamp:
        line.insert(0, f"[dim]{timestamp}[/]")
    if component:
        line.append(f"[bold]{escape(str(component))}[/]")
    line.append(f"[italic]{escape(str(event))}[/]")
    if direction in _DIRECTION_MARKERS:
        line.append(_DIRECTION_MARKERS[direction])
    line.extend(f"[blue]{key}[/]={escape(str(value))}" for key, value in sorted(event_dict.items()))
    return " ".join(line)


def _build_handlers(app_settings: Settings) -> list[logging.Handler]:
    stamp: list[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    handlers: list[logging.Handler] = []

    if app_settings.log_destination in {"stdout", "both"}:
        console = RichHandler(
            console=Console(file=sys.stdout, force_terminal=True, width=200),
            show_time=False,
            show_level=False,
            show_path=False,
            markup=True,
        )
        console.setFormatter(structlog.stdlib.ProcessorFormatter(processor=_render_console, foreign_pre_chain=stamp))
        handlers.append(console)

    if app_settings.log_destination in {"file", "both"}:
        log_path = Path(app_settings.log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        json_lines = logging.FileHandler(log_path, encoding="utf-8")
        json_lines.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=stamp,
            ),
        )
        handlers.append(json_lines)

    return handlers


def configure_logging(app_settings: Settings | None = None, *, force: bool = False) -> None:
    """Attach the sinks named in :class:`Settings` to the ``genai_client`` logger.

    Calling again without new settings keeps the current sinks and settings
    unless ``force`` is set.
    """
    if app_settings is None and _SINKS.attached and not force:
        return

    active_settings = app_settings or _SINKS.settings
    reset_logging()
    _SINKS.settings = active_settings
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    _SINKS.handlers = _build_handlers(_SINKS.settings)
    for handler in _SINKS.handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.getLevelNamesMapping().get(_SINKS.settings.log_level.upper(), logging.INFO))
    package_logger.propagate = False


def reset_logging() -> None:
    """Detach this package's sinks, drop configured settings and let events propagate again."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in _SINKS.handlers:
        package_logger.removeHandler(handler)
        handler.close()
    _SINKS.handlers = []
    _SINKS.settings = settings
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


def get_logger(*, component: str | None = None) -> Any:
    """Return a structlog logger writing to ``genai_client``, bound to ``component`` when given."""
    logger = structlog.wrap_logger(
        logging.getLogger(PACKAGE_LOGGER),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return logger.bind(component=component) if component else logger


class BaseComponent:
    """Mixin giving API facades a component-bound logger."""

    @cached_property
    def logger(self) -> Any:
        """Logger bound to the concrete class name."""
        return get_logger(component=type(self).__name__)

    def log_start(self, action: str, **fields: LogValue) -> None:
        """Emit a start event for ``action``."""
        self.logger.info("start", action=action, **fields)

    def log_end(self, action: str, **fields: LogValue) -> None:
        """Emit a completion event for ``action``."""
        self.logger.info("end", action=action, **fields)

    def log_io(self, direction: Direction, **fields: LogValue) -> None:
        """Emit what goes over the wire; text is redacted unless sensitive logging is on."""
        payload = sanitize_log_payload(fields, allow_sensitive=_SINKS.settings.allow_sensitive_logging)
        self.logger.info("io", direction=direction, **payload)


def sanitize_log_payload(payload: Mapping[str, LogValue], allow_sensitive: bool) -> dict[str, LogValue]:
    """Mask secrets at any depth and redact text and bytes unless ``allow_sensitive``."""
    return {key: _scrub(key, value, redact_text=not allow_sensitive) for key, value in payload.items()}


def _scrub(key: str, value: LogValue, *, redact_text: bool) -> LogValue:
    if any(marker in key.lower() for marker in SECRET_KEY_MARKERS):
        return MASK
    if isinstance(value, Mapping):
        return {str(name): _scrub(str(name), nested, redact_text=redact_text) for name, nested in value.items()}
    if isinstance(value, list | tuple):
        items = [_scrub(key, item, redact_text=redact_text) for item in value]
        return items if isinstance(value, list) else tuple(items)
    if redact_text and isinstance(value, str):
        return f"<redacted text length={len(value)}>"
    if redact_text and isinstance(value, bytes):
        return f"<bytes length={len(value)}>"
    return value
