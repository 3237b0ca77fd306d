# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Logging helpers for the RiakJson client.

Plain stdlib ``logging`` with three output flavours: colored text for a
terminal, plain text when ``NO_COLOR`` is set, and one JSON object per line
when ``RIAKJSON_LOG_JSON`` is truthy.  Request logs attach ``duration_ms`` as
an ``extra`` field; the text formatters render it as a ``[12.35 ms]`` suffix.

The library only creates loggers.  Output is opt-in through
:func:`setup_logger`; otherwise records propagate to whatever the host
application configured on the root logger.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import os
from typing import Any, ClassVar, Final

import orjson


RESET: Final[str] = "\033[0m"

DEBUG_COLOR: Final[str] = "\033[36m"
INFO_COLOR: Final[str] = "\033[32m"
WARNING_COLOR: Final[str] = "\033[33m"
ERROR_COLOR: Final[str] = "\033[1;31m"
CRITICAL_COLOR: Final[str] = "\033[1;35m"
LOGGER_COLOR: Final[str] = "\033[94m"
DURATION_COLOR: Final[str] = "\033[90m"

DEFAULT_LOGGER_NAME: Final[str] = "riakjson"
ENV_LOG_LEVEL: Final[str] = "RIAKJSON_LOG_LEVEL"
ENV_LOG_JSON: Final[str] = "RIAKJSON_LOG_JSON"
ENV_NO_COLOR: Final[str] = "NO_COLOR"
DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"

JsonSerializer = Callable[[dict[str, Any]], str]

# Attributes every LogRecord carries; anything else came in through ``extra``.
_BUILTIN_RECORD_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys() | {"message", "asctime"}
)


def _duration_suffix(record: logging.LogRecord) -> str:
    duration = getattr(record, "duration_ms", None)
    if duration is None:
        return ""
    return f" [{float(duration):.2f} ms]"


class PlainFormatter(logging.Formatter):
    """Text formatter that appends the request duration when present."""

    def format(self, record: logging.LogRecord) -> str:
        return super().format(record) + _duration_suffix(record)


class ColoredFormatter(PlainFormatter):
    """ANSI-colored variant of :class:`PlainFormatter`.

    Override ``LEVEL_COLORS`` to change the palette.
    """

    LEVEL_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": DEBUG_COLOR,
        "INFO": INFO_COLOR,
        "WARNING": WARNING_COLOR,
        "ERROR": ERROR_COLOR,
        "CRITICAL": CRITICAL_COLOR,
    }

    def format(self, record: logging.LogRecord) -> str:
        orig_levelname = record.levelname
        orig_name = record.name
        record.levelname = f"{self.LEVEL_COLORS.get(orig_levelname, '')}{orig_levelname}{RESET}"
        record.name = f"{LOGGER_COLOR}{orig_name}{RESET}"
        try:
            rendered = logging.Formatter.format(self, record)
        finally:
            record.levelname = orig_levelname
            record.name = orig_name

        suffix = _duration_suffix(record)
        if suffix:
            rendered += f"{DURATION_COLOR}{suffix}{RESET}"
        return rendered


class RiakJsonHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Marker handler so :func:`setup_logger` can find what it installed."""


class StructuredJSONFormatter(logging.Formatter):
    """Serialize log records as single-line JSON objects."""

    def __init__(self, serializer: JsonSerializer | None = None, *, datefmt: str | None = None) -> None:
        super().__init__(datefmt=datefmt)
        self._serializer = serializer or _default_json_serializer

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        extra = {key: value for key, value in vars(record).items() if key not in _BUILTIN_RECORD_KEYS}
        if extra:
            payload["context"] = extra
        return self._serializer(payload)


def _default_json_serializer(payload: dict[str, Any]) -> str:
    return orjson.dumps(payload, default=str).decode()


def _has_riakjson_handler(root: logging.Logger) -> bool:
    return any(isinstance(handler, RiakJsonHandler) for handler in root.handlers)


def _read_bool_env(key: str) -> bool:
    value = os.getenv(key)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(ENV_LOG_LEVEL) or logging.WARNING
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logger(
    *,
    level: int | str | None = None,
    use_json: bool | None = None,
    use_color: bool | None = None,
    json_serializer: JsonSerializer | None = None,
    fmt: str | None = None,
    datefmt: str | None = DEFAULT_DATEFMT,
    force: bool = False,
) -> None:
    """Attach a handler to the ``riakjson`` logger.

    Args:
        level: Log level. Falls back to ``RIAKJSON_LOG_LEVEL``, then ``WARNING``.
        use_json: Emit JSON lines. Defaults to ``RIAKJSON_LOG_JSON``.
        use_color: Colorize text output. Defaults to on unless ``NO_COLOR`` is
            set or JSON output is selected.
        json_serializer: Replacement for the default ``orjson`` serializer.
        fmt: Format string for text output.
        datefmt: Date format for both text and JSON output.
        force: Replace a previously installed handler.
    """
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)

    if _has_riakjson_handler(logger) and not force:
        return

    for handler in list(logger.handlers):
        if isinstance(handler, RiakJsonHandler):
            logger.removeHandler(handler)
            handler.close()

    resolved_level = _resolve_level(level)
    logger.setLevel(resolved_level)

    resolved_use_json = use_json if use_json is not None else _read_bool_env(ENV_LOG_JSON)
    if use_color is not None:
        resolved_use_color = use_color
    elif os.getenv(ENV_NO_COLOR):
        resolved_use_color = False
    else:
        resolved_use_color = not resolved_use_json

    formatter: logging.Formatter
    if resolved_use_json:
        formatter = StructuredJSONFormatter(json_serializer, datefmt=datefmt)
    elif resolved_use_color:
        formatter = ColoredFormatter(fmt or DEFAULT_FORMAT, datefmt=datefmt)
    else:
        formatter = PlainFormatter(fmt or DEFAULT_FORMAT, datefmt=datefmt)

    handler = RiakJsonHandler()
    handler.setLevel(resolved_level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``riakjson`` namespace.

    Nothing is configured here: level and handlers come from the host
    application unless :func:`setup_logger` is called.
    """
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)


# Silences "no handlers" warnings without touching the application's config.
logging.getLogger(DEFAULT_LOGGER_NAME).addHandler(logging.NullHandler())


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "ColoredFormatter",
    "PlainFormatter",
    "RiakJsonHandler",
    "StructuredJSONFormatter",
    "get_logger",
    "setup_logger",
]
