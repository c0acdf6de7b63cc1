"""Structured logging for the character progression engine.

Every engine module logs through structlog with key/value events
(``logger.info("Item equipped", item="Longsword", slot="main-hand")``).
Logging is left unconfigured on import; applications call
``configure_logging`` once, and any argument left as None is read from
the engine settings.

Example:
    >>> from char_engine.core.logging import character_context, configure_logging, get_logger
    >>> configure_logging(level="DEBUG")
    >>> logger = get_logger(__name__)
    >>> with character_context("Mira"):
    ...     logger.info("Short rest taken", sorcery="3/5")
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_engine_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every entry with the engine name and version."""
    from char_engine import __version__

    event_dict.setdefault("app", "char_engine")
    event_dict.setdefault("engine_version", __version__)
    return event_dict


def flatten_enums(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace enum members (stats, slots, resources) with their plain values.

    Keeps console output readable (``stat=int`` rather than
    ``stat=<Stat.INT: 'int'>``) and JSON output stable.
    """
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, (list, tuple)) and any(isinstance(v, Enum) for v in value):
            event_dict[key] = [v.value if isinstance(v, Enum) else v for v in value]
    return event_dict


def _resolve_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(
    *,
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure engine-wide logging.

    Args:
        level: Logging level name. Defaults to ``Settings.log_level``.
        json_format: JSON lines instead of console output. Defaults to
            ``Settings.log_json``.
        log_file: Optional path that also receives stdlib log records.

    Example:
        >>> configure_logging(level="DEBUG", json_format=True)
    """
    if level is None or json_format is None:
        from char_engine.core.config import get_settings

        settings = get_settings()
        level = settings.log_level if level is None else level
        json_format = settings.log_json if json_format is None else json_format

    numeric_level = _resolve_level(level)
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_engine_context,
        flatten_enums,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: Processor
    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format=_STDLIB_FORMAT, level=numeric_level, stream=sys.stdout, force=True)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(_STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key/values included in every subsequent log entry."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def character_context(character_name: str, **extra: Any) -> Iterator[None]:
    """Tag every entry logged inside the block with the character's name.

    Example:
        >>> with character_context("Brom", session="ember-keep"):
        ...     hero.level_up("str")
    """
    with structlog.contextvars.bound_contextvars(character=character_name, **extra):
        yield


__all__ = [
    "add_engine_context",
    "flatten_enums",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "character_context",
]
