"""
Structured logging for the unit-constant generator.

Standard output carries the echoed generated source, so every log line is
written to standard error.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None)
            │
            ▼
        structlog processor chain:
          1. TimeStamper (iso)
          2. add_log_level, add_logger_name
          3. add_service_metadata
          4. JSONRenderer (non-tty or json_format=True)
             ConsoleRenderer (tty)

Examples:
    >>> from cefact_codegen.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG")
    >>> logger = get_logger(__name__)
    >>> logger.info("records_loaded", count=1842)

Tags:
    logging, structlog, observability, codegen
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "cefact-codegen"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


class _NamedPrintLogger(structlog.PrintLogger):
    """PrintLogger carrying the name passed to :func:`get_logger`."""

    def __init__(self, name: str | None = None):
        super().__init__(file=sys.stderr)
        self.name = name or _SERVICE_NAME


def _stderr_logger_factory(*args: Any) -> _NamedPrintLogger:
    """Logger bound to whatever sys.stderr is when the logger is created."""
    return _NamedPrintLogger(*args[:1])


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "cefact-codegen",
) -> None:
    """Configure structured logging for the generator.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stderr.isatty()

    shared_processors: list[Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> AbstractContextManager[None]:
    """Bind context to every log line emitted inside the ``with`` block."""
    return structlog.contextvars.bound_contextvars(**kwargs)


__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
]
