"""Structured logging and OpenTelemetry spans for cds-core.

This module provides:
- Structured logging setup via structlog
- OpenTelemetry span helpers for dump operations
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer

TRACER_NAME = "cds.runtime"

logger = structlog.get_logger(__name__)

_tracer: Tracer | None = None


def get_tracer() -> Tracer:
    """Get the OpenTelemetry tracer for cds-core.

    Returns:
        OpenTelemetry Tracer instance (a no-op tracer unless an SDK is
        configured by the host application).
    """
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def configure_logging(
    *,
    log_level: str = "INFO",
    json_format: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for cds-runtime.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output JSON. If False, output human-readable.
        add_timestamp: If True, add ISO timestamp to log entries.

    Example:
        >>> configure_logging(log_level="DEBUG")
    """
    processors: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
    )


@contextmanager
def span(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Span]:
    """Create an OpenTelemetry span with structured start/end logging.

    Exceptions are recorded on the span and re-raised unchanged.

    Args:
        name: Span name (e.g., "dump_static_archive").
        attributes: Optional span attributes.

    Yields:
        OpenTelemetry Span instance.

    Example:
        >>> with span("dump_dynamic_archive", attributes={"archive_file": "app.jsa"}):
        ...     vm.dump_dynamic_archive("app.jsa")
    """
    attrs = attributes or {}
    log = logger.bind(span=name, **attrs)
    start = time.monotonic()

    with get_tracer().start_as_current_span(
        name,
        attributes=attrs,
        record_exception=False,
        set_status_on_exception=False,
    ) as current:
        log.debug("span_started")
        try:
            yield current
        except Exception as e:
            current.record_exception(e)
            current.set_status(Status(StatusCode.ERROR, str(e)))
            log.error(
                "span_failed",
                error_type=type(e).__name__,
                duration_ms=int((time.monotonic() - start) * 1000),
            )
            raise
        current.set_status(Status(StatusCode.OK))
        log.debug("span_completed", duration_ms=int((time.monotonic() - start) * 1000))
