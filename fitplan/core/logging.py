import logging
import sys
import time
from contextlib import contextmanager
from typing import IO, Any, Iterator

import structlog

from fitplan.config.settings import get_settings

# Applied to structlog events and to stdlib records from loaders and services alike
_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def configure_logging(stream: IO[str] | None = None):
    """Configure structured logging with structlog.

    Stdlib loggers (``logging.getLogger(__name__)``) are routed through the
    same processors, so every line is JSON and carries the request id. Debug
    mode switches to the console renderer. Output goes to ``stream``, stdout
    by default.
    """
    settings = get_settings()
    stream = stream or sys.stdout
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    renderer = structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*_SHARED_PROCESSORS, structlog.stdlib.add_logger_name],
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def add_log_context(**kwargs: Any) -> None:
    """Add context to all future log entries."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context() -> None:
    """Clear all log context."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_timing(
    logger: structlog.stdlib.BoundLogger,
    event: str,
    slow_ms: float | None = None,
    slow_event: str | None = None,
    **fields: Any,
) -> Iterator[dict[str, Any]]:
    """Log ``event`` with ``duration_ms`` when the block finishes.

    The yielded dict collects fields only known inside the block. A run over
    ``slow_ms`` also logs ``slow_event`` (default ``<event>_slow``) as a
    warning. Nothing is logged if the block raises.
    """
    started = time.perf_counter()
    extra: dict[str, Any] = {}
    yield extra
    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(event, **fields, **extra, duration_ms=duration_ms)
    if slow_ms is not None and duration_ms > slow_ms:
        logger.warning(
            slow_event or f"{event}_slow",
            **extra,
            duration_ms=duration_ms,
            threshold_ms=slow_ms,
        )
