"""Structured logging for the pricing service, built on structlog.

Every line carries the service name and version. Lines emitted while a
calculation runs also carry the requested scope and id, including those
logged by the override lookup and the repository.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Literal

import structlog
from structlog.typing import Processor

from rental_pricing import __version__

SERVICE_NAME = "rental-pricing"


def setup_logging(
    level: str = "INFO",
    format_type: Literal["json", "console"] = "console",
    service: str = SERVICE_NAME,
) -> None:
    """
    Configure structured logging for the service.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format_type: 'json' for production, 'console' for development
        service: Service name bound to every log line
    """
    log_level = getattr(logging, level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if format_type == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.rich_traceback,
        )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service, version=__version__)

    # Uvicorn and asyncpg log through the standard library
    logging.basicConfig(format="%(message)s", level=log_level, stream=sys.stdout)


@contextmanager
def calculation_context(scope: str, requested_id: Any) -> Iterator[None]:
    """Bind the priced subject to every log line emitted inside the block."""
    with structlog.contextvars.bound_contextvars(
        scope=scope, requested_id=str(requested_id)
    ):
        yield


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, usually named after the calling module."""
    return structlog.get_logger(name)
