"""
Structured logging for the store.

Store operations log through structlog; pymongo and motor log through the
standard library. configure_logging() puts both on one stream at one level
so driver diagnostics (server selection, pool events) sit next to the
store's own events.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from docstore.config import Settings


# Driver loggers that follow the store's level
DRIVER_LOGGERS = ("pymongo", "motor")


def resolve_level(settings: "Settings") -> int:
    """DEBUG overrides log_level so a debug run also shows driver chatter."""
    if settings.debug:
        return logging.DEBUG
    return logging.getLevelName(settings.log_level)


def configure_logging(settings: Optional["Settings"] = None) -> None:
    """
    Configure structlog and the driver loggers from settings.

    Development: Human-readable colored output
    Otherwise: JSON output for log aggregation systems

    Args:
        settings: Application settings; defaults to the cached settings
    """
    if settings is None:
        from docstore.config import get_settings

        settings = get_settings()

    level = resolve_level(settings)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.is_development:
        renderer: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderer = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(name)s %(levelname)s %(message)s"))
    for name in DRIVER_LOGGERS:
        driver_logger = logging.getLogger(name)
        driver_logger.setLevel(level)
        driver_logger.handlers[:] = [handler]
        driver_logger.propagate = False


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger, optionally bound to context such as a namespace.

    Usage:
        logger = get_logger(__name__, database="docstore")
        logger.info("Store opened", namespace="tasks")
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
