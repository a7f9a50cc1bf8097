"""
hostfacts logging: structlog events carrying session and plugin context.

Usage:
    from hostfacts.framework.logging import configure_logging, get_logger, log_step

    configure_logging(level="INFO")
    log = get_logger(__name__)

    with log_step("plugin.run", plugin="Kernel"):
        plugin.run()
"""

from hostfacts.framework.logging.config import configure_logging
from hostfacts.framework.logging.context import (
    LogContext,
    add_context_processor,
    bind_context,
    clear_context,
    context_scope,
    get_context,
    get_logger,
)
from hostfacts.framework.logging.timing import Span, log_step

__all__ = [
    "configure_logging",
    "get_logger",
    "LogContext",
    "get_context",
    "bind_context",
    "clear_context",
    "context_scope",
    "add_context_processor",
    "Span",
    "log_step",
]
