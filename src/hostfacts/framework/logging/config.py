"""
structlog setup for hostfacts.

Events are rendered by structlog and written through the stdlib ``hostfacts``
logger to stderr, which leaves stdout to the collected facts. ``json`` is
meant for log shippers, ``console`` for people.

Level and format come from the arguments, else from ``HOSTFACTS_LOG_LEVEL``
and ``HOSTFACTS_LOG_FORMAT``, else WARNING and console.
"""

import logging
import os
import sys

import structlog
from structlog.types import Processor

from hostfacts.core.errors import ConfigError
from hostfacts.framework.logging.context import add_context_processor

ROOT_LOGGER = "hostfacts"
FORMATS = ("console", "json")

_state = {"configured": False}


def _processors(fmt: str) -> list[Processor]:
    chain: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_context_processor,
        structlog.processors.StackInfoRenderer(),
    ]
    if fmt == "json":
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return chain


def configure_logging(level: str | None = None, format: str | None = None, force: bool = False) -> None:
    """
    Route structlog through the ``hostfacts`` stdlib logger on stderr.

    Only the first call takes effect unless ``force`` is set; the CLI forces
    it so each invocation binds to the current stderr.

    Raises:
        ConfigError: unknown level or format
    """
    if _state["configured"] and not force:
        return

    level_name = (level or os.environ.get("HOSTFACTS_LOG_LEVEL") or "WARNING").upper()
    fmt = (format or os.environ.get("HOSTFACTS_LOG_FORMAT") or "console").lower()

    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ConfigError(f"Unknown log level: {level_name}")
    if fmt not in FORMATS:
        raise ConfigError(f"Unknown log format: {fmt} (expected one of {', '.join(FORMATS)})")

    structlog.configure(
        processors=_processors(fmt),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger(ROOT_LOGGER)
    root.handlers[:] = [handler]
    root.setLevel(numeric_level)
    root.propagate = False

    _state["configured"] = True
