"""Logging configuration.

Single entry point for structured logging (structlog on top of stdlib
logging). Level and renderer come from `AppSettings.log_level` and
`AppSettings.log_format`.

Usage:
    from core.logging_config import configure_logging
    configure_logging(level="DEBUG", fmt="json")
"""

from __future__ import annotations

import logging
import sys
from typing import Literal

import structlog
from structlog.types import Processor

_configured = False


def configure_logging(
    level: str = "INFO",
    fmt: Literal["console", "json"] = "console",
    *,
    force: bool = False,
) -> None:
    """Configure structlog once per process; later calls are no-ops unless `force`."""

    global _configured

    if _configured and not force:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.StackInfoRenderer(),
    ]

    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
        force=True,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    _configured = True
