"""
Structured logging setup.

Library modules only call structlog.get_logger(__name__).
The CLI calls configure_logging once at startup. Logs go to stderr so
command output on stdout stays machine readable.
"""

from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(log_level: str = "WARNING", json_output: bool = False) -> None:
    """Configure stdlib logging and structlog processors."""
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
