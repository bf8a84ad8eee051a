"""structlog configuration for kvresolver.

Library modules log through stdlib ``logging`` and attach resolution
context (``scheme``, ``backend``, ``family``) via ``extra=``. This module
routes those records through structlog so the context lands as real
fields: JSON keys with ``log_json``, ``key=value`` pairs on the console.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from kvresolver.config.settings import ResolverSettings

# ``extra=`` keys promoted to structured fields.
RESOLUTION_FIELDS = ("scheme", "backend", "family", "schemes")


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route stdlib and structlog output through one stderr handler.

    Args:
        verbose: DEBUG for the ``kvresolver`` logger (each resolution is
            logged). When False, only WARNING+ (plugin problems).
        log_json: Use JSON renderer instead of console renderer.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(allow=RESOLUTION_FIELDS),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("kvresolver").setLevel(level)
    # Engine/pool chatter would drown out resolution lines.
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


def apply_logging_settings(settings: ResolverSettings) -> bool:
    """Configure logging from *settings* if it asks for anything non-default.

    Returns whether logging was (re)configured. Default settings leave the
    embedding application's logging untouched.
    """
    if not (settings.verbose or settings.log_json):
        return False
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)
    return True
