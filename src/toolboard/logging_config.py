"""structlog setup.

Modules just call `structlog.get_logger()` and log event-style names with
keyword context. This only sets the level filter; the default processor
chain already merges contextvars, so the request_id bound by
RequestIdMiddleware shows up on every line.
"""

import logging

import structlog


def configure_logging(level: str = "info") -> None:
    """Configure structlog to drop events below `level`."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
    )
