"""
Logging configuration for the Badminton Ledger project.

This module sets up structured logging with structlog on top of the
stdlib handlers declared in ``settings.LOGGING``.
"""

import structlog
from structlog.stdlib import LoggerFactory


def configure_logging(json_output: bool = True) -> None:
    """
    Configure structured logging for the application.

    Args:
        json_output: Render events as JSON lines (production) instead of
            the colourless key/value console format (development).
    """
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
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
