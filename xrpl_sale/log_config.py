"""Structured logging setup."""

import logging

import structlog


def configure_logging(debug: bool = False, json_output: bool = False) -> None:
    """Configure structlog for applications and the CLI.

    The SDK itself only obtains loggers; calling this is left to the
    embedding application.

    Args:
        debug: Emit debug events, including request/response bodies when the
            client runs with ``debug=True``
        json_output: Render events as JSON instead of key/value console lines
    """
    renderer = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        cache_logger_on_first_use=False,
    )
