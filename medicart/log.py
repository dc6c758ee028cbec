"""
Logging: structlog setup.

Call ``configure_logging`` once at startup; modules use ``structlog.get_logger()``.
"""

from __future__ import annotations

import logging

import structlog

from medicart.config import Settings


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Install the processor chain: level, ISO timestamp, renderer, filter."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_from(settings: Settings) -> None:
    configure_logging(settings.log_level, settings.log_json)


__all__ = ("configure_logging", "configure_from")
