"""Logging configuration for the lip-sync studio.

Every module logs through ``structlog.get_logger(__name__)`` with keyword
context (``logger.info("jobs.submitted", job_id=...)``). Events are filtered
by the stdlib level from ``AppConfig.log_level``; keyword context is rendered
into a single JSON message rather than into ``LogRecord`` attributes.
"""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog for the whole service."""
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
