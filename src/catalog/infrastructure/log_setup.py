"""Loguru configuration.

Replaces the default sink with one stderr sink (plain or JSON) and routes
stdlib ``logging`` records, such as SQLAlchemy's and redis', into loguru.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

from catalog.infrastructure.config import Settings

_PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> {extra}"
)


class InterceptHandler(logging.Handler):
    """Redirect standard 'logging' records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=6, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def configure_logging(settings: Settings) -> None:
    logger.remove()
    debug_traces = not settings.is_production
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=_PLAIN_FORMAT if settings.log_format == "plain" else "{message}",
        serialize=settings.log_format == "json",
        colorize=settings.log_format == "plain",
        backtrace=debug_traces,
        diagnose=debug_traces,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
