"""
Centralized structlog configuration for the worker service.

Logs are JSON lines on stdout carrying the service and environment.
"""

from __future__ import annotations

import logging

import structlog

from .config import settings


def _normalize_log_level(level: str | None, environment: str) -> int:
    if level:
        normalized = level.strip().upper()
    else:
        normalized = "INFO" if environment.lower() == "production" else "DEBUG"
    return logging.getLevelNamesMapping().get(normalized, logging.INFO)


def configure_logging() -> None:
    resolved_level = _normalize_log_level(settings.log_level, settings.environment)
    logging.basicConfig(level=resolved_level)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.EventRenamer("message"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolved_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


configure_logging()

logger = structlog.get_logger("fantamusike-worker").bind(
    service="fantamusike-worker",
    environment=settings.environment,
)
