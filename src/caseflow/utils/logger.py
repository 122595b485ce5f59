"""
Logging Configuration

Structured logging for the case-management service, built on structlog.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from config.settings import settings

_configured = False


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Stamp every entry with the service name and deployment environment.
    """
    event_dict.setdefault("service", "caseflow")
    event_dict["environment"] = settings.environment
    return event_dict


def setup_logging(force: bool = False) -> structlog.BoundLogger:
    """
    Configure structlog and the stdlib root logger once per process.

    Args:
        force: Reconfigure even if logging was already set up

    Returns:
        Root structlog logger
    """
    global _configured
    if _configured and not force:
        return structlog.get_logger()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True

    return structlog.get_logger()


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()
