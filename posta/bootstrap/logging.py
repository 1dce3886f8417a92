"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from typing import Optional

from structlog import get_logger

from posta.infrastructure.observability import configure_structlog

logger = get_logger(__name__)


def configure_logging(environment: Optional[str] = None) -> str:
    """Configure structlog for the host process and log the applied mode.

    Args:
        environment: production or development; POSTA_ENVIRONMENT when omitted.

    Returns:
        The environment applied.
    """
    applied = configure_structlog(environment)
    logger.info("logging_configured", environment=applied)
    return applied


__all__ = ["configure_logging"]
