"""structlog configuration for the governance core.

Two output modes, chosen by POSTA_ENVIRONMENT (default "production"):
- production: one JSON object per line
- development: coloured console output

Every entry carries an ISO timestamp, the level, the correlation id of the
current submission (when one is set) and whatever the service bound
(service, component, operation, case_id, ...).

Beneficiary message text never reaches the log: values under
REDACTED_FIELDS are replaced with their length.

Environment:
- POSTA_ENVIRONMENT: production | development
- POSTA_LOG_LEVEL: DEBUG, INFO, WARNING, ... (default INFO)
"""

import logging
import os
from typing import Any, Final, Optional, cast

import structlog
from structlog.typing import FilteringBoundLogger, Processor

from posta.infrastructure.observability.correlation import correlation_id_processor

ENVIRONMENT_ENV: Final[str] = "POSTA_ENVIRONMENT"
LOG_LEVEL_ENV: Final[str] = "POSTA_LOG_LEVEL"

# Event keys that may hold free text written by or about a beneficiary.
REDACTED_FIELDS: Final[frozenset[str]] = frozenset(
    {"raw_message", "description", "text"}
)


def redact_message_text(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace free-text fields with a length marker."""
    for key in REDACTED_FIELDS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = f"<redacted {len(value)} chars>"
    return event_dict


def resolve_environment(environment: Optional[str] = None) -> str:
    """Explicit environment, else POSTA_ENVIRONMENT, else production."""
    resolved = (environment or os.getenv(ENVIRONMENT_ENV) or "production").lower()
    if resolved not in ("production", "development"):
        raise ValueError(
            f"{ENVIRONMENT_ENV} must be 'production' or 'development', got {resolved!r}"
        )
    return resolved


def _log_level() -> int:
    level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def configure_structlog(environment: Optional[str] = None) -> str:
    """Configure structlog once at startup.

    Returns:
        The environment actually applied.
    """
    resolved = resolve_environment(environment)
    renderer: Processor
    if resolved == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            cast(Processor, correlation_id_processor),
            cast(Processor, redact_message_text),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return resolved


def get_logger_for_service(
    service_name: str, component: str
) -> FilteringBoundLogger:
    """Logger bound with the service name and its governance component."""
    return structlog.get_logger().bind(service=service_name, component=component)
