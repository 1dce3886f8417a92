"""Observability infrastructure for structured logging and correlation.

Usage:
    from posta.infrastructure.observability import (
        configure_structlog,
        set_correlation_id,
    )

    configure_structlog()  # POSTA_ENVIRONMENT, default production
    set_correlation_id(transaction_id)
"""

from posta.infrastructure.observability.correlation import (
    correlation_id_processor,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from posta.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
    redact_message_text,
)

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger_for_service",
    "redact_message_text",
    "set_correlation_id",
]
