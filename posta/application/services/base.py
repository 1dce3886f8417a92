"""Logging mixin shared by the governance services.

Each service binds its class name and governance component once
("integrity", "journey", "routing", "consensus", "ledger", "intake") and
binds per-call context through _log_operation. The correlation id of the
current submission is added to every entry by the structlog processor, so
services do not bind it themselves.
"""

from structlog.typing import FilteringBoundLogger

from posta.infrastructure.observability.logging import get_logger_for_service


class LoggingMixin:
    """Structured logging for services.

    Attributes:
        _log: Logger bound with service and component.
    """

    _log: FilteringBoundLogger

    def _init_logger(self, component: str) -> None:
        self._log = get_logger_for_service(type(self).__name__, component=component)

    def _log_operation(
        self, operation: str, **context: object
    ) -> FilteringBoundLogger:
        """Logger for one call, bound with the operation name and context."""
        return self._log.bind(operation=operation, **context)
