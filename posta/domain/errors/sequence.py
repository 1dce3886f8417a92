"""Sequence violation errors for dependency-gated journeys."""

from typing import Any, Optional

from posta.domain.exceptions import PostaError
from posta.domain.models.case import RoutingStatus


class SequenceViolationError(PostaError):
    """Raised when a task is attempted before its dependencies are completed.

    This is a normal, retryable block: it clears once the named dependency
    is completed. No case is created on this path; the rejection reports a
    BLOCKED routing status.

    Attributes:
        beneficiary_id: Whose journey blocked.
        task_id: The task that was attempted.
        reason: Human-readable reason naming the first unmet dependency.
        blocking_task_id: The first unmet dependency.
    """

    error_code = "SEQUENCE_VIOLATION"
    routing_status = RoutingStatus.BLOCKED

    def __init__(
        self,
        beneficiary_id: str,
        task_id: str,
        reason: str,
        blocking_task_id: Optional[str] = None,
    ) -> None:
        self.beneficiary_id = beneficiary_id
        self.task_id = task_id
        self.reason = reason
        self.blocking_task_id = blocking_task_id
        super().__init__(f"Prerequisites for {task_id} not met: {reason}")

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "beneficiary_id": self.beneficiary_id,
            "task_id": self.task_id,
            "reason": self.reason,
            "blocking_task_id": self.blocking_task_id,
            "routing_status": self.routing_status.value,
        }
