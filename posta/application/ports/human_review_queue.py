"""Human review queue port.

Unexpected system errors are escalated here so a person can look at the
failed request while the process keeps serving others.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class HumanReviewItem:
    """A failed request awaiting human review.

    Attributes:
        operation: The operation that failed (e.g. "intake").
        error_type: Exception class name.
        error_message: Exception message.
        raised_at: When the failure happened.
        context: Identifiers needed to reproduce the request.
    """

    operation: str
    error_type: str
    error_message: str
    raised_at: datetime
    context: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class HumanReviewQueueProtocol(Protocol):
    """Queue of failures awaiting human review."""

    async def escalate(self, item: HumanReviewItem) -> str:
        """Enqueue an item and return its review id."""
        ...

    async def pending(self) -> list[tuple[str, HumanReviewItem]]:
        """Return queued items with their ids, oldest first."""
        ...
