"""System error escalated to human review."""

from typing import Any

from posta.domain.exceptions import PostaError


class EscalatedToHumanReviewError(PostaError):
    """Raised when an unexpected failure was logged and sent to human review.

    The individual request fails; the process keeps serving others. The
    original exception is chained as __cause__.

    Attributes:
        operation: The operation that failed.
        review_item_id: Identifier of the human-review queue item.
    """

    error_code = "ESCALATED_TO_HUMAN_REVIEW"

    def __init__(self, operation: str, review_item_id: str) -> None:
        self.operation = operation
        self.review_item_id = review_item_id
        super().__init__(
            f"System error during {operation}: escalated to human review ({review_item_id})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "operation": self.operation,
            "review_item_id": self.review_item_id,
        }
