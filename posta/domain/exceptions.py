"""Base exception classes for the Posta domain layer."""

from typing import Any


class PostaError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so callers
    can separate governed rejections from unexpected system failures.

    Subclasses attach structured attributes describing the rejection and
    extend to_dict() so a caller or UI can explain the block to a human.
    """

    error_code: str = "POSTA_ERROR"

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Return a structured description of the rejection."""
        return {"error": self.error_code, "message": self.message}
