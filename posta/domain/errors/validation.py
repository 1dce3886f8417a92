"""Validation errors: caller misuse, rejected before any state change."""

from typing import Any

from posta.domain.exceptions import PostaError


class ValidationError(PostaError):
    """Raised when a required identifier is missing or malformed.

    A validation error is always the caller's fault. It is raised before any
    state is touched, so the call can be corrected and retried.

    Attributes:
        field_name: The offending input field.
    """

    error_code = "VALIDATION_ERROR"

    def __init__(self, field_name: str, message: str | None = None) -> None:
        self.field_name = field_name
        super().__init__(message or f"Missing required identifier: {field_name}")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field_name}


class TaskNotInPathError(ValidationError):
    """Raised when a task id belongs to no configured task track."""

    error_code = "TASK_NOT_IN_PATH"

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__("task_id", f"Task {task_id!r} not in path")
