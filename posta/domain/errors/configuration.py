"""Configuration errors."""

from posta.domain.exceptions import PostaError


class TaskTrackConfigError(PostaError):
    """Raised when a task track configuration file is unreadable or invalid."""

    error_code = "TASK_TRACK_CONFIG_ERROR"
