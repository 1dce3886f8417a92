"""Domain errors for the Posta governance core.

Provides specific exception classes for each rejection category.
All exceptions inherit from PostaError.
"""

from posta.domain.errors.configuration import TaskTrackConfigError
from posta.domain.errors.consensus import (
    ConsensusError,
    SelfVerificationError,
    VerificationTargetNotFoundError,
)
from posta.domain.errors.integrity import DeviceBlacklistedError, IntegrityViolationError
from posta.domain.errors.sequence import SequenceViolationError
from posta.domain.errors.system import EscalatedToHumanReviewError
from posta.domain.errors.validation import TaskNotInPathError, ValidationError

__all__: list[str] = [
    "ConsensusError",
    "DeviceBlacklistedError",
    "EscalatedToHumanReviewError",
    "IntegrityViolationError",
    "SelfVerificationError",
    "SequenceViolationError",
    "TaskNotInPathError",
    "TaskTrackConfigError",
    "ValidationError",
    "VerificationTargetNotFoundError",
]
