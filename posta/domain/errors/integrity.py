"""Integrity violation errors.

Raised by intake when screening produced at least one HIGH flag. The
IntegrityGuard itself never raises for fraud signals; it returns flags and
the caller applies the blocking policy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from posta.domain.exceptions import PostaError

if TYPE_CHECKING:
    from posta.domain.models.integrity_flag import IntegrityFlag


class IntegrityViolationError(PostaError):
    """Raised when a submission carries a HIGH severity integrity flag.

    The case is rejected before creation. Future legitimate submissions from
    the same device may still succeed unless the device is blacklisted.

    Attributes:
        flags: Every flag raised by the screening, LOW ones included.
        beneficiary_id: Beneficiary named in the submission.
        device_id: Submitting device, if known.
    """

    error_code = "INTEGRITY_VIOLATION"

    def __init__(
        self,
        flags: list[IntegrityFlag],
        beneficiary_id: str,
        device_id: Optional[str] = None,
        message: str = "Intake blocked by integrity guardrails",
    ) -> None:
        self.flags = list(flags)
        self.beneficiary_id = beneficiary_id
        self.device_id = device_id
        super().__init__(message)

    @property
    def blocking_flags(self) -> list[IntegrityFlag]:
        return [flag for flag in self.flags if flag.is_blocking]

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "beneficiary_id": self.beneficiary_id,
            "device_id": self.device_id,
            "flags": [flag.to_dict() for flag in self.flags],
        }


class DeviceBlacklistedError(IntegrityViolationError):
    """Raised when the submitting device is permanently blacklisted.

    Not recoverable: every future submission from the device is rejected.
    """

    error_code = "DEVICE_BLACKLISTED"

    def __init__(
        self,
        flags: list[IntegrityFlag],
        beneficiary_id: str,
        device_id: str,
    ) -> None:
        super().__init__(
            flags,
            beneficiary_id,
            device_id,
            message="Access denied: device permanently flagged for repeated violations",
        )
