"""Integrity flag domain models.

An integrity flag is the result of one fraud/integrity heuristic firing
against a submission. Flags are ephemeral result values: they are returned to
the caller, attached to rejections and logged, but never persisted as
entities.

Flags form a closed tagged variant. Each flag kind is its own class with a
fixed flag_type, so adding a new fraud signal means adding a FlagType member
and a matching subclass; FLAG_CLASSES is checked for exhaustiveness at import.

Caller policy:
- HIGH severity blocks intake
- LOW severity is informational and only marks the case FLAGGED
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar


class FlagType(Enum):
    """Kind of integrity signal."""

    DUPLICATE_CLAIM = "DUPLICATE_CLAIM"
    """Normalized message content was already submitted in this process."""

    IDENTITY_MISMATCH = "IDENTITY_MISMATCH"
    """Device is blacklisted or is used for too many distinct beneficiaries."""

    SUSPICIOUS_TONE = "SUSPICIOUS_TONE"
    """Device cooldown violated, or message matches the adversarial deny-list."""


class FlagSeverity(Enum):
    """Severity of an integrity flag."""

    LOW = "LOW"
    HIGH = "HIGH"


@dataclass(frozen=True, eq=True)
class IntegrityFlag:
    """Base class for all integrity flags.

    Never instantiated directly; use one of the concrete flag kinds.

    Attributes:
        severity: LOW (informational) or HIGH (blocks intake).
        timestamp: When the heuristic fired (UTC).
        reason: Human-readable explanation of why the flag fired.
    """

    flag_type: ClassVar[FlagType]

    severity: FlagSeverity
    timestamp: datetime
    reason: str = ""

    def __post_init__(self) -> None:
        """Reject direct instantiation of the base variant."""
        if type(self) is IntegrityFlag:
            raise TypeError("IntegrityFlag is abstract; use a concrete flag kind")
        if self.timestamp.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware (UTC)")

    @property
    def is_blocking(self) -> bool:
        """True when this flag must block intake."""
        return self.severity is FlagSeverity.HIGH

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging and rejection payloads."""
        return {
            "type": self.flag_type.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "reason": self.reason,
        }


@dataclass(frozen=True, eq=True)
class DuplicateClaimFlag(IntegrityFlag):
    """Same normalized message content seen earlier in this process."""

    flag_type: ClassVar[FlagType] = FlagType.DUPLICATE_CLAIM


@dataclass(frozen=True, eq=True)
class IdentityMismatchFlag(IntegrityFlag):
    """Device blacklisted, or device linked to too many beneficiaries."""

    flag_type: ClassVar[FlagType] = FlagType.IDENTITY_MISMATCH


@dataclass(frozen=True, eq=True)
class SuspiciousToneFlag(IntegrityFlag):
    """Cooldown violated (LOW) or adversarial input detected (HIGH)."""

    flag_type: ClassVar[FlagType] = FlagType.SUSPICIOUS_TONE


FLAG_CLASSES: dict[FlagType, type[IntegrityFlag]] = {
    FlagType.DUPLICATE_CLAIM: DuplicateClaimFlag,
    FlagType.IDENTITY_MISMATCH: IdentityMismatchFlag,
    FlagType.SUSPICIOUS_TONE: SuspiciousToneFlag,
}

_missing = set(FlagType) - set(FLAG_CLASSES)
if _missing:
    raise RuntimeError(f"Flag kinds without a variant class: {sorted(m.value for m in _missing)}")


def has_blocking_flag(flags: list[IntegrityFlag]) -> bool:
    """Return True if any flag in the list blocks intake."""
    return any(flag.is_blocking for flag in flags)
