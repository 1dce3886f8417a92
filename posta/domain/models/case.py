"""Case domain models.

A case is a tracked claim of aid needed or delivered. It is created at
intake, mutated by routing and by consensus verification, and never
physically deleted: terminal cases are retained for audit.

State machine:
    UNASSIGNED --(routing)--> ASSIGNED / PENDING --(quorum per goal)--> VERIFIED

BLOCKED is only reported for a failed sequence check before a case exists.
VERIFIED is terminal.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class RoutingStatus(Enum):
    """Routing state of a case."""

    UNASSIGNED = "UNASSIGNED"
    ASSIGNED = "ASSIGNED"
    BLOCKED = "BLOCKED"


class VerificationStatus(Enum):
    """Verification state of a case."""

    PENDING = "PENDING"
    FLAGGED = "FLAGGED"
    VERIFIED = "VERIFIED"


@dataclass(frozen=True, eq=True)
class GeoPoint:
    """A latitude/longitude pair.

    Distances are plain Euclidean distances in degree space, which is what
    proximity ranking needs; they are not geodesic distances.
    """

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError(f"Coordinates must be finite, got ({self.lat}, {self.lng})")

    def distance_to(self, other: GeoPoint) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.lat - other.lat, self.lng - other.lng)

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass
class VerificationRecord:
    """Quorum state for one goal tag of one case.

    received_verifications keeps first-seen order and never holds duplicates
    or the case author. consensus_reached only ever moves from False to True.

    Attributes:
        goal_tag: The goal this record confirms (e.g. "SDG_4").
        required_verifiers: Quorum threshold (distinct non-author verifiers).
        received_verifications: Distinct verifier ids, in arrival order.
        consensus_reached: Whether the quorum has been met.
        routed_at: When the record was opened by routing.
        verified_at: When consensus was reached.
    """

    goal_tag: str
    required_verifiers: int
    received_verifications: list[str] = field(default_factory=list)
    consensus_reached: bool = False
    routed_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.goal_tag:
            raise ValueError("goal_tag must be non-empty")
        if self.required_verifiers < 1:
            raise ValueError(
                f"required_verifiers must be at least 1, got {self.required_verifiers}"
            )

    @property
    def verification_count(self) -> int:
        return len(self.received_verifications)

    @property
    def has_quorum(self) -> bool:
        return self.verification_count >= self.required_verifiers

    def add_verifier(self, verifier_id: str) -> bool:
        """Add a verifier id if unseen.

        Returns:
            True if the id was added, False if it was already present.
        """
        if verifier_id in self.received_verifications:
            return False
        self.received_verifications.append(verifier_id)
        return True

    def mark_consensus(self, at: datetime) -> None:
        """Set consensus_reached; never reverses."""
        if not self.consensus_reached:
            self.consensus_reached = True
            self.verified_at = at

    def to_dict(self) -> dict[str, Any]:
        return {
            "goal_tag": self.goal_tag,
            "required_verifiers": self.required_verifiers,
            "received_verifications": list(self.received_verifications),
            "consensus_reached": self.consensus_reached,
            "routed_at": self.routed_at.isoformat() if self.routed_at else None,
            "verified_at": self.verified_at.isoformat() if self.verified_at else None,
        }


@dataclass(frozen=True, eq=True)
class CaseTrailEntry:
    """One entry in a case's own audit trail.

    The trail mirrors ledger commits (content_hash set) and also records
    case-local events such as individual verifier approvals.
    """

    action: str
    actor_id: str
    timestamp: datetime
    note: str = ""
    content_hash: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "actor_id": self.actor_id,
            "timestamp": self.timestamp.isoformat(),
            "note": self.note,
            "content_hash": self.content_hash,
        }


@dataclass
class Case:
    """A humanitarian-aid claim moving through intake, routing and verification.

    Attributes:
        case_id: Unique identifier (e.g. "case_1a2b3c4d").
        beneficiary_id: The person the aid is for.
        author_id: Who submitted the claim; never counts toward its quorum.
        description: Sanitized claim text.
        goal_tags: Declared goal tags; routing and quorum are per tag.
        location: Where the aid is needed, if known.
        task_id: Journey task this claim advances.
        preferred_body_id: Executing body requested by the author.
        assigned_body_id: Executing body chosen by routing.
        routing_status: UNASSIGNED until routed.
        verification_status: PENDING, FLAGGED (LOW flags at intake) or VERIFIED.
        verification_records: One record per goal tag, opened by routing.
        audit_trail: Case-local trail of lifecycle events.
        reporting_tags: Tags attached by the classification collaborator.
        created_at: When the case was created.
    """

    case_id: str
    beneficiary_id: str
    author_id: str
    description: str
    goal_tags: tuple[str, ...] = ()
    location: Optional[GeoPoint] = None
    task_id: Optional[str] = None
    preferred_body_id: Optional[str] = None
    assigned_body_id: Optional[str] = None
    routing_status: RoutingStatus = RoutingStatus.UNASSIGNED
    verification_status: VerificationStatus = VerificationStatus.PENDING
    verification_records: dict[str, VerificationRecord] = field(default_factory=dict)
    audit_trail: list[CaseTrailEntry] = field(default_factory=list)
    reporting_tags: tuple[str, ...] = ()
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.case_id:
            raise ValueError("case_id must be non-empty")
        if not self.beneficiary_id:
            raise ValueError("beneficiary_id must be non-empty")
        if not self.author_id:
            raise ValueError("author_id must be non-empty")
        # Declared tags are a set in meaning; keep first-seen order.
        self.goal_tags = tuple(dict.fromkeys(self.goal_tags))

    @property
    def is_verified(self) -> bool:
        return self.verification_status is VerificationStatus.VERIFIED

    def record_for(self, goal_tag: str) -> Optional[VerificationRecord]:
        """Return the verification record for a goal tag, if opened."""
        return self.verification_records.get(goal_tag)

    def all_goals_verified(self) -> bool:
        """True when every opened verification record has consensus."""
        return bool(self.verification_records) and all(
            record.consensus_reached for record in self.verification_records.values()
        )

    def append_trail(self, entry: CaseTrailEntry) -> None:
        self.audit_trail.append(entry)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "case_id": self.case_id,
            "beneficiary_id": self.beneficiary_id,
            "author_id": self.author_id,
            "description": self.description,
            "goal_tags": list(self.goal_tags),
            "location": self.location.to_dict() if self.location else None,
            "task_id": self.task_id,
            "preferred_body_id": self.preferred_body_id,
            "assigned_body_id": self.assigned_body_id,
            "routing_status": self.routing_status.value,
            "verification_status": self.verification_status.value,
            "verification_records": {
                tag: record.to_dict() for tag, record in self.verification_records.items()
            },
            "audit_trail": [entry.to_dict() for entry in self.audit_trail],
            "reporting_tags": list(self.reporting_tags),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
