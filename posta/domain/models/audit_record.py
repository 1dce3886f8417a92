"""Audit record domain models for the case ledger.

An AuditDraft describes one lifecycle transition before it is committed.
Committing computes its content hash and signature and produces an
immutable AuditRecord.

The content hash covers only the record's own fields (timestamp included).
It does not cover the previous record's hash, so integrity is per record:
reordering or deleting whole records is not detectable from hashes alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class CaseAction(Enum):
    """Lifecycle transitions recorded in the ledger."""

    INTAKE = "INTAKE"
    ROUTED = "ROUTED"
    CONSENSUS_REACHED = "CONSENSUS_REACHED"
    VERIFIED = "VERIFIED"


# Case-local trail action for an individual approval (not a ledger action).
VERIFIER_APPROVED = "VERIFIER_APPROVED"


@dataclass(frozen=True, eq=True)
class AuditDraft:
    """A lifecycle transition awaiting commit.

    Attributes:
        timestamp: When the transition happened (UTC).
        case_id: The case that transitioned.
        action: The transition kind.
        actor_id: Who caused it (author, verifier, or "SYSTEM:<service>").
        previous_state: State before the transition.
        new_state: State after the transition.
    """

    timestamp: datetime
    case_id: str
    action: CaseAction
    actor_id: str
    previous_state: str
    new_state: str

    def __post_init__(self) -> None:
        if self.timestamp.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware (UTC)")
        if not self.case_id:
            raise ValueError("case_id must be non-empty")
        if not self.actor_id:
            raise ValueError("actor_id must be non-empty")

    def hashable_content(self) -> dict[str, Any]:
        """Return the fields covered by the content hash."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "case_id": self.case_id,
            "action": self.action.value,
            "actor_id": self.actor_id,
            "previous_state": self.previous_state,
            "new_state": self.new_state,
        }


@dataclass(frozen=True, eq=True)
class AuditRecord:
    """A committed, immutable ledger entry.

    Attributes:
        timestamp: When the transition happened (UTC).
        case_id: The case that transitioned.
        action: The transition kind.
        actor_id: Who caused it.
        previous_state: State before the transition.
        new_state: State after the transition.
        content_hash: SHA-256 hex digest of the canonical record content.
        signature: Hex-encoded signature over content_hash.
        signing_key_id: Identifier of the signing key.
    """

    timestamp: datetime
    case_id: str
    action: CaseAction
    actor_id: str
    previous_state: str
    new_state: str
    content_hash: str
    signature: str
    signing_key_id: str

    @classmethod
    def from_draft(
        cls,
        draft: AuditDraft,
        content_hash: str,
        signature: str,
        signing_key_id: str,
    ) -> AuditRecord:
        return cls(
            timestamp=draft.timestamp,
            case_id=draft.case_id,
            action=draft.action,
            actor_id=draft.actor_id,
            previous_state=draft.previous_state,
            new_state=draft.new_state,
            content_hash=content_hash,
            signature=signature,
            signing_key_id=signing_key_id,
        )

    @property
    def draft(self) -> AuditDraft:
        """The uncommitted view of this record, used to recompute its hash."""
        return AuditDraft(
            timestamp=self.timestamp,
            case_id=self.case_id,
            action=self.action,
            actor_id=self.actor_id,
            previous_state=self.previous_state,
            new_state=self.new_state,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON persistence."""
        return {
            **self.draft.hashable_content(),
            "content_hash": self.content_hash,
            "signature": self.signature,
            "signing_key_id": self.signing_key_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditRecord:
        """Rebuild a record from its to_dict() form."""
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            case_id=data["case_id"],
            action=CaseAction(data["action"]),
            actor_id=data["actor_id"],
            previous_state=data["previous_state"],
            new_state=data["new_state"],
            content_hash=data["content_hash"],
            signature=data["signature"],
            signing_key_id=data["signing_key_id"],
        )
