"""Execution body domain model.

An execution body is an organization able to fulfil a case. Bodies come from
an external registry and are read-only to the core.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

from posta.domain.models.case import GeoPoint


@dataclass(frozen=True, eq=True)
class ExecutionBody:
    """An organization that can be assigned cases.

    Attributes:
        body_id: Unique identifier.
        location: Where the body operates from.
        capabilities: Goal tags the body can fulfil.
        trust_score: Reputation in [0, 1].
        name: Optional display name.
    """

    body_id: str
    location: GeoPoint
    capabilities: frozenset[str]
    trust_score: float
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.body_id:
            raise ValueError("body_id must be non-empty")
        if not 0.0 <= self.trust_score <= 1.0:
            raise ValueError(f"trust_score must be within [0, 1], got {self.trust_score}")
        if not isinstance(self.capabilities, frozenset):
            object.__setattr__(self, "capabilities", frozenset(self.capabilities))

    def is_capable_of(self, goal_tags: Iterable[str]) -> bool:
        """True when the capability set is a superset of the given goal tags."""
        return self.capabilities.issuperset(goal_tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "body_id": self.body_id,
            "name": self.name,
            "location": self.location.to_dict(),
            "capabilities": sorted(self.capabilities),
            "trust_score": self.trust_score,
        }
