"""Execution body selection for accepted cases.

Selection is a pure function of (case, bodies): no hidden state, no clock,
no randomness. The same inputs always produce the same body id.

Selection order:
1. The author's preferred body, if it is capable of every declared goal.
2. Among capable bodies, nearest first, the first with trust >= threshold.
3. The fallback body when nothing capable (or nothing trusted) is found.

A body is capable when its capability set is a superset of the case's
declared goal tags. Proximity is Euclidean distance between case and body
coordinates; a case without a location ranks every body as infinitely far,
so input order decides.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from posta.domain.models.case import Case
from posta.domain.models.execution_body import ExecutionBody

DEFAULT_FALLBACK_BODY_ID = "KHALISTAR"
DEFAULT_TRUST_THRESHOLD = 0.7


class RoutingReason(Enum):
    """Why a body was selected."""

    PREFERRED = "PREFERRED"
    NEAREST_TRUSTED = "NEAREST_TRUSTED"
    NO_CAPABLE_BODY = "NO_CAPABLE_BODY"
    NO_TRUSTED_BODY = "NO_TRUSTED_BODY"


@dataclass(frozen=True, eq=True)
class RoutingDecision:
    """Outcome of body selection.

    Attributes:
        body_id: The selected body, or the fallback id.
        reason: Which selection rule produced body_id.
        capable_body_ids: Capable bodies in proximity order.
    """

    body_id: str
    reason: RoutingReason
    capable_body_ids: tuple[str, ...] = ()

    @property
    def is_fallback(self) -> bool:
        return self.reason in (RoutingReason.NO_CAPABLE_BODY, RoutingReason.NO_TRUSTED_BODY)

    def to_dict(self) -> dict[str, Any]:
        return {
            "body_id": self.body_id,
            "reason": self.reason.value,
            "capable_body_ids": list(self.capable_body_ids),
        }


def _proximity(case: Case, body: ExecutionBody) -> float:
    if case.location is None:
        return math.inf
    return case.location.distance_to(body.location)


def select_body(
    case: Case,
    bodies: Sequence[ExecutionBody],
    *,
    fallback_body_id: str = DEFAULT_FALLBACK_BODY_ID,
    trust_threshold: float = DEFAULT_TRUST_THRESHOLD,
) -> RoutingDecision:
    """Select an execution body for a case and explain the choice.

    Args:
        case: The accepted case (goal tags, location, preference).
        bodies: Candidate bodies from the external registry.
        fallback_body_id: Returned when no capable, trusted body exists.
        trust_threshold: Minimum trust score for non-preferred bodies.

    Returns:
        RoutingDecision naming the body and the rule that chose it.
    """
    goals = case.goal_tags

    if case.preferred_body_id is not None:
        for body in bodies:
            if body.body_id == case.preferred_body_id and body.is_capable_of(goals):
                return RoutingDecision(
                    body_id=body.body_id,
                    reason=RoutingReason.PREFERRED,
                    capable_body_ids=(body.body_id,),
                )

    # sorted() is stable: equal distances keep registry order.
    capable = sorted(
        (body for body in bodies if body.is_capable_of(goals)),
        key=lambda body: _proximity(case, body),
    )
    capable_ids = tuple(body.body_id for body in capable)

    if not capable:
        return RoutingDecision(
            body_id=fallback_body_id,
            reason=RoutingReason.NO_CAPABLE_BODY,
            capable_body_ids=capable_ids,
        )

    for body in capable:
        if body.trust_score >= trust_threshold:
            return RoutingDecision(
                body_id=body.body_id,
                reason=RoutingReason.NEAREST_TRUSTED,
                capable_body_ids=capable_ids,
            )

    return RoutingDecision(
        body_id=fallback_body_id,
        reason=RoutingReason.NO_TRUSTED_BODY,
        capable_body_ids=capable_ids,
    )


def route(
    case: Case,
    bodies: Sequence[ExecutionBody],
    *,
    fallback_body_id: str = DEFAULT_FALLBACK_BODY_ID,
    trust_threshold: float = DEFAULT_TRUST_THRESHOLD,
) -> str:
    """Return the id of the execution body a case should be assigned to."""
    return select_body(
        case,
        bodies,
        fallback_body_id=fallback_body_id,
        trust_threshold=trust_threshold,
    ).body_id
