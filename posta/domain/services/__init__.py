"""Pure domain services: deterministic functions with no hidden state."""

from posta.domain.services.ledger_hashing import canonical_json, compute_record_hash
from posta.domain.services.routing import (
    DEFAULT_FALLBACK_BODY_ID,
    DEFAULT_TRUST_THRESHOLD,
    RoutingDecision,
    RoutingReason,
    route,
    select_body,
)

__all__: list[str] = [
    "DEFAULT_FALLBACK_BODY_ID",
    "DEFAULT_TRUST_THRESHOLD",
    "RoutingDecision",
    "RoutingReason",
    "canonical_json",
    "compute_record_hash",
    "route",
    "select_body",
]
