"""Builders for governance objects used across tests."""

from __future__ import annotations

from typing import Optional

from posta.application.ports.ledger_store import LedgerStoreProtocol
from posta.application.services.consensus_verifier_service import ConsensusVerifierService
from posta.application.services.ledger_service import LedgerService
from posta.application.services.routing_service import RoutingService
from posta.config.governance_config import ConsensusConfig
from posta.domain.models.case import Case, GeoPoint
from posta.domain.models.execution_body import ExecutionBody
from posta.infrastructure.adapters.ed25519_signer import Ed25519LedgerSigner
from posta.infrastructure.adapters.in_memory import InMemoryCaseRepository, InMemoryLedgerStore
from tests.helpers.fake_time_authority import FakeTimeAuthority


def make_case(
    case_id: str = "case_1",
    *,
    beneficiary_id: str = "ben_1",
    author_id: str = "ben_1",
    goal_tags: tuple[str, ...] = ("SDG_4",),
    location: Optional[GeoPoint] = None,
    preferred_body_id: Optional[str] = None,
) -> Case:
    return Case(
        case_id=case_id,
        beneficiary_id=beneficiary_id,
        author_id=author_id,
        description="I need school fees",
        goal_tags=goal_tags,
        location=location,
        preferred_body_id=preferred_body_id,
    )


def make_body(
    body_id: str,
    *,
    lat: float = 0.0,
    lng: float = 0.0,
    capabilities: tuple[str, ...] = ("SDG_4",),
    trust_score: float = 0.9,
) -> ExecutionBody:
    return ExecutionBody(
        body_id=body_id,
        location=GeoPoint(lat, lng),
        capabilities=frozenset(capabilities),
        trust_score=trust_score,
    )


class LedgerHarness:
    """Ledger, routing and consensus wired over in-memory adapters."""

    def __init__(
        self,
        time_authority: Optional[FakeTimeAuthority] = None,
        required_verifiers: int = 2,
        store: Optional[LedgerStoreProtocol] = None,
    ) -> None:
        self.time = time_authority or FakeTimeAuthority()
        self.store = store or InMemoryLedgerStore()
        self.signer = Ed25519LedgerSigner()
        self.cases = InMemoryCaseRepository()
        self.ledger = LedgerService(store=self.store, signer=self.signer)
        self.routing = RoutingService(
            ledger=self.ledger,
            case_repository=self.cases,
            time_authority=self.time,
            consensus_config=ConsensusConfig(required_verifiers=required_verifiers),
        )
        self.consensus = ConsensusVerifierService(
            ledger=self.ledger,
            case_repository=self.cases,
            time_authority=self.time,
        )
