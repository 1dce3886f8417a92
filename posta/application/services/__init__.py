"""Application services for the governance core."""

from posta.application.services.consensus_verifier_service import ConsensusVerifierService
from posta.application.services.content_hash_service import Blake3ContentHashService
from posta.application.services.intake_service import (
    IntakeRequest,
    IntakeResult,
    IntakeService,
    SubmitterContext,
    SubmitterRole,
    detect_context,
    sanitize_description,
)
from posta.application.services.integrity_guard_service import IntegrityGuardService
from posta.application.services.journey_graph_service import JourneyGraphService
from posta.application.services.keyed_lock import KeyedLock
from posta.application.services.ledger_service import LedgerIntegrityReport, LedgerService
from posta.application.services.routing_service import RoutingService

__all__: list[str] = [
    "Blake3ContentHashService",
    "ConsensusVerifierService",
    "IntakeRequest",
    "IntakeResult",
    "IntakeService",
    "IntegrityGuardService",
    "JourneyGraphService",
    "KeyedLock",
    "LedgerIntegrityReport",
    "LedgerService",
    "RoutingService",
    "SubmitterContext",
    "SubmitterRole",
    "detect_context",
    "sanitize_description",
]
