"""Bootstrap wiring for the governance core.

Each getter builds its instance on first use from the GovernanceConfig
(read from the environment unless one is set) and caches it for the
process. Tests call reset_governance_core() between cases and may replace
individual collaborators with the set_* functions before the services are
built.
"""

from __future__ import annotations

from posta.application.ports.case_repository import CaseRepositoryProtocol
from posta.application.ports.device_integrity_repository import (
    DeviceIntegrityRepositoryProtocol,
)
from posta.application.ports.goal_classifier import GoalClassifierProtocol
from posta.application.ports.human_review_queue import HumanReviewQueueProtocol
from posta.application.ports.ledger_signer import LedgerSignerProtocol
from posta.application.ports.ledger_store import LedgerStoreProtocol
from posta.application.ports.localization import LocalizationProtocol
from posta.application.ports.time_authority import TimeAuthorityProtocol
from posta.application.services.consensus_verifier_service import ConsensusVerifierService
from posta.application.services.intake_service import IntakeService
from posta.application.services.integrity_guard_service import IntegrityGuardService
from posta.application.services.journey_graph_service import JourneyGraphService
from posta.application.services.ledger_service import LedgerService
from posta.application.services.routing_service import RoutingService
from posta.config.governance_config import GovernanceConfig
from posta.config.task_tracks import load_task_catalog
from posta.domain.models.journey import TaskCatalog
from posta.infrastructure.adapters.device_integrity_repository import (
    PersistentDeviceIntegrityRepository,
)
from posta.infrastructure.adapters.ed25519_signer import Ed25519LedgerSigner
from posta.infrastructure.adapters.in_memory import (
    InMemoryCaseRepository,
    InMemoryContentFingerprintStore,
    InMemoryHumanReviewQueue,
    InMemoryJourneyRepository,
    InMemoryLedgerStore,
)
from posta.infrastructure.adapters.json_file_store import JsonFileKeyValueStore
from posta.infrastructure.adapters.jsonl_ledger_store import JsonLinesLedgerStore
from posta.infrastructure.adapters.system_time_authority import SystemTimeAuthority

_config: GovernanceConfig | None = None
_task_catalog: TaskCatalog | None = None
_time_authority: TimeAuthorityProtocol | None = None
_device_repository: DeviceIntegrityRepositoryProtocol | None = None
_case_repository: CaseRepositoryProtocol | None = None
_ledger_store: LedgerStoreProtocol | None = None
_ledger_signer: LedgerSignerProtocol | None = None
_review_queue: HumanReviewQueueProtocol | None = None
_localization: LocalizationProtocol | None = None
_classifier: GoalClassifierProtocol | None = None

_integrity_guard: IntegrityGuardService | None = None
_journey_graph: JourneyGraphService | None = None
_ledger: LedgerService | None = None
_routing_service: RoutingService | None = None
_consensus_verifier: ConsensusVerifierService | None = None
_intake_service: IntakeService | None = None


def get_governance_config() -> GovernanceConfig:
    """Get governance configuration, read from the environment once."""
    global _config
    if _config is None:
        _config = GovernanceConfig.from_environment()
    return _config


def get_task_catalog() -> TaskCatalog:
    """Get the task catalog (POSTA_TASK_TRACKS_PATH or built-in tracks)."""
    global _task_catalog
    if _task_catalog is None:
        _task_catalog = load_task_catalog()
    return _task_catalog


def get_time_authority() -> TimeAuthorityProtocol:
    """Get time authority instance."""
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_device_repository() -> DeviceIntegrityRepositoryProtocol:
    """Get device registry and blacklist repository (JSON files)."""
    global _device_repository
    if _device_repository is None:
        storage = get_governance_config().storage
        _device_repository = PersistentDeviceIntegrityRepository(
            registry_store=JsonFileKeyValueStore(storage.device_registry_path),
            blacklist_store=JsonFileKeyValueStore(storage.blacklist_path),
        )
    return _device_repository


def get_case_repository() -> CaseRepositoryProtocol:
    """Get case repository instance."""
    global _case_repository
    if _case_repository is None:
        _case_repository = InMemoryCaseRepository()
    return _case_repository


def get_ledger_store() -> LedgerStoreProtocol:
    """Get ledger store (JSON-lines file when POSTA_LEDGER_PERSIST is on)."""
    global _ledger_store
    if _ledger_store is None:
        storage = get_governance_config().storage
        if storage.persist_ledger:
            _ledger_store = JsonLinesLedgerStore(storage.ledger_path)
        else:
            _ledger_store = InMemoryLedgerStore()
    return _ledger_store


def get_ledger_signer() -> LedgerSignerProtocol:
    """Get ledger signer (PEM key when configured, else an ephemeral key)."""
    global _ledger_signer
    if _ledger_signer is None:
        key_path = get_governance_config().storage.signing_key_path
        if key_path is not None:
            _ledger_signer = Ed25519LedgerSigner.from_pem_file(key_path)
        else:
            _ledger_signer = Ed25519LedgerSigner()
    return _ledger_signer


def get_review_queue() -> HumanReviewQueueProtocol:
    """Get human review queue instance."""
    global _review_queue
    if _review_queue is None:
        _review_queue = InMemoryHumanReviewQueue()
    return _review_queue


def get_integrity_guard() -> IntegrityGuardService:
    """Get integrity guard service."""
    global _integrity_guard
    if _integrity_guard is None:
        _integrity_guard = IntegrityGuardService(
            device_repository=get_device_repository(),
            fingerprint_store=InMemoryContentFingerprintStore(),
            time_authority=get_time_authority(),
            config=get_governance_config().integrity,
        )
    return _integrity_guard


def get_journey_graph() -> JourneyGraphService:
    """Get journey graph service."""
    global _journey_graph
    if _journey_graph is None:
        _journey_graph = JourneyGraphService(
            catalog=get_task_catalog(),
            journey_repository=InMemoryJourneyRepository(),
        )
    return _journey_graph


def get_ledger() -> LedgerService:
    """Get ledger service."""
    global _ledger
    if _ledger is None:
        _ledger = LedgerService(store=get_ledger_store(), signer=get_ledger_signer())
    return _ledger


def get_routing_service() -> RoutingService:
    """Get routing service."""
    global _routing_service
    if _routing_service is None:
        config = get_governance_config()
        _routing_service = RoutingService(
            ledger=get_ledger(),
            case_repository=get_case_repository(),
            time_authority=get_time_authority(),
            routing_config=config.routing,
            consensus_config=config.consensus,
        )
    return _routing_service


def get_consensus_verifier() -> ConsensusVerifierService:
    """Get consensus verifier service."""
    global _consensus_verifier
    if _consensus_verifier is None:
        _consensus_verifier = ConsensusVerifierService(
            ledger=get_ledger(),
            case_repository=get_case_repository(),
            time_authority=get_time_authority(),
        )
    return _consensus_verifier


def get_intake_service() -> IntakeService:
    """Get intake service."""
    global _intake_service
    if _intake_service is None:
        _intake_service = IntakeService(
            integrity_guard=get_integrity_guard(),
            journey_graph=get_journey_graph(),
            ledger=get_ledger(),
            case_repository=get_case_repository(),
            review_queue=get_review_queue(),
            time_authority=get_time_authority(),
            localization=_localization,
            classifier=_classifier,
        )
    return _intake_service


def reset_governance_core() -> None:
    """Reset all singleton instances for testing."""
    global _config, _task_catalog, _time_authority, _device_repository
    global _case_repository, _ledger_store, _ledger_signer, _review_queue
    global _localization, _classifier
    global _integrity_guard, _journey_graph, _ledger
    global _routing_service, _consensus_verifier, _intake_service

    _config = None
    _task_catalog = None
    _time_authority = None
    _device_repository = None
    _case_repository = None
    _ledger_store = None
    _ledger_signer = None
    _review_queue = None
    _localization = None
    _classifier = None
    _integrity_guard = None
    _journey_graph = None
    _ledger = None
    _routing_service = None
    _consensus_verifier = None
    _intake_service = None


def set_governance_config(config: GovernanceConfig) -> None:
    """Set custom configuration for testing."""
    global _config
    _config = config


def set_task_catalog(catalog: TaskCatalog) -> None:
    """Set custom task catalog for testing."""
    global _task_catalog
    _task_catalog = catalog


def set_time_authority(time_authority: TimeAuthorityProtocol) -> None:
    """Set custom time authority for testing."""
    global _time_authority
    _time_authority = time_authority


def set_device_repository(repository: DeviceIntegrityRepositoryProtocol) -> None:
    """Set custom device repository for testing."""
    global _device_repository
    _device_repository = repository


def set_ledger_signer(signer: LedgerSignerProtocol) -> None:
    """Set custom ledger signer."""
    global _ledger_signer
    _ledger_signer = signer


def set_localization(localization: LocalizationProtocol) -> None:
    """Wire a localization collaborator into intake."""
    global _localization
    _localization = localization


def set_goal_classifier(classifier: GoalClassifierProtocol) -> None:
    """Wire a goal classifier into intake."""
    global _classifier
    _classifier = classifier
