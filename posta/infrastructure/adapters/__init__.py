"""Production adapters for the governance ports."""

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

__all__: list[str] = [
    "Ed25519LedgerSigner",
    "InMemoryCaseRepository",
    "InMemoryContentFingerprintStore",
    "InMemoryHumanReviewQueue",
    "InMemoryJourneyRepository",
    "InMemoryLedgerStore",
    "JsonFileKeyValueStore",
    "JsonLinesLedgerStore",
    "PersistentDeviceIntegrityRepository",
    "SystemTimeAuthority",
]
