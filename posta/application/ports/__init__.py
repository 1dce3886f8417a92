"""Application ports - Abstract interfaces for infrastructure adapters.

Ports enable dependency inversion and make the governance services testable
with in-memory stores and stubs.
"""

from posta.application.ports.case_repository import CaseRepositoryProtocol
from posta.application.ports.content_fingerprint_store import ContentFingerprintStoreProtocol
from posta.application.ports.device_integrity_repository import (
    DeviceIntegrityRepositoryProtocol,
)
from posta.application.ports.goal_classifier import GoalClassifierProtocol
from posta.application.ports.human_review_queue import HumanReviewItem, HumanReviewQueueProtocol
from posta.application.ports.journey_repository import JourneyRepositoryProtocol
from posta.application.ports.key_value_store import KeyValueStoreProtocol
from posta.application.ports.ledger_signer import LedgerSignerProtocol, SignatureResult
from posta.application.ports.ledger_store import LedgerStoreProtocol
from posta.application.ports.localization import LocalizationProtocol, LocalizedText
from posta.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = [
    "CaseRepositoryProtocol",
    "ContentFingerprintStoreProtocol",
    "DeviceIntegrityRepositoryProtocol",
    "GoalClassifierProtocol",
    "HumanReviewItem",
    "HumanReviewQueueProtocol",
    "JourneyRepositoryProtocol",
    "KeyValueStoreProtocol",
    "LedgerSignerProtocol",
    "LedgerStoreProtocol",
    "LocalizationProtocol",
    "LocalizedText",
    "SignatureResult",
    "TimeAuthorityProtocol",
]
