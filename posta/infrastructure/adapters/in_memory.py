"""In-memory adapters for process-scoped state.

These are the production implementations for state the core keeps only for
the process lifetime (message fingerprints, journeys, cases, the review
queue, and the ledger when persistence is off). They are also what tests
wire in.
"""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from posta.application.ports.human_review_queue import HumanReviewItem
from posta.domain.models.audit_record import AuditRecord
from posta.domain.models.case import Case
from posta.domain.models.journey import Journey


class InMemoryContentFingerprintStore:
    """ContentFingerprintStoreProtocol over a set."""

    def __init__(self) -> None:
        self._fingerprints: set[bytes] = set()

    async def add_if_absent(self, fingerprint: bytes) -> bool:
        if fingerprint in self._fingerprints:
            return False
        self._fingerprints.add(fingerprint)
        return True

    async def contains(self, fingerprint: bytes) -> bool:
        return fingerprint in self._fingerprints

    def __len__(self) -> int:
        return len(self._fingerprints)


class InMemoryJourneyRepository:
    """JourneyRepositoryProtocol over a dict keyed by (beneficiary, goal tag)."""

    def __init__(self) -> None:
        self._journeys: dict[tuple[str, str], Journey] = {}

    async def get(self, beneficiary_id: str, goal_tag: str) -> Optional[Journey]:
        return self._journeys.get((beneficiary_id, goal_tag))

    async def save(self, journey: Journey) -> None:
        self._journeys[(journey.beneficiary_id, journey.goal_tag)] = journey


class InMemoryCaseRepository:
    """CaseRepositoryProtocol over an insertion-ordered dict."""

    def __init__(self) -> None:
        self._cases: dict[str, Case] = {}

    async def save(self, case: Case) -> None:
        self._cases[case.case_id] = case

    async def get(self, case_id: str) -> Optional[Case]:
        return self._cases.get(case_id)

    async def list_by_beneficiary(self, beneficiary_id: str) -> list[Case]:
        return [c for c in self._cases.values() if c.beneficiary_id == beneficiary_id]


class InMemoryLedgerStore:
    """LedgerStoreProtocol over a list."""

    def __init__(self) -> None:
        self._records: list[AuditRecord] = []

    async def append(self, record: AuditRecord) -> None:
        self._records.append(record)

    async def list_all(self) -> list[AuditRecord]:
        return list(self._records)

    async def list_for_case(self, case_id: str) -> list[AuditRecord]:
        return [r for r in self._records if r.case_id == case_id]


class InMemoryHumanReviewQueue:
    """HumanReviewQueueProtocol over a list."""

    def __init__(self) -> None:
        self._items: list[tuple[str, HumanReviewItem]] = []

    async def escalate(self, item: HumanReviewItem) -> str:
        review_id = f"review_{uuid4().hex[:12]}"
        self._items.append((review_id, item))
        return review_id

    async def pending(self) -> list[tuple[str, HumanReviewItem]]:
        return list(self._items)
