"""Case ledger: hashed, signed, append-only audit records.

Each lifecycle transition of a case is committed as an AuditRecord:
- content_hash: SHA-256 of the canonical JSON of the record's own fields
- signature: signer output over the UTF-8 bytes of content_hash, hex encoded

Hashes are per record and not chained. verify_integrity() recomputes every
hash and checks every signature; it cannot detect whole records being
reordered or removed.

Commits share one append lock, so per-case record order is the order in
which transitions were committed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from posta.application.ports.ledger_signer import LedgerSignerProtocol
from posta.application.ports.ledger_store import LedgerStoreProtocol
from posta.application.services.base import LoggingMixin
from posta.domain.models.audit_record import AuditDraft, AuditRecord
from posta.domain.services.ledger_hashing import compute_record_hash


@dataclass(frozen=True)
class LedgerIntegrityReport:
    """Result of re-verifying the whole ledger.

    Attributes:
        records_checked: Number of records inspected.
        hash_mismatches: Hashes of records whose content no longer matches.
        invalid_signatures: Hashes of records whose signature fails.
        unknown_keys: Hashes of records signed by a key this signer cannot verify.
    """

    records_checked: int
    hash_mismatches: tuple[str, ...] = field(default_factory=tuple)
    invalid_signatures: tuple[str, ...] = field(default_factory=tuple)
    unknown_keys: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not (self.hash_mismatches or self.invalid_signatures or self.unknown_keys)

    def to_dict(self) -> dict[str, Any]:
        return {
            "records_checked": self.records_checked,
            "is_valid": self.is_valid,
            "hash_mismatches": list(self.hash_mismatches),
            "invalid_signatures": list(self.invalid_signatures),
            "unknown_keys": list(self.unknown_keys),
        }


class LedgerService(LoggingMixin):
    """Commits and verifies audit records."""

    def __init__(self, store: LedgerStoreProtocol, signer: LedgerSignerProtocol) -> None:
        self._store = store
        self._signer = signer
        self._append_lock = asyncio.Lock()
        self._init_logger(component="ledger")

    async def commit(self, draft: AuditDraft) -> AuditRecord:
        """Hash, sign and append a lifecycle transition.

        Returns:
            The committed record, carrying its content hash and signature.
        """
        content_hash = compute_record_hash(draft)
        signed = await self._signer.sign(content_hash.encode("utf-8"))
        record = AuditRecord.from_draft(
            draft,
            content_hash=content_hash,
            signature=signed.signature.hex(),
            signing_key_id=signed.key_id,
        )
        async with self._append_lock:
            await self._store.append(record)

        self._log_operation("commit", case_id=draft.case_id).info(
            "ledger_record_committed",
            action=draft.action.value,
            previous_state=draft.previous_state,
            new_state=draft.new_state,
            content_hash=content_hash,
        )
        return record

    async def get_audit_trail(self, case_id: str) -> list[AuditRecord]:
        """Return the case's records in commit order."""
        return await self._store.list_for_case(case_id)

    async def verify_integrity(self) -> LedgerIntegrityReport:
        """Recompute every hash and verify every signature."""
        records = await self._store.list_all()
        hash_mismatches: list[str] = []
        invalid_signatures: list[str] = []
        unknown_keys: list[str] = []

        for record in records:
            if compute_record_hash(record.draft) != record.content_hash:
                hash_mismatches.append(record.content_hash)
            if record.signing_key_id != self._signer.key_id:
                unknown_keys.append(record.content_hash)
                continue
            try:
                signature = bytes.fromhex(record.signature)
            except ValueError:
                invalid_signatures.append(record.content_hash)
                continue
            if not await self._signer.verify(record.content_hash.encode("utf-8"), signature):
                invalid_signatures.append(record.content_hash)

        report = LedgerIntegrityReport(
            records_checked=len(records),
            hash_mismatches=tuple(hash_mismatches),
            invalid_signatures=tuple(invalid_signatures),
            unknown_keys=tuple(unknown_keys),
        )
        log = self._log_operation("verify_integrity")
        if report.is_valid:
            log.info("ledger_integrity_verified", records_checked=report.records_checked)
        else:
            log.error("ledger_integrity_failed", **report.to_dict())
        return report
