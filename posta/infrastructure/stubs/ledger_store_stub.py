"""In-memory ledger store stub with append-failure injection."""

from __future__ import annotations

from typing import Optional

from posta.domain.models.audit_record import AuditRecord, CaseAction


class LedgerStoreStub:
    """Stub implementation of LedgerStoreProtocol for testing.

    fail_on() arms a one-shot failure for the next append of a given action
    (or of any action), standing in for a disk or network fault.
    """

    def __init__(self) -> None:
        self._records: list[AuditRecord] = []
        self._fail_action: Optional[CaseAction] = None
        self._fail_any = False
        self._error: Optional[Exception] = None

    async def append(self, record: AuditRecord) -> None:
        if self._error is not None and (self._fail_any or record.action is self._fail_action):
            error, self._error = self._error, None
            raise error
        self._records.append(record)

    async def list_all(self) -> list[AuditRecord]:
        return list(self._records)

    async def list_for_case(self, case_id: str) -> list[AuditRecord]:
        return [r for r in self._records if r.case_id == case_id]

    # Test helper methods

    def fail_on(
        self, action: Optional[CaseAction] = None, error: Optional[Exception] = None
    ) -> None:
        """Make the next matching append raise (test helper).

        Args:
            action: Only fail an append of this action. None fails the next append.
            error: Exception to raise. Defaults to OSError("ledger unavailable").
        """
        self._fail_action = action
        self._fail_any = action is None
        self._error = error or OSError("ledger unavailable")
