"""Ledger store port.

Append-only storage for committed audit records. No update or delete
operations exist on this port.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from posta.domain.models.audit_record import AuditRecord


@runtime_checkable
class LedgerStoreProtocol(Protocol):
    """Append-only audit record storage."""

    async def append(self, record: AuditRecord) -> None:
        """Append a committed record.

        Raises:
            OSError: If a persistent store cannot be written.
        """
        ...

    async def list_all(self) -> list[AuditRecord]:
        """Return every record in insertion order."""
        ...

    async def list_for_case(self, case_id: str) -> list[AuditRecord]:
        """Return a case's records in insertion order."""
        ...
