"""JSON-lines ledger store.

Each committed audit record is one line of canonical JSON appended to the
ledger file and fsynced before append() returns. Existing lines are loaded
once on first use. The file is never rewritten.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path

from posta.domain.models.audit_record import AuditRecord
from posta.domain.services.ledger_hashing import canonical_json
from posta.infrastructure.observability.logging import get_logger_for_service


class JsonLinesLedgerStore:
    """LedgerStoreProtocol implementation backed by an append-only file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._records: list[AuditRecord] = []
        self._loaded = False
        self._lock = asyncio.Lock()
        self._log = get_logger_for_service(self.__class__.__name__, component="ledger")

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        if self._path.exists():
            with self._path.open(encoding="utf-8") as handle:
                for line_number, line in enumerate(handle, start=1):
                    if not line.strip():
                        continue
                    try:
                        self._records.append(AuditRecord.from_dict(json.loads(line)))
                    except (json.JSONDecodeError, KeyError, ValueError) as exc:
                        raise ValueError(
                            f"Ledger {self._path} line {line_number} is unreadable: {exc}"
                        ) from exc
        self._loaded = True
        self._log.info("ledger_loaded", path=str(self._path), records=len(self._records))

    async def append(self, record: AuditRecord) -> None:
        async with self._lock:
            await self._ensure_loaded()
            line = canonical_json(record.to_dict()) + "\n"
            await asyncio.to_thread(self._append_line, line)
            self._records.append(record)

    def _append_line(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(line)
            handle.flush()
            os.fsync(handle.fileno())

    async def list_all(self) -> list[AuditRecord]:
        async with self._lock:
            await self._ensure_loaded()
            return list(self._records)

    async def list_for_case(self, case_id: str) -> list[AuditRecord]:
        return [r for r in await self.list_all() if r.case_id == case_id]
