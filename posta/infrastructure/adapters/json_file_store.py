"""JSON file key-value store with atomic replacement.

Each store is one JSON object on disk. read_all() loads the whole object;
write_all() rewrites it through a temporary file in the same directory,
fsyncs it, and renames it over the target with os.replace(), so readers and
crash recovery only ever see the old or the new complete document.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from posta.infrastructure.observability.logging import get_logger_for_service


class JsonFileKeyValueStore:
    """KeyValueStoreProtocol implementation backed by a JSON file."""

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Target JSON file. Parent directories are created on write.
        """
        self._path = path
        self._log = get_logger_for_service(self.__class__.__name__, component="storage")

    @property
    def path(self) -> Path:
        return self._path

    async def read_all(self) -> dict[str, Any]:
        return await asyncio.to_thread(self._read_sync)

    async def write_all(self, data: dict[str, Any]) -> None:
        await asyncio.to_thread(self._write_sync, data)
        self._log.debug("store_rewritten", path=str(self._path), keys=len(data))

    def _read_sync(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            self._log.error("store_corrupt", path=str(self._path), error=str(exc))
            raise ValueError(f"Store {self._path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Store {self._path} must contain a JSON object")
        return data

    def _write_sync(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
