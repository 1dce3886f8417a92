"""In-memory key-value store stub for testing.

Implements KeyValueStoreProtocol without touching the filesystem and lets
tests inject write failures to check that callers keep memory and storage
in agreement.
"""

from __future__ import annotations

import copy
from typing import Any, Optional


class KeyValueStoreStub:
    """Stub implementation of KeyValueStoreProtocol for testing.

    Attributes:
        _data: Last document successfully written (or the seed document).
        _write_count: Number of successful writes.
        _fail_next_write: Error raised by the next write_all call, if set.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None) -> None:
        """Initialize the stub.

        Args:
            initial: Document returned by read_all before any write.
        """
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._write_count = 0
        self._read_count = 0
        self._fail_next_write: Optional[Exception] = None

    async def read_all(self) -> dict[str, Any]:
        self._read_count += 1
        return copy.deepcopy(self._data)

    async def write_all(self, data: dict[str, Any]) -> None:
        if self._fail_next_write is not None:
            error, self._fail_next_write = self._fail_next_write, None
            raise error
        self._data = copy.deepcopy(data)
        self._write_count += 1

    # Test helper methods

    @property
    def data(self) -> dict[str, Any]:
        """Current stored document (test helper)."""
        return copy.deepcopy(self._data)

    @property
    def write_count(self) -> int:
        return self._write_count

    @property
    def read_count(self) -> int:
        return self._read_count

    def fail_next_write(self, error: Optional[Exception] = None) -> None:
        """Make the next write_all raise (test helper).

        Args:
            error: Exception to raise. Defaults to OSError("disk full").
        """
        self._fail_next_write = error or OSError("disk full")
