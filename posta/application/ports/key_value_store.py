"""Key-value persistence port.

Backs the device registry and the blacklist. Stores are read fully once at
startup and rewritten fully on each mutation; implementations must make the
rewrite atomic so a crash mid-write never leaves a torn file.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStoreProtocol(Protocol):
    """Whole-document key-value store.

    Usage:
        data = await store.read_all()
        data["dev_1"] = ["ben_1", "ben_2"]
        await store.write_all(data)
    """

    async def read_all(self) -> dict[str, Any]:
        """Return the full stored mapping (empty if nothing was stored yet)."""
        ...

    async def write_all(self, data: dict[str, Any]) -> None:
        """Atomically replace the full stored mapping.

        Raises:
            OSError: If the underlying storage cannot be written.
        """
        ...
