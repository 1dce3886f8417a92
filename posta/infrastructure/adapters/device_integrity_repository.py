"""Device integrity repository backed by key-value stores.

The device registry and the blacklist are each one key-value document:

    device_registry.json   {"dev_1": ["ben_1", "ben_2"], ...}
    device_blacklist.json  {"device_ids": ["dev_9", ...]}

Both are read once (on first use) and rewritten in full on every mutation.
The in-memory view is only updated after the rewrite succeeds, so a failed
write leaves memory and disk in agreement.

Activity timestamps and violation counters live in process memory only.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional

from posta.application.ports.key_value_store import KeyValueStoreProtocol
from posta.infrastructure.observability.logging import get_logger_for_service

BLACKLIST_KEY = "device_ids"


class PersistentDeviceIntegrityRepository:
    """DeviceIntegrityRepositoryProtocol implementation over two stores."""

    def __init__(
        self,
        registry_store: KeyValueStoreProtocol,
        blacklist_store: KeyValueStoreProtocol,
    ) -> None:
        """Initialize the repository.

        Args:
            registry_store: Store for device -> beneficiary ids.
            blacklist_store: Store for the blacklisted device ids.
        """
        self._registry_store = registry_store
        self._blacklist_store = blacklist_store
        self._registry: dict[str, list[str]] = {}
        self._blacklist: set[str] = set()
        self._last_activity: dict[str, datetime] = {}
        self._violations: dict[str, int] = {}
        self._loaded = False
        self._load_lock = asyncio.Lock()
        self._log = get_logger_for_service(self.__class__.__name__, component="storage")

    async def load(self) -> None:
        """Read both stores once. Later calls are no-ops."""
        async with self._load_lock:
            if self._loaded:
                return
            registry = await self._registry_store.read_all()
            blacklist = await self._blacklist_store.read_all()
            self._registry = {
                str(device): [str(b) for b in beneficiaries]
                for device, beneficiaries in registry.items()
            }
            self._blacklist = {str(d) for d in blacklist.get(BLACKLIST_KEY, [])}
            self._loaded = True
            self._log.info(
                "device_state_loaded",
                devices=len(self._registry),
                blacklisted=len(self._blacklist),
            )

    async def is_blacklisted(self, device_id: str) -> bool:
        await self.load()
        return device_id in self._blacklist

    async def add_to_blacklist(self, device_id: str) -> None:
        await self.load()
        if device_id in self._blacklist:
            return
        updated = self._blacklist | {device_id}
        await self._blacklist_store.write_all({BLACKLIST_KEY: sorted(updated)})
        self._blacklist = updated

    async def get_linked_beneficiaries(self, device_id: str) -> frozenset[str]:
        await self.load()
        return frozenset(self._registry.get(device_id, ()))

    async def link_beneficiary(self, device_id: str, beneficiary_id: str) -> frozenset[str]:
        await self.load()
        linked = self._registry.get(device_id, [])
        if beneficiary_id not in linked:
            updated = {**self._registry, device_id: [*linked, beneficiary_id]}
            await self._registry_store.write_all(updated)
            self._registry = updated
        return frozenset(self._registry[device_id])

    async def get_last_activity(self, device_id: str) -> Optional[datetime]:
        return self._last_activity.get(device_id)

    async def record_activity(self, device_id: str, at: datetime) -> None:
        self._last_activity[device_id] = at

    async def increment_violations(self, device_id: str) -> int:
        count = self._violations.get(device_id, 0) + 1
        self._violations[device_id] = count
        return count

    async def get_violation_count(self, device_id: str) -> int:
        return self._violations.get(device_id, 0)
