"""Device integrity repository port.

Holds the per-device state used by integrity screening:
- device -> beneficiary registry (persisted)
- permanent blacklist (persisted, append-only)
- last activity timestamp (process memory)
- HIGH flag violation counter (process memory)

Callers serialize mutations per device id; implementations need not lock.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class DeviceIntegrityRepositoryProtocol(Protocol):
    """Protocol for device-keyed integrity state."""

    async def is_blacklisted(self, device_id: str) -> bool:
        """True if the device is permanently blacklisted."""
        ...

    async def add_to_blacklist(self, device_id: str) -> None:
        """Blacklist a device permanently and persist the blacklist."""
        ...

    async def get_linked_beneficiaries(self, device_id: str) -> frozenset[str]:
        """Return every beneficiary id ever submitted from the device."""
        ...

    async def link_beneficiary(self, device_id: str, beneficiary_id: str) -> frozenset[str]:
        """Link a beneficiary to a device if new, persisting on change.

        Returns:
            The full set of beneficiaries linked to the device afterwards.
        """
        ...

    async def get_last_activity(self, device_id: str) -> Optional[datetime]:
        """Return the device's last recorded activity, if any."""
        ...

    async def record_activity(self, device_id: str, at: datetime) -> None:
        """Record a new activity timestamp for the device."""
        ...

    async def increment_violations(self, device_id: str) -> int:
        """Count one HIGH flag against the device.

        Returns:
            The device's violation count after incrementing.
        """
        ...

    async def get_violation_count(self, device_id: str) -> int:
        """Return the device's HIGH flag count."""
        ...
