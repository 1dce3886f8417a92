"""Content fingerprint store port.

Remembers hashes of normalized intake messages so identical content is
rejected as a duplicate. Scope is the running process.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentFingerprintStoreProtocol(Protocol):
    """Set of message fingerprints seen so far."""

    async def add_if_absent(self, fingerprint: bytes) -> bool:
        """Record a fingerprint.

        Returns:
            True if the fingerprint was new, False if already seen.
        """
        ...

    async def contains(self, fingerprint: bytes) -> bool:
        """True if the fingerprint was seen before."""
        ...
