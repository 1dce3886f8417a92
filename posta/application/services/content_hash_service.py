"""BLAKE3 message fingerprinting for duplicate detection.

Messages are normalized (trimmed, lower-cased) before hashing, so the same
claim typed with different casing or surrounding whitespace produces the
same fingerprint. Inner whitespace is kept.
"""

from __future__ import annotations

import blake3


class Blake3ContentHashService:
    """BLAKE3 fingerprints of normalized message content."""

    @staticmethod
    def normalize(message: str) -> str:
        """Canonical form used for duplicate comparison."""
        return message.strip().lower()

    def fingerprint(self, message: str) -> bytes:
        """32-byte BLAKE3 digest of the normalized message as UTF-8."""
        return blake3.blake3(self.normalize(message).encode("utf-8")).digest()
