"""Ledger signer port.

Signs committed ledger records over their content hash so a record cannot be
altered and re-hashed without the signing key.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SignatureResult:
    """Result of a signing operation.

    Attributes:
        signature: The raw signature bytes.
        key_id: Identifier of the signing key.
    """

    signature: bytes
    key_id: str


class LedgerSignerProtocol(ABC):
    """Abstract protocol for ledger signing."""

    @property
    @abstractmethod
    def key_id(self) -> str:
        """Identifier of the active signing key."""
        ...

    @abstractmethod
    async def sign(self, content: bytes) -> SignatureResult:
        """Sign content and return the signature with its key id."""
        ...

    @abstractmethod
    async def verify(self, content: bytes, signature: bytes) -> bool:
        """Return True if signature is valid for content under the active key."""
        ...
