"""Software Ed25519 signer for ledger records.

Loads a PEM-encoded Ed25519 private key when a path is configured, otherwise
generates an ephemeral key for the process lifetime. Ephemeral keys make
signatures unverifiable after restart, which is logged at startup.

The key id is the first 16 hex characters of the SHA-256 of the raw public
key, so records name the key that signed them.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from posta.application.ports.ledger_signer import LedgerSignerProtocol, SignatureResult
from posta.infrastructure.observability.logging import get_logger_for_service


class Ed25519LedgerSigner(LedgerSignerProtocol):
    """LedgerSignerProtocol implementation using cryptography's Ed25519."""

    def __init__(self, private_key: Optional[Ed25519PrivateKey] = None) -> None:
        """Initialize the signer.

        Args:
            private_key: Key to sign with. A fresh key is generated when omitted.
        """
        log = get_logger_for_service(self.__class__.__name__, component="ledger")
        if private_key is None:
            private_key = Ed25519PrivateKey.generate()
            log.warning(
                "ephemeral_signing_key_generated",
                message="Ledger signatures will not verify after restart",
            )
        self._private_key = private_key
        self._public_key: Ed25519PublicKey = private_key.public_key()
        raw_public = self._public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        self._key_id = f"ed25519:{hashlib.sha256(raw_public).hexdigest()[:16]}"

    @classmethod
    def from_pem_file(cls, path: Path) -> Ed25519LedgerSigner:
        """Load an unencrypted PEM Ed25519 private key.

        Raises:
            ValueError: If the file does not hold an Ed25519 private key.
        """
        key = serialization.load_pem_private_key(path.read_bytes(), password=None)
        if not isinstance(key, Ed25519PrivateKey):
            raise ValueError(f"{path} does not contain an Ed25519 private key")
        return cls(private_key=key)

    @property
    def key_id(self) -> str:
        return self._key_id

    def public_key_pem(self) -> bytes:
        """Public key for external verifiers of the ledger."""
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    async def sign(self, content: bytes) -> SignatureResult:
        return SignatureResult(signature=self._private_key.sign(content), key_id=self._key_id)

    async def verify(self, content: bytes, signature: bytes) -> bool:
        try:
            self._public_key.verify(signature, content)
        except InvalidSignature:
            return False
        return True
