"""Governance core configuration.

This module defines configuration for integrity screening, routing,
consensus and storage, with environment variable overrides for production
tuning.

Environment Variables (Integrity):
- POSTA_COOLDOWN_SECONDS: Minimum gap between submissions per device (default: 30)
- POSTA_GHOST_BENEFICIARY_LIMIT: Distinct beneficiaries per device before flag (default: 3)
- POSTA_BLACKLIST_THRESHOLD: HIGH flags per device before blacklisting (default: 5)

Environment Variables (Routing):
- POSTA_FALLBACK_BODY_ID: Body used when no capable trusted body exists (default: KHALISTAR)
- POSTA_TRUST_THRESHOLD: Minimum trust score for routing (default: 0.7)

Environment Variables (Consensus):
- POSTA_REQUIRED_VERIFIERS: Quorum per goal tag (default: 2)

Environment Variables (Storage):
- POSTA_DATA_DIR: Directory for persisted state (default: ./var/posta)
- POSTA_LEDGER_PERSIST: Persist ledger records to a JSON-lines file (default: false)
- POSTA_SIGNING_KEY_PATH: PEM Ed25519 private key for ledger signing (default: unset)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from posta.domain.services.routing import DEFAULT_FALLBACK_BODY_ID, DEFAULT_TRUST_THRESHOLD


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class IntegrityConfig:
    """Configuration for integrity screening.

    Attributes:
        cooldown_seconds: Minimum seconds between submissions from one device.
        ghost_beneficiary_limit: A device linked to more distinct
            beneficiaries than this is flagged.
        blacklist_threshold: HIGH flags after which a device is blacklisted.
    """

    cooldown_seconds: float = 30.0
    ghost_beneficiary_limit: int = 3
    blacklist_threshold: int = 5

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.cooldown_seconds < 0:
            raise ValueError(
                f"cooldown_seconds must be non-negative, got {self.cooldown_seconds}"
            )
        if self.ghost_beneficiary_limit < 1:
            raise ValueError(
                f"ghost_beneficiary_limit must be positive, got {self.ghost_beneficiary_limit}"
            )
        if self.blacklist_threshold < 1:
            raise ValueError(
                f"blacklist_threshold must be positive, got {self.blacklist_threshold}"
            )

    @classmethod
    def from_environment(cls) -> IntegrityConfig:
        return cls(
            cooldown_seconds=_get_float_env("POSTA_COOLDOWN_SECONDS", 30.0),
            ghost_beneficiary_limit=_get_int_env("POSTA_GHOST_BENEFICIARY_LIMIT", 3),
            blacklist_threshold=_get_int_env("POSTA_BLACKLIST_THRESHOLD", 5),
        )


@dataclass(frozen=True)
class RoutingConfig:
    """Configuration for execution body selection."""

    fallback_body_id: str = DEFAULT_FALLBACK_BODY_ID
    trust_threshold: float = DEFAULT_TRUST_THRESHOLD

    def __post_init__(self) -> None:
        if not self.fallback_body_id:
            raise ValueError("fallback_body_id must be non-empty")
        if not 0.0 <= self.trust_threshold <= 1.0:
            raise ValueError(
                f"trust_threshold must be within [0, 1], got {self.trust_threshold}"
            )

    @classmethod
    def from_environment(cls) -> RoutingConfig:
        return cls(
            fallback_body_id=os.environ.get("POSTA_FALLBACK_BODY_ID", DEFAULT_FALLBACK_BODY_ID),
            trust_threshold=_get_float_env("POSTA_TRUST_THRESHOLD", DEFAULT_TRUST_THRESHOLD),
        )


@dataclass(frozen=True)
class ConsensusConfig:
    """Configuration for multi-verifier consensus."""

    required_verifiers: int = 2

    def __post_init__(self) -> None:
        if self.required_verifiers < 1:
            raise ValueError(
                f"required_verifiers must be at least 1, got {self.required_verifiers}"
            )

    @classmethod
    def from_environment(cls) -> ConsensusConfig:
        return cls(required_verifiers=_get_int_env("POSTA_REQUIRED_VERIFIERS", 2))


@dataclass(frozen=True)
class StorageConfig:
    """Locations of persisted governance state.

    Attributes:
        data_dir: Directory holding the persisted stores.
        persist_ledger: Whether ledger records are also written to disk.
        signing_key_path: Optional PEM Ed25519 private key for the ledger.
    """

    data_dir: Path = field(default_factory=lambda: Path("var/posta"))
    persist_ledger: bool = False
    signing_key_path: Optional[Path] = None

    @property
    def device_registry_path(self) -> Path:
        return self.data_dir / "device_registry.json"

    @property
    def blacklist_path(self) -> Path:
        return self.data_dir / "device_blacklist.json"

    @property
    def ledger_path(self) -> Path:
        return self.data_dir / "audit_ledger.jsonl"

    @classmethod
    def from_environment(cls) -> StorageConfig:
        key_path = os.environ.get("POSTA_SIGNING_KEY_PATH")
        return cls(
            data_dir=Path(os.environ.get("POSTA_DATA_DIR", "var/posta")),
            persist_ledger=_get_bool_env("POSTA_LEDGER_PERSIST", False),
            signing_key_path=Path(key_path) if key_path else None,
        )


@dataclass(frozen=True)
class GovernanceConfig:
    """All governance core settings in one place."""

    integrity: IntegrityConfig = field(default_factory=IntegrityConfig)
    routing: RoutingConfig = field(default_factory=RoutingConfig)
    consensus: ConsensusConfig = field(default_factory=ConsensusConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def from_environment(cls) -> GovernanceConfig:
        return cls(
            integrity=IntegrityConfig.from_environment(),
            routing=RoutingConfig.from_environment(),
            consensus=ConsensusConfig.from_environment(),
            storage=StorageConfig.from_environment(),
        )


# Default production config
DEFAULT_GOVERNANCE_CONFIG = GovernanceConfig()

# Testing config with a disabled cooldown so repeated submissions are not
# marked FLAGGED in unit tests
TEST_INTEGRITY_CONFIG = IntegrityConfig(cooldown_seconds=0.0)
