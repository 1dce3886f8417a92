"""Unit tests for governance configuration."""

from pathlib import Path

import pytest

from posta.config.governance_config import (
    DEFAULT_GOVERNANCE_CONFIG,
    ConsensusConfig,
    GovernanceConfig,
    IntegrityConfig,
    RoutingConfig,
    StorageConfig,
)


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        config = DEFAULT_GOVERNANCE_CONFIG
        assert config.integrity.cooldown_seconds == 30.0
        assert config.integrity.ghost_beneficiary_limit == 3
        assert config.integrity.blacklist_threshold == 5
        assert config.routing.fallback_body_id == "KHALISTAR"
        assert config.routing.trust_threshold == 0.7
        assert config.consensus.required_verifiers == 2
        assert config.storage.persist_ledger is False


class TestValidation:
    """Tests for __post_init__ validation."""

    def test_negative_cooldown(self) -> None:
        with pytest.raises(ValueError, match="cooldown_seconds"):
            IntegrityConfig(cooldown_seconds=-1)

    def test_trust_threshold_range(self) -> None:
        with pytest.raises(ValueError, match="trust_threshold"):
            RoutingConfig(trust_threshold=1.1)

    def test_empty_fallback(self) -> None:
        with pytest.raises(ValueError, match="fallback_body_id"):
            RoutingConfig(fallback_body_id="")

    def test_quorum_positive(self) -> None:
        with pytest.raises(ValueError, match="required_verifiers"):
            ConsensusConfig(required_verifiers=0)


class TestFromEnvironment:
    """Tests for environment overrides."""

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("POSTA_COOLDOWN_SECONDS", "5")
        monkeypatch.setenv("POSTA_BLACKLIST_THRESHOLD", "2")
        monkeypatch.setenv("POSTA_FALLBACK_BODY_ID", "HQ")
        monkeypatch.setenv("POSTA_REQUIRED_VERIFIERS", "3")
        monkeypatch.setenv("POSTA_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("POSTA_LEDGER_PERSIST", "true")

        config = GovernanceConfig.from_environment()

        assert config.integrity.cooldown_seconds == 5.0
        assert config.integrity.blacklist_threshold == 2
        assert config.routing.fallback_body_id == "HQ"
        assert config.consensus.required_verifiers == 3
        assert config.storage.persist_ledger is True
        assert config.storage.ledger_path == tmp_path / "audit_ledger.jsonl"

    def test_invalid_int_falls_back_to_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POSTA_GHOST_BENEFICIARY_LIMIT", "many")
        assert IntegrityConfig.from_environment().ghost_beneficiary_limit == 3

    def test_storage_paths(self, tmp_path: Path) -> None:
        storage = StorageConfig(data_dir=tmp_path)
        assert storage.device_registry_path == tmp_path / "device_registry.json"
        assert storage.blacklist_path == tmp_path / "device_blacklist.json"
