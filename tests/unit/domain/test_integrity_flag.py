"""Unit tests for the integrity flag variant."""

from datetime import datetime, timezone

import pytest

from posta.domain.models.integrity_flag import (
    FLAG_CLASSES,
    DuplicateClaimFlag,
    FlagSeverity,
    FlagType,
    IdentityMismatchFlag,
    IntegrityFlag,
    SuspiciousToneFlag,
    has_blocking_flag,
)

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestIntegrityFlagVariant:
    """Tests for the closed set of flag kinds."""

    def test_every_flag_type_has_a_class(self) -> None:
        assert set(FLAG_CLASSES) == set(FlagType)

    @pytest.mark.parametrize(
        ("flag_class", "flag_type"),
        [
            (DuplicateClaimFlag, FlagType.DUPLICATE_CLAIM),
            (IdentityMismatchFlag, FlagType.IDENTITY_MISMATCH),
            (SuspiciousToneFlag, FlagType.SUSPICIOUS_TONE),
        ],
    )
    def test_subclass_fixes_flag_type(
        self, flag_class: type[IntegrityFlag], flag_type: FlagType
    ) -> None:
        flag = flag_class(severity=FlagSeverity.HIGH, timestamp=NOW)
        assert flag.flag_type is flag_type
        assert flag.to_dict()["type"] == flag_type.value

    def test_base_class_cannot_be_instantiated(self) -> None:
        with pytest.raises(TypeError):
            IntegrityFlag(severity=FlagSeverity.LOW, timestamp=NOW)

    def test_naive_timestamp_rejected(self) -> None:
        with pytest.raises(ValueError, match="timezone-aware"):
            DuplicateClaimFlag(severity=FlagSeverity.HIGH, timestamp=datetime(2026, 1, 1))


class TestBlocking:
    """Tests for the HIGH-blocks caller policy helpers."""

    def test_high_is_blocking(self) -> None:
        assert DuplicateClaimFlag(severity=FlagSeverity.HIGH, timestamp=NOW).is_blocking

    def test_low_is_not_blocking(self) -> None:
        assert not SuspiciousToneFlag(severity=FlagSeverity.LOW, timestamp=NOW).is_blocking

    def test_has_blocking_flag(self) -> None:
        low = SuspiciousToneFlag(severity=FlagSeverity.LOW, timestamp=NOW)
        high = IdentityMismatchFlag(severity=FlagSeverity.HIGH, timestamp=NOW)
        assert not has_blocking_flag([])
        assert not has_blocking_flag([low])
        assert has_blocking_flag([low, high])
