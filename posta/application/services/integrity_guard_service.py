"""Integrity screening of intake submissions.

IntegrityGuardService.audit runs the fraud heuristics against one
submission and returns every flag that fired. It never decides the outcome
of intake itself: the caller blocks on any HIGH flag and marks the case
FLAGGED on LOW flags.

Checks, in order (non-exclusive):
1. Blacklist short-circuit: one HIGH IDENTITY_MISMATCH, nothing else runs
2. Cooldown: a repeat inside the window is LOW SUSPICIOUS_TONE
3. Duplicate content: the same normalized message is HIGH DUPLICATE_CLAIM
4. Ghost beneficiary: too many beneficiaries per device is HIGH IDENTITY_MISMATCH
5. Adversarial input: a deny-list match is HIGH SUSPICIOUS_TONE

Checks 1, 2 and 4 and the violation counter are device-scoped and only run
when a device id is supplied. Every HIGH flag counts one violation against
the device; reaching the threshold blacklists it permanently.

Concurrency:
- Screening of one device runs under that device's lock
- The process-wide fingerprint set has its own lock, taken inside the device lock
"""

from __future__ import annotations

from typing import Optional

from posta.application.ports.content_fingerprint_store import ContentFingerprintStoreProtocol
from posta.application.ports.device_integrity_repository import (
    DeviceIntegrityRepositoryProtocol,
)
from posta.application.ports.time_authority import TimeAuthorityProtocol
from posta.application.services.base import LoggingMixin
from posta.application.services.content_hash_service import Blake3ContentHashService
from posta.application.services.keyed_lock import KeyedLock
from posta.config.governance_config import IntegrityConfig
from posta.domain.errors.validation import ValidationError
from posta.domain.models.adversarial_input import AdversarialInputScanner
from posta.domain.models.integrity_flag import (
    DuplicateClaimFlag,
    FlagSeverity,
    IdentityMismatchFlag,
    IntegrityFlag,
    SuspiciousToneFlag,
)

_FINGERPRINT_LOCK_KEY = "__fingerprints__"


class IntegrityGuardService(LoggingMixin):
    """Runs fraud and integrity heuristics against intake submissions."""

    def __init__(
        self,
        device_repository: DeviceIntegrityRepositoryProtocol,
        fingerprint_store: ContentFingerprintStoreProtocol,
        time_authority: TimeAuthorityProtocol,
        config: Optional[IntegrityConfig] = None,
        hash_service: Optional[Blake3ContentHashService] = None,
        scanner: Optional[AdversarialInputScanner] = None,
    ) -> None:
        """Initialize the guard.

        Args:
            device_repository: Registry, blacklist, activity and violation state.
            fingerprint_store: Fingerprints of messages already seen.
            time_authority: Clock for flag timestamps and the cooldown.
            config: Thresholds (defaults to IntegrityConfig()).
            hash_service: Message fingerprinting (defaults to BLAKE3).
            scanner: Adversarial deny-list (defaults to the built-in patterns).
        """
        self._devices = device_repository
        self._fingerprints = fingerprint_store
        self._time = time_authority
        self._config = config or IntegrityConfig()
        self._hasher = hash_service or Blake3ContentHashService()
        self._scanner = scanner or AdversarialInputScanner()
        self._locks = KeyedLock()
        self._fingerprint_locks = KeyedLock()
        self._init_logger(component="integrity")

    @property
    def config(self) -> IntegrityConfig:
        return self._config

    async def is_blacklisted(self, device_id: Optional[str]) -> bool:
        """True if a device id was given and that device is blacklisted."""
        if device_id is None:
            return False
        return await self._devices.is_blacklisted(device_id)

    async def audit(
        self,
        beneficiary_id: Optional[str],
        raw_message: Optional[str],
        device_id: Optional[str] = None,
    ) -> list[IntegrityFlag]:
        """Screen one submission.

        Args:
            beneficiary_id: Beneficiary named in the draft case.
            raw_message: The message exactly as received.
            device_id: Submitting device, when the transport knows it.

        Returns:
            Every flag that fired, in check order. Empty when clean.

        Raises:
            ValidationError: If beneficiary_id or raw_message is missing.
        """
        if not beneficiary_id:
            raise ValidationError("beneficiary_id")
        if not raw_message:
            raise ValidationError("raw_message", "Missing required message")

        log = self._log_operation(
            "audit", beneficiary_id=beneficiary_id, device_id=device_id
        )

        if device_id is None:
            flags = await self._screen(beneficiary_id, raw_message, None)
        else:
            async with self._locks.hold(device_id):
                flags = await self._screen(beneficiary_id, raw_message, device_id)

        log.info(
            "integrity_audit_completed",
            flags=[flag.to_dict() for flag in flags],
            blocked=any(flag.is_blocking for flag in flags),
        )
        return flags

    async def _screen(
        self,
        beneficiary_id: str,
        raw_message: str,
        device_id: Optional[str],
    ) -> list[IntegrityFlag]:
        now = self._time.now()

        if device_id is not None and await self._devices.is_blacklisted(device_id):
            return [
                IdentityMismatchFlag(
                    severity=FlagSeverity.HIGH,
                    timestamp=now,
                    reason=f"Device {device_id} is blacklisted",
                )
            ]

        flags: list[IntegrityFlag] = []

        if device_id is not None:
            last_activity = await self._devices.get_last_activity(device_id)
            elapsed = (now - last_activity).total_seconds() if last_activity else None
            if elapsed is not None and elapsed < self._config.cooldown_seconds:
                flags.append(
                    SuspiciousToneFlag(
                        severity=FlagSeverity.LOW,
                        timestamp=now,
                        reason=(
                            f"Submitted {elapsed:.1f}s after previous activity "
                            f"(cooldown {self._config.cooldown_seconds:.0f}s)"
                        ),
                    )
                )
            else:
                await self._devices.record_activity(device_id, now)

        fingerprint = self._hasher.fingerprint(raw_message)
        async with self._fingerprint_locks.hold(_FINGERPRINT_LOCK_KEY):
            first_seen = await self._fingerprints.add_if_absent(fingerprint)
        if not first_seen:
            flags.append(
                DuplicateClaimFlag(
                    severity=FlagSeverity.HIGH,
                    timestamp=now,
                    reason="Identical message content was already submitted",
                )
            )

        if device_id is not None:
            linked = await self._devices.link_beneficiary(device_id, beneficiary_id)
            if len(linked) > self._config.ghost_beneficiary_limit:
                flags.append(
                    IdentityMismatchFlag(
                        severity=FlagSeverity.HIGH,
                        timestamp=now,
                        reason=(
                            f"Device linked to {len(linked)} beneficiaries "
                            f"(limit {self._config.ghost_beneficiary_limit})"
                        ),
                    )
                )

        pattern = self._scanner.first_match(raw_message)
        if pattern is not None:
            flags.append(
                SuspiciousToneFlag(
                    severity=FlagSeverity.HIGH,
                    timestamp=now,
                    reason=f"Message matches adversarial pattern {pattern!r}",
                )
            )

        if device_id is not None:
            await self._count_violations(device_id, flags)

        return flags

    async def _count_violations(self, device_id: str, flags: list[IntegrityFlag]) -> None:
        for flag in flags:
            if not flag.is_blocking:
                continue
            count = await self._devices.increment_violations(device_id)
            if count >= self._config.blacklist_threshold:
                if not await self._devices.is_blacklisted(device_id):
                    await self._devices.add_to_blacklist(device_id)
                    self._log.warning(
                        "device_blacklisted",
                        device_id=device_id,
                        violations=count,
                    )
