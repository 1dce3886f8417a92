"""FakeTimeAuthority - Controllable time authority for deterministic tests.

Cooldown windows, flag timestamps and ledger records all read the clock, so
tests that depend on them must control time.

Usage Patterns:
--------------

1. Frozen Time Pattern:

    >>> fake_time = FakeTimeAuthority(frozen_at=datetime(2026, 1, 15, 10, 0, 0, tzinfo=timezone.utc))
    >>> guard = IntegrityGuardService(..., time_authority=fake_time)
    >>> # Time never changes unless you advance it

2. Time Advancement Pattern:

    >>> fake_time = FakeTimeAuthority()
    >>> fake_time.advance(seconds=31)  # past the 30s device cooldown

3. Pytest Fixture Pattern:
    Use the `fake_time_authority` fixture from conftest.py.

    async def test_cooldown_expires(fake_time_authority):
        fake_time_authority.advance(seconds=30)
        ...
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from posta.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_FROZEN_AT = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Controllable time authority for deterministic tests.

    Attributes:
        _current_time: The controlled current time.
    """

    def __init__(
        self,
        frozen_at: datetime | None = None,
    ) -> None:
        """Initialize the fake time authority.

        Args:
            frozen_at: Datetime to freeze time at. Defaults to
                2026-01-01T00:00:00 UTC. Naive values are taken as UTC.
        """
        if frozen_at is None:
            frozen_at = DEFAULT_FROZEN_AT
        if frozen_at.tzinfo is None:
            frozen_at = frozen_at.replace(tzinfo=timezone.utc)

        self._current_time: datetime = frozen_at

    # =========================================================================
    # TimeAuthorityProtocol Implementation
    # =========================================================================

    def now(self) -> datetime:
        """Return the controlled current time."""
        return self._current_time

    # =========================================================================
    # Test Control Methods
    # =========================================================================

    def advance(
        self,
        seconds: float | int | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Advance time by the specified amount.

        Args:
            seconds: Number of seconds to advance.
            delta: A timedelta to advance by. Takes precedence over seconds.

        Raises:
            ValueError: If neither seconds nor delta is provided.
            ValueError: If attempting to advance by negative time.
        """
        if delta is not None:
            advance_seconds = delta.total_seconds()
        elif seconds is not None:
            advance_seconds = float(seconds)
        else:
            raise ValueError("Must provide either 'seconds' or 'delta' argument")

        if advance_seconds < 0:
            raise ValueError(
                f"Cannot advance time backwards. Got {advance_seconds} seconds. "
                "Use set_time() for explicit time changes."
            )

        self._current_time += timedelta(seconds=advance_seconds)

    def set_time(self, dt: datetime) -> None:
        """Set the current time, forwards or backwards."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        self._current_time = dt
