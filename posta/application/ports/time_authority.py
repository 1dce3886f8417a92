"""Time Authority Protocol - interface for consistent timestamp provisioning.

All services that need timestamps inject a TimeAuthorityProtocol
implementation instead of calling datetime.now() directly.

Benefits:
1. **Consistency**: All services get time from single authority
2. **Testability**: Tests inject FakeTimeAuthority for deterministic cooldowns
3. **Auditability**: Ledger timestamps provably come from a single source
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    For production:
        Use SystemTimeAuthority from posta/infrastructure/adapters/

    For testing:
        Use FakeTimeAuthority from tests/helpers/fake_time_authority.py
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return current time with timezone awareness (UTC)."""
        ...
