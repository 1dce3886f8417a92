"""Journey repository port."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from posta.domain.models.journey import Journey


@runtime_checkable
class JourneyRepositoryProtocol(Protocol):
    """Storage for beneficiary journeys, keyed by (beneficiary, goal tag)."""

    async def get(self, beneficiary_id: str, goal_tag: str) -> Optional[Journey]:
        """Return the journey if one exists."""
        ...

    async def save(self, journey: Journey) -> None:
        """Insert or replace a journey."""
        ...
