"""Case repository port.

Cases are never physically deleted; terminal cases stay queryable for audit.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from posta.domain.models.case import Case


@runtime_checkable
class CaseRepositoryProtocol(Protocol):
    """Storage for cases."""

    async def save(self, case: Case) -> None:
        """Insert or replace a case."""
        ...

    async def get(self, case_id: str) -> Optional[Case]:
        """Return a case by id."""
        ...

    async def list_by_beneficiary(self, beneficiary_id: str) -> list[Case]:
        """Return a beneficiary's cases in creation order."""
        ...
