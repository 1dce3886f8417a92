"""Goal classification collaborator port.

Computes reporting goal tags for a case after it exists. Classification of
free text is not part of the core.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from posta.domain.models.case import Case


@runtime_checkable
class GoalClassifierProtocol(Protocol):
    """Assigns reporting tags to a case."""

    async def classify(self, case: Case) -> tuple[str, ...]:
        ...
