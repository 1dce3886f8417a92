"""Keyword goal classifier stub.

Maps words in a case description to reporting tags. Tags are returned in
rule order without duplicates; an unmatched description gets no tags.
"""

from __future__ import annotations

from typing import Optional

from posta.domain.models.case import Case

DEFAULT_KEYWORD_TAGS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("school", "uniform"), "SDG_4_PRIMARY"),
    (("read", "write"), "SDG_4_LITERACY"),
    (("girl", "woman"), "SDG_5_EMPOWERMENT"),
)


class GoalClassifierStub:
    """Stub implementation of GoalClassifierProtocol."""

    def __init__(
        self,
        rules: Optional[tuple[tuple[tuple[str, ...], str], ...]] = None,
    ) -> None:
        self._rules = rules if rules is not None else DEFAULT_KEYWORD_TAGS

    async def classify(self, case: Case) -> tuple[str, ...]:
        text = case.description.lower()
        tags = [tag for keywords, tag in self._rules if any(k in text for k in keywords)]
        return tuple(dict.fromkeys(tags))
