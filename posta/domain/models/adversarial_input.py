"""Adversarial input deny-list.

Intake text is free text from beneficiaries and field agents and is later
shown to staff and fed to downstream tooling. Messages that carry
prompt-injection phrasing or script-injection markers are flagged HIGH.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Final, Optional

DEFAULT_ADVERSARIAL_PATTERNS: Final[tuple[str, ...]] = (
    # Prompt injection
    r"ignore (all )?previous instructions",
    r"system override",
    # Script injection
    r"<script",
)


def normalize_for_scanning(text: str) -> str:
    """Apply NFKC normalization so fullwidth/compatibility forms match."""
    return unicodedata.normalize("NFKC", text)


class AdversarialInputScanner:
    """Case-insensitive matcher over a deny-list of regular expressions."""

    def __init__(self, patterns: tuple[str, ...] = DEFAULT_ADVERSARIAL_PATTERNS) -> None:
        if not patterns:
            raise ValueError("At least one adversarial pattern is required")
        self._patterns = tuple(re.compile(p, re.IGNORECASE) for p in patterns)

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(p.pattern for p in self._patterns)

    def first_match(self, text: str) -> Optional[str]:
        """Return the first matching pattern, or None."""
        normalized = normalize_for_scanning(text)
        for pattern in self._patterns:
            if pattern.search(normalized):
                return pattern.pattern
        return None
