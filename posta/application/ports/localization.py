"""Localization collaborator port.

Language and dialect normalization happen outside the core. The core only
consumes the neutralized text this collaborator returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class LocalizedText:
    """Neutralized message text with detection metadata.

    Attributes:
        text: Text to use for the case description.
        detected_language: ISO language code.
        regional_dialect: Detected dialect, if any.
        requires_translation: Whether text differs from the raw message.
    """

    text: str
    detected_language: str = "en"
    regional_dialect: Optional[str] = None
    requires_translation: bool = False


@runtime_checkable
class LocalizationProtocol(Protocol):
    """Produces neutralized text for a raw intake message."""

    async def neutralize(self, message: str) -> LocalizedText:
        ...
