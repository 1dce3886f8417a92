"""Localization collaborator stub.

Recognizes a few West African Pidgin terms and marks such messages as
needing translation. Real dialect detection and translation live outside
the governance core.
"""

from __future__ import annotations

from posta.application.ports.localization import LocalizedText

PIDGIN_DIALECT = "West_African_Pidgin"
PIDGIN_TERMS: tuple[str, ...] = ("pikin", "dash", "no get")
NEUTRALIZED_PREFIX = "[Neutralized]: "


class LocalizationStub:
    """Stub implementation of LocalizationProtocol.

    Messages containing a known pidgin term come back prefixed with
    "[Neutralized]: "; anything else is returned as-is.
    """

    def __init__(self) -> None:
        self._calls: list[str] = []

    async def neutralize(self, message: str) -> LocalizedText:
        self._calls.append(message)
        lowered = message.lower()
        if any(term in lowered for term in PIDGIN_TERMS):
            return LocalizedText(
                text=f"{NEUTRALIZED_PREFIX}{message}",
                detected_language="en",
                regional_dialect=PIDGIN_DIALECT,
                requires_translation=True,
            )
        return LocalizedText(text=message)

    # Test helper methods

    @property
    def calls(self) -> list[str]:
        return list(self._calls)
