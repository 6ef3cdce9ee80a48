"""Shared test data and helpers."""

import re
from typing import Any

SIMPLE_SCRIPT = (
    "INT. OFFICE - DAY\nPAUL\nHello there.\n\nEXT. STREET - NIGHT\nPAUL\nGoodbye."
)

SAMPLE_SCRIPT = """\
1. INT. KITCHEN - NIGHT

MARÍA sets the table. PEDRO watches from the door.

MARÍA
Dinner is ready.

PEDRO (V.O.)
I'm not hungry.

2. EXT. GARDEN - DAY

Sunlight. María walks among the roses with Rex the dog.

MARÍA
Where is everyone?

CUT TO:

3. INT./EXT. CAR - DUSK

PEDRO drives. The radio plays.

PEDRO
We're late.
"""

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def strip_ansi_codes(text: str) -> str:
    """Strip ANSI escape sequences from CLI output."""
    return _ANSI_ESCAPE.sub("", text)


class FakeCapabilities:
    """In-memory stand-in for the LLM-backed capabilities."""

    def __init__(
        self,
        translations: dict[str, str] | None = None,
        filters: dict[str, Any] | None = None,
        duration: int = 90,
        locations: list[str] | None = None,
    ) -> None:
        self.translations = {k.lower(): v for k, v in (translations or {}).items()}
        self.filters = filters or {}
        self.duration = duration
        self.locations = locations if locations is not None else ["Lisbon"]
        self.translated: list[str] = []
        self.prompts: list[str] = []

    async def translate_to_english(self, text: str) -> str:
        self.translated.append(text)
        return self.translations.get(text.lower(), text)

    async def extract_filters(self, prompt: str) -> dict[str, Any]:
        self.prompts.append(prompt)
        return dict(self.filters)

    async def estimate_scene_duration(self, text: str) -> int:
        return self.duration

    async def guess_filming_locations(self, text: str) -> list[str]:
        return list(self.locations)

