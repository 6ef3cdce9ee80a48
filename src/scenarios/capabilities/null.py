"""Capabilities that do nothing, used when no LLM is configured."""

from __future__ import annotations

from typing import Any


class NullCapabilities:
    """Identity translation and empty answers for every other capability."""

    async def translate_to_english(self, text: str) -> str:
        return text

    async def extract_filters(self, prompt: str) -> dict[str, Any]:
        return {}

    async def estimate_scene_duration(self, text: str) -> int:
        return 0

    async def guess_filming_locations(self, text: str) -> list[str]:
        return []
