"""Timeout and failure guard around injected capabilities."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any, TypeVar

from scenarios.capabilities.null import NullCapabilities
from scenarios.capabilities.protocols import SceneCapabilities
from scenarios.config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SafeCapabilities:
    """Bound every capability call by a timeout and degrade failures.

    A capability that raises, times out, or returns the wrong shape yields
    the same answer ``NullCapabilities`` would: the untranslated text, no
    filters, a zero duration, or no locations. A failing translator therefore
    never turns a search into an error.
    """

    def __init__(self, inner: SceneCapabilities, timeout: float = 20.0) -> None:
        """Initialize the guard.

        Args:
            inner: Capabilities to call
            timeout: Upper bound in seconds for each call
        """
        self.inner = inner
        self.timeout = timeout

    async def _guarded(self, name: str, call: Awaitable[T], fallback: T) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except TimeoutError:
            logger.warning(
                "Capability timed out, using fallback",
                capability=name,
                timeout=self.timeout,
            )
        except Exception as e:
            logger.warning(
                "Capability failed, using fallback",
                capability=name,
                error=str(e),
                error_type=type(e).__name__,
            )
        return fallback

    async def translate_to_english(self, text: str) -> str:
        result = await self._guarded(
            "translate_to_english", self.inner.translate_to_english(text), text
        )
        return result if isinstance(result, str) and result.strip() else text

    async def extract_filters(self, prompt: str) -> dict[str, Any]:
        result = await self._guarded(
            "extract_filters", self.inner.extract_filters(prompt), {}
        )
        return result if isinstance(result, dict) else {}

    async def estimate_scene_duration(self, text: str) -> int:
        result = await self._guarded(
            "estimate_scene_duration", self.inner.estimate_scene_duration(text), 0
        )
        try:
            return max(int(result), 0)
        except (TypeError, ValueError):
            return 0

    async def guess_filming_locations(self, text: str) -> list[str]:
        result = await self._guarded(
            "guess_filming_locations", self.inner.guess_filming_locations(text), []
        )
        if not isinstance(result, list):
            return []
        return [str(place).strip() for place in result if str(place).strip()]


def guarded(
    capabilities: SceneCapabilities | None, timeout: float = 20.0
) -> SafeCapabilities:
    """Wrap ``capabilities`` (or the null set) in a SafeCapabilities guard."""
    if isinstance(capabilities, SafeCapabilities):
        return capabilities
    return SafeCapabilities(capabilities or NullCapabilities(), timeout=timeout)
