"""Capabilities backed by JSON-mode chat completions."""

from __future__ import annotations

import json
import re
from typing import Any

from scenarios.config import get_logger
from scenarios.exceptions import LLMProviderError
from scenarios.llm.models import CompletionRequest
from scenarios.llm.provider import DEFAULT_MODEL, OpenAICompatibleProvider

logger = get_logger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)

TRANSLATE_PROMPT = (
    "Translate the user's text into English. Keep proper names as they are "
    "unless they have a common English form. If the text is already English, "
    'return it unchanged. Answer as JSON: {"text": "<translation>"}'
)

FILTERS_PROMPT = (
    "You turn requests about screenplay scenes into search filters. Answer as "
    "a JSON object using only these optional keys: sceneNumber (integer), "
    "characters (list of names), setting (INT, EXT or INT/EXT), location, "
    "time (e.g. DAY, NIGHT), sceneDuration (seconds), shootingDate "
    "(YYYY-MM-DD), shootingLocation, hasDates (boolean), hasLocation "
    "(boolean), minDateCount (integer). Leave out anything not asked for."
)

DURATION_PROMPT = (
    "Estimate how many seconds the following screenplay scene runs on screen. "
    'Answer as JSON: {"seconds": <integer>}'
)

LOCATIONS_PROMPT = (
    "Suggest up to five real-world places where the following screenplay "
    'scene could be filmed. Answer as JSON: {"locations": ["<place>", ...]}'
)


def parse_json_object(content: str) -> dict[str, Any]:
    """Read a JSON object from a completion, tolerating code fences and chatter.

    Raises:
        LLMProviderError: If no JSON object can be found
    """
    candidates = [content]
    fenced = _CODE_FENCE.search(content)
    if fenced:
        candidates.append(fenced.group(1))
    start, end = content.find("{"), content.rfind("}")
    if start != -1 and end > start:
        candidates.append(content[start : end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    raise LLMProviderError(
        message="Completion did not contain a JSON object",
        details={"preview": content[:200]},
    )


class LLMCapabilities:
    """Translation, filter extraction, duration and location guesses via an LLM."""

    def __init__(
        self,
        provider: OpenAICompatibleProvider,
        model: str | None = None,
        temperature: float = 0.0,
    ) -> None:
        self.provider = provider
        self.model = model or DEFAULT_MODEL
        self.temperature = temperature

    async def _ask(self, system: str, text: str) -> dict[str, Any]:
        response = await self.provider.complete(
            CompletionRequest(
                model=self.model,
                system=system,
                messages=[{"role": "user", "content": text}],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        )
        return parse_json_object(response.content)

    async def translate_to_english(self, text: str) -> str:
        data = await self._ask(TRANSLATE_PROMPT, text)
        translated = str(data.get("text") or "").strip()
        logger.debug("Translated text", source=text, translated=translated)
        return translated or text

    async def extract_filters(self, prompt: str) -> dict[str, Any]:
        data = await self._ask(FILTERS_PROMPT, prompt)
        logger.debug("Extracted filters", prompt=prompt, filters=data)
        return data

    async def estimate_scene_duration(self, text: str) -> int:
        data = await self._ask(DURATION_PROMPT, text)
        return int(data.get("seconds") or 0)

    async def guess_filming_locations(self, text: str) -> list[str]:
        data = await self._ask(LOCATIONS_PROMPT, text)
        locations = data.get("locations") or []
        return [str(place) for place in locations]
