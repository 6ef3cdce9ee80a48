"""Translate-and-retry search over the scene store.

Filters often arrive in a different language than the screenplay (a French
request against an English script, or the reverse). A search therefore runs
as a small state machine:

    LITERAL -> TRANSLATED -> EXHAUSTED

The literal pass normalizes and filters as-is. Only when it finds nothing
are the free-text fields translated to English and the search retried once.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from scenarios.capabilities.protocols import FilterExtractor
from scenarios.config import get_logger
from scenarios.exceptions import ValidationError
from scenarios.parser.models import Scene
from scenarios.query.engine import FilterEngine
from scenarios.query.models import (
    FilterRequest,
    SceneFilter,
    SearchOutcome,
    SearchPhase,
)
from scenarios.query.normalizer import FilterNormalizer

logger = get_logger(__name__)

FilterParams = FilterRequest | Mapping[str, Any] | None

NO_FILTERS_UNDERSTOOD = (
    "No scenes found. The request could not be turned into scene filters."
)

_FIELD_LABELS = {
    "scene_number": "scene number",
    "characters": "characters",
    "setting": "setting",
    "location": "location",
    "time": "time",
    "scene_duration": "duration",
    "shooting_date": "shooting date",
    "shooting_location": "shooting location",
    "has_dates": "has shooting dates",
    "has_location": "has shooting location",
    "min_date_count": "at least this many shooting dates",
}


def explain(filters: SceneFilter) -> str:
    """Human-readable sentence describing an empty search."""
    supplied = filters.supplied()
    if not supplied:
        return "No scenes found. Parse a script or register scenes first."

    criteria = []
    for key, value in supplied.items():
        if isinstance(value, list):
            value = ", ".join(value)
        elif isinstance(value, bool):
            value = "yes" if value else "no"
        criteria.append(f"{_FIELD_LABELS[key]} {value}")
    return "No scenes found matching " + "; ".join(criteria) + "."


class TranslationRetryStrategy:
    """Run literal-then-translated searches against a store snapshot.

    ``snapshot`` is called after normalization finishes, so a translation in
    flight never holds the store lock and filtering always sees the latest
    scenes.
    """

    def __init__(
        self,
        normalizer: FilterNormalizer,
        engine: FilterEngine,
        snapshot: Callable[[], list[Scene]],
        translate_enabled: bool = True,
    ) -> None:
        self.normalizer = normalizer
        self.engine = engine
        self.snapshot = snapshot
        self.translate_enabled = translate_enabled

    async def find(self, params: FilterParams) -> SearchOutcome:
        """Search literally, then once more with translated filters if empty.

        Raises:
            ValidationError: If the parameters cannot be normalized
        """
        phase = SearchPhase.LITERAL
        filters = await self.normalizer.normalize(params)
        scenes = self.engine.filter(self.snapshot(), filters)

        while not scenes:
            phase = self._next_phase(phase, filters)
            if phase is SearchPhase.EXHAUSTED:
                logger.info("No scenes matched", filters=filters.supplied())
                return SearchOutcome(
                    scenes=[],
                    phase=phase,
                    filters=filters,
                    explanation=explain(filters),
                )
            filters = await self.normalizer.normalize(params, translate=True)
            scenes = self.engine.filter(self.snapshot(), filters)

        logger.debug("Scenes matched", phase=phase.value, count=len(scenes))
        return SearchOutcome(scenes=scenes, phase=phase, filters=filters)

    async def query(self, prompt: str, extractor: FilterExtractor) -> SearchOutcome:
        """Extract filters from a free-form request and search once, translated.

        An extraction that yields no usable filter (the extractor failed, timed
        out, or returned values that cannot be coerced) finds nothing rather
        than every scene.
        """
        params = await extractor.extract_filters(prompt)
        try:
            filters = await self.normalizer.normalize(
                params, translate=self.translate_enabled
            )
        except ValidationError as e:
            logger.warning("Unusable extracted filters", prompt=prompt, error=e.message)
            return SearchOutcome(
                scenes=[],
                phase=SearchPhase.EXHAUSTED,
                filters=SceneFilter(),
                explanation=NO_FILTERS_UNDERSTOOD,
            )
        if not filters.supplied():
            logger.info("No filters extracted", prompt=prompt)
            return SearchOutcome(
                scenes=[],
                phase=SearchPhase.EXHAUSTED,
                filters=filters,
                explanation=NO_FILTERS_UNDERSTOOD,
            )

        scenes = self.engine.filter(self.snapshot(), filters)
        logger.info(
            "Answered scene query",
            filters=filters.supplied(),
            count=len(scenes),
        )
        if scenes:
            return SearchOutcome(
                scenes=scenes, phase=SearchPhase.TRANSLATED, filters=filters
            )
        return SearchOutcome(
            scenes=[],
            phase=SearchPhase.EXHAUSTED,
            filters=filters,
            explanation=explain(filters),
        )

    def _next_phase(self, phase: SearchPhase, filters: SceneFilter) -> SearchPhase:
        if (
            phase is SearchPhase.LITERAL
            and self.translate_enabled
            and filters.has_free_text()
        ):
            return SearchPhase.TRANSLATED
        return SearchPhase.EXHAUSTED
