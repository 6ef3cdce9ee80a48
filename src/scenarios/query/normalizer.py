"""Normalize loosely typed filter requests into canonical SceneFilter records."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from scenarios.capabilities.protocols import Translator
from scenarios.config import get_logger
from scenarios.exceptions import ValidationError
from scenarios.parser.vocabulary import Vocabulary, load_vocabulary
from scenarios.query.models import FilterRequest, SceneFilter
from scenarios.utils.text import collapse_whitespace, normalize_text

logger = get_logger(__name__)

_CHARACTER_SEPARATORS = re.compile(r"\s*(?:[,/&]|\band\b)\s*", re.IGNORECASE)
_FIRST_INTEGER = re.compile(r"-?\d+")

_TRUE_WORDS = frozenset(
    {"true", "yes", "y", "1", "si", "oui", "ja", "sim", "vero", "vrai", "verdadero"}
)
_FALSE_WORDS = frozenset(
    {"false", "no", "n", "0", "non", "nein", "nao", "falso", "faux"}
)


def split_characters(value: str | list[str] | None) -> list[str]:
    """Split a character filter on ``,``, ``/``, ``&`` and "and", dropping repeats."""
    if value is None:
        return []
    items = [value] if isinstance(value, str) else value

    names: dict[str, None] = {}
    for item in items:
        for piece in _CHARACTER_SEPARATORS.split(str(item)):
            name = collapse_whitespace(piece)
            if name:
                names.setdefault(name, None)
    return list(names)


def coerce_int(field: str, value: Any) -> int | None:
    """Parse an integer out of a number or a string such as ``"scene 12"``.

    Raises:
        ValidationError: If a non-empty value holds no number
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)

    text = str(value).strip()
    if not text:
        return None
    match = _FIRST_INTEGER.search(text)
    if match is None:
        raise ValidationError(
            message=f"Filter '{field}' must be a number",
            hint="Pass a whole number such as 12 or \"12\"",
            details={"field": field, "value": value},
        )
    return int(match.group())


def coerce_bool(field: str, value: Any) -> bool | None:
    """Parse a boolean from a bool, a number, or a yes/no word in several languages.

    Raises:
        ValidationError: If the value is not recognizable as yes or no
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value != 0

    text = normalize_text(str(value)).strip()
    if not text:
        return None
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValidationError(
        message=f"Filter '{field}' must be true or false",
        hint="Use true/false or yes/no",
        details={"field": field, "value": value},
    )


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = collapse_whitespace(value)
    return value or None


class FilterNormalizer:
    """Turn raw filter parameters into a canonical SceneFilter.

    Beyond type coercion, the normalizer moves time-of-day words that ended up
    in the setting ("INT at night") into the time field and reduces the
    setting to INT, EXT or INT/EXT when it names either.
    """

    def __init__(
        self,
        vocabulary: Vocabulary | None = None,
        translator: Translator | None = None,
    ) -> None:
        """Initialize the normalizer.

        Args:
            vocabulary: Time-of-day and setting synonyms; packaged data by default
            translator: Used only when ``normalize`` is called with ``translate=True``
        """
        self.vocabulary = vocabulary or load_vocabulary()
        self.translator = translator

    @staticmethod
    def parse_request(
        request: FilterRequest | Mapping[str, Any] | None,
    ) -> FilterRequest:
        """Validate raw parameters into a FilterRequest.

        Raises:
            ValidationError: If a field has a type that cannot be coerced at all
        """
        if isinstance(request, FilterRequest):
            return request
        try:
            return FilterRequest.model_validate(dict(request or {}))
        except PydanticValidationError as e:
            raise ValidationError(
                message="Invalid filter parameters",
                hint="Check field names and value types",
                details={"errors": e.errors(include_url=False)},
            ) from e

    async def normalize(
        self,
        request: FilterRequest | Mapping[str, Any] | None,
        *,
        translate: bool = False,
    ) -> SceneFilter:
        """Normalize ``request``, translating free-text fields first if asked.

        Args:
            request: Raw filter parameters (camelCase or snake_case keys)
            translate: Pass free-text fields through the translator first

        Returns:
            Canonical filter record; ``None`` fields impose no constraint

        Raises:
            ValidationError: If a numeric or boolean field cannot be parsed
        """
        raw = self.parse_request(request)

        characters = split_characters(raw.characters)
        setting = _blank_to_none(raw.setting)
        location = _blank_to_none(raw.location)
        time = _blank_to_none(raw.time)
        shooting_location = _blank_to_none(raw.shooting_location)

        if translate and self.translator is not None:
            characters, setting, location, time, shooting_location = (
                await self._translate_fields(
                    self.translator,
                    characters,
                    setting,
                    location,
                    time,
                    shooting_location,
                )
            )

        setting, time = self.resolve_setting_and_time(setting, time)

        result = SceneFilter(
            scene_number=coerce_int("sceneNumber", raw.scene_number),
            characters=characters or None,
            setting=setting,
            location=location,
            time=time,
            scene_duration=coerce_int("sceneDuration", raw.scene_duration),
            shooting_date=_blank_to_none(raw.shooting_date),
            shooting_location=shooting_location,
            has_dates=coerce_bool("hasDates", raw.has_dates),
            has_location=coerce_bool("hasLocation", raw.has_location),
            min_date_count=coerce_int("minDateCount", raw.min_date_count),
        )
        logger.debug(
            "Normalized filters",
            translated=translate,
            filters=result.supplied(),
        )
        return result

    async def _translate_fields(
        self,
        translator: Translator,
        characters: list[str],
        setting: str | None,
        location: str | None,
        time: str | None,
        shooting_location: str | None,
    ) -> tuple[list[str], str | None, str | None, str | None, str | None]:
        async def translate(text: str | None) -> str | None:
            if not text:
                return text
            return _blank_to_none(await translator.translate_to_english(text))

        translated = await asyncio.gather(
            *(translate(name) for name in characters),
            translate(setting),
            translate(location),
            translate(time),
            translate(shooting_location),
        )
        names = translated[: len(characters)]
        setting, location, time, shooting_location = translated[len(characters) :]
        return (
            split_characters([name for name in names if name]),
            setting,
            location,
            time,
            shooting_location,
        )

    def resolve_setting_and_time(
        self, setting: str | None, time: str | None
    ) -> tuple[str | None, str | None]:
        """Move time-of-day words out of ``setting`` and canonicalize it.

        The canonical English word of every time found in the setting is
        appended to ``time`` unless ``time`` already mentions it.
        """
        if setting is None:
            return None, time

        remainder = normalize_text(setting)
        found = self.vocabulary.times_in(remainder)
        for canonical in found:
            remainder = self.vocabulary.time_patterns[canonical].sub(" ", remainder)

        if found:
            words = [
                word
                for word in remainder.split()
                if word.strip(".,:;") not in self.vocabulary.connectors
            ]
            remainder = " ".join(words)
            for canonical in found:
                if time is None:
                    time = canonical
                elif canonical not in normalize_text(time):
                    time = f"{time} {canonical}"

        tokens = self.vocabulary.setting_tokens(remainder)
        if tokens == {"int", "ext"}:
            return "INT/EXT", time
        if tokens:
            return tokens.pop().upper(), time
        if found:
            # Nothing but connectors was left next to the time word
            return _blank_to_none(remainder.strip(" .-")), time
        return setting, time
