"""Conjunctive evaluation of canonical filters over stored scenes."""

from __future__ import annotations

from collections.abc import Iterable

from scenarios.parser.models import Scene
from scenarios.parser.vocabulary import Vocabulary, load_vocabulary
from scenarios.query.models import SceneFilter
from scenarios.utils.text import canonical_name, normalize_text


def _setting_tokens(text: str, vocabulary: Vocabulary) -> set[str]:
    tokens = vocabulary.setting_tokens(text)
    if tokens:
        return tokens
    literal = normalize_text(text).strip(" .")
    return {literal} if literal else set()


def matches_setting(
    scene_setting: str,
    query_setting: str,
    vocabulary: Vocabulary | None = None,
) -> bool:
    """Whether every interior/exterior token of the query is in the scene's.

    Values that name neither interior nor exterior compare as their
    normalized literal text, so an INT/EXT scene matches both "INT" and "EXT".
    """
    vocabulary = vocabulary or load_vocabulary()
    return _setting_tokens(query_setting, vocabulary) <= _setting_tokens(
        scene_setting, vocabulary
    )


def _date_part(value: str) -> str:
    return value.split("T", 1)[0].split(" ", 1)[0]


class FilterEngine:
    """Evaluate a SceneFilter as a conjunction of the fields it supplies."""

    def __init__(self, vocabulary: Vocabulary | None = None) -> None:
        self.vocabulary = vocabulary or load_vocabulary()

    def filter(self, scenes: Iterable[Scene], filters: SceneFilter) -> list[Scene]:
        """Scenes matching every supplied field, in their original order."""
        return [scene for scene in scenes if self.matches(scene, filters)]

    def matches(self, scene: Scene, filters: SceneFilter) -> bool:
        """Whether ``scene`` satisfies every non-``None`` field of ``filters``."""
        f = filters
        if f.scene_number is not None and scene.id != str(f.scene_number):
            return False
        if f.setting is not None and not matches_setting(
            scene.setting, f.setting, self.vocabulary
        ):
            return False
        if f.location is not None and not self._contains(scene.location, f.location):
            return False
        if f.time is not None and not self._matches_time(scene.time, f.time):
            return False
        if f.characters and not self._has_characters(scene, f.characters):
            return False
        if f.scene_duration is not None and scene.scene_duration != f.scene_duration:
            return False
        if f.shooting_date is not None and not self._has_date(scene, f.shooting_date):
            return False
        if f.shooting_location is not None and not any(
            self._contains(place, f.shooting_location)
            for place in scene.shooting_locations
        ):
            return False
        if f.has_dates is not None and bool(scene.shooting_dates) != f.has_dates:
            return False
        if (
            f.has_location is not None
            and bool(scene.shooting_locations) != f.has_location
        ):
            return False
        if (
            f.min_date_count is not None
            and len(scene.shooting_dates) < f.min_date_count
        ):
            return False
        return True

    @staticmethod
    def _contains(haystack: str, needle: str) -> bool:
        return normalize_text(needle).strip() in normalize_text(haystack)

    def _matches_time(self, scene_time: str, query_time: str) -> bool:
        if self._contains(scene_time, query_time):
            return True
        # "noche night": the canonical word appended from the setting matches
        return any(
            word in self.vocabulary.time_patterns and self._contains(scene_time, word)
            for word in normalize_text(query_time).split()
        )

    @staticmethod
    def _has_characters(scene: Scene, characters: list[str]) -> bool:
        present = {canonical_name(name) for name in scene.characters}
        return all(canonical_name(name) in present for name in characters)

    @staticmethod
    def _has_date(scene: Scene, date: str) -> bool:
        wanted = date.strip()
        return any(
            stored == wanted or _date_part(stored) == wanted
            for stored in scene.shooting_dates
        )
