"""Filter records for scene queries."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scenarios.parser.models import Scene


class FilterRequest(BaseModel):
    """Loosely typed filter parameters as they arrive from users or an LLM.

    Numbers may be numeric strings, ``characters`` may be a single string or
    a list, and unknown keys are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    scene_number: int | float | str | None = None
    characters: str | list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("characters", "character"),
    )
    setting: str | None = None
    location: str | None = None
    time: str | None = None
    scene_duration: int | float | str | None = None
    shooting_date: str | None = None
    shooting_location: str | None = None
    has_dates: bool | int | str | None = None
    has_location: bool | int | str | None = None
    min_date_count: int | float | str | None = None


@dataclass
class SceneFilter:
    """Canonical, strongly typed filter record.

    ``None`` means "no constraint" for every field.
    """

    scene_number: int | None = None
    characters: list[str] | None = None
    setting: str | None = None
    location: str | None = None
    time: str | None = None
    scene_duration: int | None = None
    shooting_date: str | None = None
    shooting_location: str | None = None
    has_dates: bool | None = None
    has_location: bool | None = None
    min_date_count: int | None = None

    def supplied(self) -> dict[str, Any]:
        """Fields that constrain the search, in declaration order."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    def has_free_text(self) -> bool:
        """Whether any field could change under translation."""
        return bool(
            self.characters
            or self.setting
            or self.location
            or self.time
            or self.shooting_location
        )


class SearchPhase(str, Enum):
    """Progress of a translate-and-retry search."""

    LITERAL = "literal"
    TRANSLATED = "translated"
    EXHAUSTED = "exhausted"


@dataclass
class SearchOutcome:
    """Result of a scene search with the filters that produced it."""

    scenes: list[Scene]
    phase: SearchPhase
    filters: SceneFilter
    explanation: str | None = None

    @property
    def count(self) -> int:
        return len(self.scenes)
