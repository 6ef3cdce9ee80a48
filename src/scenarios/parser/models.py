"""Data models for parsed screenplays.

Field names serialize in camelCase (``sceneNumber``, ``dialogueCount``...)
so that JSON snapshots keep the layout clients already cache.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scenarios.parser.patterns import HEADING_PATTERN


class CamelModel(BaseModel):
    """Immutable model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Dialogue(CamelModel):
    """A block of speech attributed to one character."""

    type: Literal["dialogue"] = "dialogue"
    character: str
    text: str


class Direction(CamelModel):
    """Action or descriptive text outside of dialogue."""

    type: Literal["direction"] = "direction"
    text: str


ScenePart = Annotated[Dialogue | Direction, Field(discriminator="type")]


class Scene(CamelModel):
    """One screenplay scene with its heading metadata and typed parts."""

    id: str
    scene_number: int | None = None
    number: str | None = Field(
        default=None, description="Explicit numeric label printed on the heading"
    )
    heading: str = ""
    setting: str = ""
    location: str = ""
    time: str = ""
    parts: list[ScenePart] = Field(default_factory=list)
    characters: list[str] = Field(default_factory=list)
    raw: str = Field(default="", description="Scene transcript, heading included")

    # Production fields filled in by later registration steps
    scene_duration: int | None = Field(default=None, description="Seconds")
    shooting_dates: list[str] = Field(default_factory=list)
    shooting_locations: list[str] = Field(default_factory=list)

    @property
    def body(self) -> str:
        """Scene transcript without its heading line."""
        lines = self.raw.splitlines()
        if lines and HEADING_PATTERN.match(lines[0]):
            lines = lines[1:]
        return "\n".join(lines).strip("\n")

    @property
    def dialogue(self) -> list[Dialogue]:
        return [part for part in self.parts if isinstance(part, Dialogue)]


class CharacterStats(CamelModel):
    """Aggregate statistics for one speaking character."""

    name: str
    scene_count: int = 0
    dialogue_count: int = 0
    scenes: list[int] = Field(default_factory=list)

    # Filled in by the casting step
    actor_name: str | None = None
    actor_email: str | None = None


class ParseResult(CamelModel):
    """Scenes and character roster produced by one parse run."""

    scenes: list[Scene] = Field(default_factory=list)
    characters: list[CharacterStats] = Field(default_factory=list)

