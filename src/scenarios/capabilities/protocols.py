"""Protocol definitions for capabilities injected into the scene service."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Translator(Protocol):
    """Translates free text into English."""

    async def translate_to_english(self, text: str) -> str:
        """Return ``text`` in English, or unchanged if it already is."""
        ...


@runtime_checkable
class FilterExtractor(Protocol):
    """Turns a natural-language request into raw filter parameters."""

    async def extract_filters(self, prompt: str) -> dict[str, Any]:
        """Return filter parameters in the FilterRequest shape."""
        ...


@runtime_checkable
class DurationEstimator(Protocol):
    """Estimates how long a scene runs on screen."""

    async def estimate_scene_duration(self, text: str) -> int:
        """Return an estimate in seconds."""
        ...


@runtime_checkable
class LocationGuesser(Protocol):
    """Suggests real-world places where a scene could be filmed."""

    async def guess_filming_locations(self, text: str) -> list[str]:
        """Return free-text place names."""
        ...


@runtime_checkable
class SceneCapabilities(
    Translator, FilterExtractor, DurationEstimator, LocationGuesser, Protocol
):
    """Every asynchronous capability the scene service consumes."""


@runtime_checkable
class TextExtractor(Protocol):
    """Extracts raw text from a PDF document."""

    def extract_raw_text(self, pdf_bytes: bytes) -> str:
        """Return the document text, pages separated by newlines."""
        ...
