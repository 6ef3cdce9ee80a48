"""Capabilities injected into the scene service."""

from __future__ import annotations

from scenarios.capabilities.llm import LLMCapabilities, parse_json_object
from scenarios.capabilities.null import NullCapabilities
from scenarios.capabilities.pdf import PdfTextExtractor
from scenarios.capabilities.protocols import (
    DurationEstimator,
    FilterExtractor,
    LocationGuesser,
    SceneCapabilities,
    TextExtractor,
    Translator,
)
from scenarios.capabilities.safe import SafeCapabilities, guarded

__all__ = [
    "DurationEstimator",
    "FilterExtractor",
    "LLMCapabilities",
    "LocationGuesser",
    "NullCapabilities",
    "PdfTextExtractor",
    "SafeCapabilities",
    "SceneCapabilities",
    "TextExtractor",
    "Translator",
    "guarded",
    "parse_json_object",
]
