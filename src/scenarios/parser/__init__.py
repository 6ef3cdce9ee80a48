"""Screenplay parser for Scenarios."""

from __future__ import annotations

from .models import CharacterStats, Dialogue, Direction, ParseResult, Scene, ScenePart
from .screenplay_parser import ScreenplayParser, parse_screenplay
from .vocabulary import Vocabulary, load_vocabulary

__all__ = [
    "CharacterStats",
    "Dialogue",
    "Direction",
    "ParseResult",
    "Scene",
    "ScenePart",
    "ScreenplayParser",
    "Vocabulary",
    "load_vocabulary",
    "parse_screenplay",
]
