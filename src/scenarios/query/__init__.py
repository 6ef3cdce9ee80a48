"""Scene query layer: filter normalization, evaluation and rendering."""

from __future__ import annotations

from .engine import FilterEngine, matches_setting
from .formatter import MarkdownFormatter, embolden_names
from .models import FilterRequest, SceneFilter, SearchOutcome, SearchPhase
from .normalizer import FilterNormalizer, split_characters
from .strategy import TranslationRetryStrategy, explain

__all__ = [
    "FilterEngine",
    "FilterNormalizer",
    "FilterRequest",
    "MarkdownFormatter",
    "SceneFilter",
    "SearchOutcome",
    "SearchPhase",
    "TranslationRetryStrategy",
    "embolden_names",
    "explain",
    "matches_setting",
    "split_characters",
]
