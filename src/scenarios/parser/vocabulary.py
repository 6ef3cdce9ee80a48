"""Language-tagged vocabulary shared by the parser and the query layer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cache
from importlib import resources
from typing import Any

import yaml

from scenarios.utils.text import normalize_name, normalize_text

VOCABULARY_RESOURCE = "vocabulary.yaml"


def _flatten(by_language: dict[str, list[Any]] | None) -> list[str]:
    words: list[str] = []
    for entries in (by_language or {}).values():
        words.extend(str(entry) for entry in entries or [])
    return words


def _word_pattern(words: list[str]) -> re.Pattern[str] | None:
    """Compile a whole-word alternation over normalized words, longest first."""
    unique = sorted({normalize_text(w) for w in words if w}, key=len, reverse=True)
    if not unique:
        return None
    alternation = "|".join(re.escape(w) for w in unique)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)")


@dataclass(frozen=True)
class Vocabulary:
    """Normalized word lists loaded from the packaged vocabulary file.

    Patterns match against text that already went through ``normalize_text``.
    """

    stop_words: frozenset[str]
    connectors: frozenset[str]
    time_patterns: dict[str, re.Pattern[str]]
    setting_patterns: dict[str, re.Pattern[str]]
    languages: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Vocabulary:
        """Build a vocabulary from the raw YAML mapping."""
        stop_words_by_language = data.get("stop_words") or {}

        time_patterns = {}
        for canonical, by_language in (data.get("time_of_day") or {}).items():
            pattern = _word_pattern([canonical, *_flatten(by_language)])
            if pattern is not None:
                time_patterns[canonical] = pattern

        setting_patterns = {}
        for token, by_language in (data.get("setting") or {}).items():
            pattern = _word_pattern(_flatten(by_language))
            if pattern is not None:
                setting_patterns[token] = pattern

        return cls(
            stop_words=frozenset(
                normalize_name(w) for w in _flatten(stop_words_by_language)
            ),
            connectors=frozenset(
                normalize_text(w) for w in _flatten(data.get("connectors"))
            ),
            time_patterns=time_patterns,
            setting_patterns=setting_patterns,
            languages=tuple(sorted(stop_words_by_language)),
        )

    def is_stop_word(self, name: str) -> bool:
        return normalize_name(name) in self.stop_words

    def times_in(self, text: str) -> list[str]:
        """Canonical English time-of-day words mentioned anywhere in ``text``."""
        normalized = normalize_text(text)
        return [
            canonical
            for canonical, pattern in self.time_patterns.items()
            if pattern.search(normalized)
        ]

    def setting_tokens(self, text: str) -> set[str]:
        """Interior/exterior tokens (``int``, ``ext``) mentioned in ``text``."""
        normalized = normalize_text(text)
        tokens = {
            token
            for token in ("int", "ext")
            if token in self.setting_patterns
            and self.setting_patterns[token].search(normalized)
        }
        both = self.setting_patterns.get("both")
        if both is not None and both.search(normalized):
            tokens.update({"int", "ext"})
        return tokens


@cache
def load_vocabulary() -> Vocabulary:
    """Load and cache the packaged vocabulary."""
    text = (
        resources.files("scenarios.parser")
        .joinpath("data")
        .joinpath(VOCABULARY_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return Vocabulary.from_mapping(yaml.safe_load(text) or {})
