"""Locale-tolerant text and name normalization.

All functions here are pure and total: any string (including the empty
string) is accepted and no exception is raised.
"""

from __future__ import annotations

import re
import unicodedata

_PARENTHETICAL = re.compile(r"\s*\([^)]*\)")
_NON_NAME_CHARS = re.compile(r"[^\w'\s]|_")
_WHITESPACE = re.compile(r"\s+")


def fold_diacritics(text: str) -> str:
    """Strip combining marks so that "María" and "Maria" compare equal."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fold_preserving_length(text: str) -> str:
    """Fold diacritics one character at a time, keeping string offsets stable.

    Characters whose folded form is not exactly one character are kept
    unchanged, so index ``i`` in the result always maps to index ``i`` in
    ``text``.
    """
    folded = []
    for ch in text:
        base = fold_diacritics(ch)
        folded.append(base if len(base) == 1 else ch)
    return "".join(folded)


def normalize_text(text: str) -> str:
    """Fold diacritics and lowercase, for substring search."""
    return fold_diacritics(text or "").lower()


def normalize_name(name: str) -> str:
    """Fold diacritics, uppercase and collapse whitespace, for name equality."""
    folded = fold_diacritics(name or "").upper()
    return _WHITESPACE.sub(" ", folded).strip()


def clean_name(raw: str) -> str:
    """Turn a raw cue or mention into a bare upper-case name.

    Drops parenthetical asides such as ``(V.O.)`` or ``(CONT'D)``, replaces
    everything except letters, digits, apostrophes and spaces with a space,
    then collapses whitespace, so "Jean-Luc (V.O.)" becomes "JEAN LUC".
    """
    if not raw:
        return ""
    text = unicodedata.normalize("NFC", raw)
    text = _PARENTHETICAL.sub("", text)
    text = _NON_NAME_CHARS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip().upper()


def canonical_name(raw: str) -> str:
    """Clean and fold a raw name into the form used by the character roster."""
    return normalize_name(clean_name(raw))


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return _WHITESPACE.sub(" ", text or "").strip()
