"""Utility functions for Scenarios."""

from scenarios.utils.text import (
    canonical_name,
    clean_name,
    collapse_whitespace,
    fold_diacritics,
    fold_preserving_length,
    normalize_name,
    normalize_text,
)

__all__ = [
    "canonical_name",
    "clean_name",
    "collapse_whitespace",
    "fold_diacritics",
    "fold_preserving_length",
    "normalize_name",
    "normalize_text",
]
