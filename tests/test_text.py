"""Tests for locale-tolerant name and text normalization."""

import pytest

from scenarios.utils.text import (
    canonical_name,
    clean_name,
    collapse_whitespace,
    fold_diacritics,
    fold_preserving_length,
    normalize_name,
    normalize_text,
)


class TestNormalizeText:
    """Test diacritic folding and lowercasing."""

    def test_folds_and_lowercases(self):
        """Accented upper-case text becomes plain lower case."""
        assert normalize_text("CAFÉ Crème") == "cafe creme"

    def test_empty_input(self):
        """Empty input yields empty output."""
        assert normalize_text("") == ""

    def test_fold_diacritics_keeps_base_letters(self):
        """Combining marks are dropped, letters kept."""
        assert fold_diacritics("María José Ñuñez") == "Maria Jose Nunez"


class TestNormalizeName:
    """Test name comparison form."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("maría", "MARIA"),
            ("  Jean   Luc ", "JEAN LUC"),
            ("", ""),
        ],
    )
    def test_normalize_name(self, raw, expected):
        """Names fold accents, upper-case and collapse whitespace."""
        assert normalize_name(raw) == expected


class TestCleanName:
    """Test cue cleaning."""

    def test_strips_parenthetical(self):
        """Voice-over and continued markers are removed."""
        assert clean_name("PEDRO (V.O.)") == "PEDRO"
        assert clean_name("PAUL (CONT'D)") == "PAUL"

    def test_replaces_punctuation_with_spaces(self):
        """Hyphens and dots become spaces, apostrophes stay."""
        assert clean_name("Jean-Luc") == "JEAN LUC"
        assert clean_name("O'BRIEN.") == "O'BRIEN"

    def test_keeps_digits(self):
        """Digits are part of a name such as GUARD 2."""
        assert clean_name("guard #2") == "GUARD 2"

    def test_empty_input(self):
        """Empty input yields empty output."""
        assert clean_name("") == ""

    def test_canonical_name_folds_accents(self):
        """Canonical roster names are cleaned and folded."""
        assert canonical_name("María (O.S.)") == "MARIA"


class TestHelpers:
    """Test whitespace and offset-preserving helpers."""

    def test_collapse_whitespace(self):
        """Runs of whitespace collapse to single spaces."""
        assert collapse_whitespace(" a \n\t b ") == "a b"

    def test_fold_preserving_length(self):
        """Folding one character at a time keeps offsets stable."""
        text = "Ça va, María?"
        folded = fold_preserving_length(text)
        assert folded == "Ca va, Maria?"
        assert len(folded) == len(text)
