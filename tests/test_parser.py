"""Tests for the screenplay parser."""

import pytest

from scenarios.parser import (
    Dialogue,
    Direction,
    ScreenplayParser,
    parse_screenplay,
)
from scenarios.parser.screenplay_parser import canonical_setting, split_heading
from tests.utils import SAMPLE_SCRIPT, SIMPLE_SCRIPT


class TestHeadingHelpers:
    """Test heading token and remainder handling."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("INT.", "INT"),
            ("ext.", "EXT"),
            ("INT./EXT.", "INT/EXT"),
            ("EXT / INT", "INT/EXT"),
            ("I/E", "INT/EXT"),
        ],
    )
    def test_canonical_setting(self, token, expected):
        """Setting tokens reduce to INT, EXT or INT/EXT."""
        assert canonical_setting(token) == expected

    def test_split_heading_on_last_separator(self):
        """Only the last " - " separates location and time."""
        assert split_heading("HOUSE - KITCHEN - NIGHT") == ("HOUSE - KITCHEN", "NIGHT")

    def test_split_heading_without_time(self):
        """A heading without a separator has no time."""
        assert split_heading("KITCHEN") == ("KITCHEN", "")


class TestSimpleScript:
    """Test the two-scene script with one speaker."""

    def test_scenes(self):
        """Headings, settings and dialogue are recognized."""
        result = parse_screenplay(SIMPLE_SCRIPT)

        assert [s.setting for s in result.scenes] == ["INT", "EXT"]
        assert [s.location for s in result.scenes] == ["OFFICE", "STREET"]
        assert [s.time for s in result.scenes] == ["DAY", "NIGHT"]
        assert [s.id for s in result.scenes] == ["1", "2"]
        assert result.scenes[0].parts == [
            Dialogue(character="PAUL", text="Hello there.")
        ]
        assert result.scenes[1].parts == [Dialogue(character="PAUL", text="Goodbye.")]

    def test_characters(self):
        """Character statistics aggregate across scenes."""
        result = parse_screenplay(SIMPLE_SCRIPT)

        assert len(result.characters) == 1
        paul = result.characters[0]
        assert paul.name == "PAUL"
        assert paul.scene_count == 2
        assert paul.dialogue_count == 2
        assert paul.scenes == [1, 2]

    def test_camel_case_serialization(self):
        """Serialized field names use camelCase."""
        data = parse_screenplay(SIMPLE_SCRIPT).model_dump(by_alias=True)
        assert data["characters"][0]["sceneCount"] == 2
        assert data["characters"][0]["dialogueCount"] == 2
        assert data["scenes"][0]["sceneNumber"] == 1
        assert data["scenes"][0]["parts"][0]["type"] == "dialogue"


class TestSampleScript:
    """Test a script with numbered headings, mentions and transitions."""

    @pytest.fixture
    def result(self):
        return parse_screenplay(SAMPLE_SCRIPT)

    def test_numbered_headings(self, result):
        """Explicit heading numbers become scene ids."""
        assert [s.id for s in result.scenes] == ["1", "2", "3"]
        assert [s.number for s in result.scenes] == ["1", "2", "3"]
        assert result.scenes[2].setting == "INT/EXT"
        assert result.scenes[2].location == "CAR"
        assert result.scenes[2].time == "DUSK"

    def test_roster_only_has_speakers(self, result):
        """Capitalized mentions that never speak are not characters."""
        names = [c.name for c in result.characters]
        assert names == ["MARIA", "PEDRO"]

    def test_scene_characters_include_mentions(self, result):
        """A speaker mentioned in direction counts as present."""
        assert result.scenes[0].characters == ["MARIA", "PEDRO"]
        assert result.scenes[1].characters == ["MARIA"]
        assert result.scenes[2].characters == ["PEDRO"]

    def test_roster_membership(self, result):
        """Every scene character is in the roster."""
        roster = {c.name for c in result.characters}
        for scene in result.scenes:
            assert set(scene.characters) <= roster

    def test_parenthetical_cue(self, result):
        """A cue with (V.O.) is attributed to the bare name."""
        dialogue = result.scenes[0].dialogue
        assert [d.character for d in dialogue] == ["MARIA", "PEDRO"]
        assert dialogue[1].text == "I'm not hungry."

    def test_direction_parts(self, result):
        """Direction text is kept as parts, CUT TO included."""
        parts = result.scenes[1].parts
        directions = [p.text for p in parts if isinstance(p, Direction)]
        assert directions[0].startswith("Sunlight.")
        assert directions[-1] == "CUT TO:"

    def test_statistics(self, result):
        """Scene membership counts mentions as well as dialogue."""
        stats = {c.name: c for c in result.characters}
        assert stats["MARIA"].scenes == [1, 2]
        assert stats["MARIA"].dialogue_count == 2
        assert stats["PEDRO"].scenes == [1, 3]
        assert stats["PEDRO"].scene_count == 2

    def test_body_strips_heading(self, result):
        """The scene body is the raw transcript without its heading."""
        scene = result.scenes[0]
        assert scene.raw.startswith("1. INT. KITCHEN - NIGHT")
        assert not scene.body.lstrip().startswith("1. INT.")
        assert "Dinner is ready." in scene.body


class TestDegenerateInput:
    """Test input the parser cannot make sense of."""

    @pytest.mark.parametrize(
        "text",
        ["", None, "Just some prose.\nNo headings here.", "PAUL\nHello."],
    )
    def test_no_heading_gives_empty_result(self, text):
        """Without a heading there are no scenes and no characters."""
        result = parse_screenplay(text)
        assert result.scenes == []
        assert result.characters == []

    def test_cue_without_dialogue_becomes_direction(self):
        """An all-caps line with nothing under it is kept as direction."""
        result = parse_screenplay("INT. HALL - DAY\nBANG\n\nPAUL\nWho's there?")
        scene = result.scenes[0]
        assert scene.parts[0] == Direction(text="BANG")
        assert [c.name for c in result.characters] == ["PAUL"]

    def test_text_before_first_heading_is_ignored(self):
        """Title page text does not open a scene."""
        result = parse_screenplay("MY SCRIPT\nby Someone\n\nINT. HALL - DAY\nPAUL\nHi.")
        assert len(result.scenes) == 1
        assert result.scenes[0].raw.startswith("INT. HALL - DAY")

    def test_trailing_page_number_is_stripped(self):
        """A bare numeral after the time is a PDF column artifact."""
        result = parse_screenplay("INT. OFFICE - DAY 14\nPAUL\nHi.")
        assert result.scenes[0].time == "DAY"

    def test_repeated_scene_numbers_get_suffixes(self):
        """Revised scripts repeat numbers; ids stay unique."""
        text = "12. INT. A - DAY\nX\nHi.\n\n12. INT. B - DAY\nX\nHo."
        result = parse_screenplay(text)
        assert [s.id for s in result.scenes] == ["12", "12A"]

    def test_heading_like_word_is_not_a_heading(self):
        """Words starting with INT or I/E are not headings."""
        result = parse_screenplay("INTERIOR design\nI/Every day")
        assert result.scenes == []

    def test_stop_words_are_not_names(self):
        """Capitalized stop words in direction are skipped."""
        result = parse_screenplay("INT. ROOM - DAY\nThe door opens.\n\nANNA\nHi.")
        assert result.scenes[0].characters == ["ANNA"]

    def test_parser_instances_are_reusable(self):
        """One parser can parse several scripts independently."""
        parser = ScreenplayParser()
        first = parser.parse(SIMPLE_SCRIPT)
        second = parser.parse(SAMPLE_SCRIPT)
        assert len(first.scenes) == 2
        assert len(second.scenes) == 3
