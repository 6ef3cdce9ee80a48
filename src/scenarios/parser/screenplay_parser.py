"""Line-oriented parser turning raw screenplay text into scenes and characters.

The parser walks the text once. Outside of any scene it only looks for a
scene heading; inside a scene every line is a heading, a blank boundary, a
speaker cue, or text that belongs either to the open dialogue block or to
the buffered action direction.

Character names are collected two ways: speakers of dialogue blocks, and
runs of capitalized words in action lines. The second source is a
heuristic, so once the whole script is read only names that spoke at least
one line somewhere are kept.
"""

from __future__ import annotations

import string
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from enum import Enum

from scenarios.config import get_logger
from scenarios.parser.models import (
    CharacterStats,
    Dialogue,
    Direction,
    ParseResult,
    Scene,
    ScenePart,
)
from scenarios.parser.patterns import (
    CUE_PATTERN,
    CUT_TO_PATTERN,
    HEADING_PATTERN,
    SENTENCE_END,
    TOKEN_EDGE_PUNCTUATION,
    TRAILING_NUMERAL_PATTERN,
)
from scenarios.parser.vocabulary import Vocabulary, load_vocabulary
from scenarios.utils.text import canonical_name, collapse_whitespace

logger = get_logger(__name__)


class ParserState(str, Enum):
    """Where the parser currently is relative to scenes and speakers."""

    OUTSIDE_SCENE = "outside_scene"
    IN_SCENE = "in_scene"
    IN_DIALOGUE = "in_dialogue"


def canonical_setting(token: str) -> str:
    """Map a heading token such as ``INT./EXT.`` or ``i/e`` to INT, EXT or INT/EXT."""
    compact = token.upper().replace(".", "").replace(" ", "")
    has_int = "INT" in compact or compact.startswith("I/")
    has_ext = "EXT" in compact or compact.endswith("/E")
    if has_int and has_ext:
        return "INT/EXT"
    return "EXT" if has_ext else "INT"


def split_heading(rest: str) -> tuple[str, str]:
    """Split the text after the setting token into (location, time)."""
    idx = rest.rfind(" - ")
    if idx == -1:
        return rest.strip(), ""
    return rest[:idx].strip(), rest[idx + 3 :].strip()


@dataclass
class _SceneBuffer:
    """Mutable per-scene state while the scene is still open."""

    scene_number: int
    scene_id: str
    number: str | None
    heading: str
    setting: str
    location: str
    time: str
    raw_lines: list[str] = field(default_factory=list)
    parts: list[ScenePart] = field(default_factory=list)
    # Insertion-ordered set of speakers and capitalized mentions
    present: dict[str, None] = field(default_factory=dict)


@dataclass
class _DialogueBlock:
    character: str
    lines: list[str] = field(default_factory=list)


class _ParseRun:
    """State for a single pass over one script."""

    def __init__(self, vocabulary: Vocabulary) -> None:
        self.vocabulary = vocabulary
        self.state = ParserState.OUTSIDE_SCENE
        self.closed: list[_SceneBuffer] = []
        self.current: _SceneBuffer | None = None
        self.dialogue: _DialogueBlock | None = None
        self.direction: list[str] = []
        self.used_ids: set[str] = set()
        self.dialogue_counts: Counter[str] = Counter()
        self.membership: defaultdict[str, set[int]] = defaultdict(set)

    def feed(self, raw_line: str) -> None:
        line = raw_line.rstrip()

        heading = HEADING_PATTERN.match(line)
        if heading:
            self._close_scene()
            self._open_scene(
                heading.group("number"),
                heading.group("setting"),
                heading.group("rest"),
                line,
            )
            return

        if self.state is ParserState.OUTSIDE_SCENE or self.current is None:
            return

        self.current.raw_lines.append(line)
        trimmed = line.strip()

        if not trimmed:
            self._flush_dialogue()
            self._flush_direction()
            return

        if CUE_PATTERN.match(trimmed) and trimmed.isupper():
            name = canonical_name(trimmed)
            if name:
                self._flush_dialogue()
                self._flush_direction()
                self.dialogue = _DialogueBlock(character=name)
                self.state = ParserState.IN_DIALOGUE
                return

        if self.state is ParserState.IN_DIALOGUE and self.dialogue is not None:
            self.dialogue.lines.append(trimmed)
        else:
            self.direction.append(trimmed)

    def finish(self) -> ParseResult:
        self._close_scene()

        roster = sorted(
            name
            for name, count in self.dialogue_counts.items()
            if count > 0 and "CUT TO" not in name
        )
        roster_set = set(roster)

        characters = [
            CharacterStats(
                name=name,
                scene_count=len(self.membership[name]),
                dialogue_count=self.dialogue_counts[name],
                scenes=sorted(self.membership[name]),
            )
            for name in roster
        ]
        scenes = [
            Scene(
                id=buffer.scene_id,
                scene_number=buffer.scene_number,
                number=buffer.number,
                heading=buffer.heading,
                setting=buffer.setting,
                location=buffer.location,
                time=buffer.time,
                parts=buffer.parts,
                characters=[name for name in buffer.present if name in roster_set],
                raw="\n".join(buffer.raw_lines).rstrip(),
            )
            for buffer in self.closed
        ]
        return ParseResult(scenes=scenes, characters=characters)

    def _open_scene(
        self, number: str | None, token: str, rest: str, line: str
    ) -> None:
        rest = TRAILING_NUMERAL_PATTERN.sub("", rest.strip()).strip()
        location, time = split_heading(rest)

        scene_number = int(number) if number else len(self.closed) + 1
        self.current = _SceneBuffer(
            scene_number=scene_number,
            scene_id=self._unique_id(str(scene_number)),
            number=number,
            heading=collapse_whitespace(f"{token} {rest}"),
            setting=canonical_setting(token),
            location=location,
            time=time,
            raw_lines=[line.strip()],
        )
        self.dialogue = None
        self.direction = []
        self.state = ParserState.IN_SCENE

    def _unique_id(self, candidate: str) -> str:
        """Suffix repeated scene numbers the way revised scripts do (12, 12A, 12B)."""
        scene_id = candidate
        if scene_id in self.used_ids:
            suffixed = (f"{candidate}{suffix}" for suffix in string.ascii_uppercase)
            scene_id = next(
                (s for s in suffixed if s not in self.used_ids),
                f"{candidate}-{len(self.closed) + 1}",
            )
        self.used_ids.add(scene_id)
        return scene_id

    def _close_scene(self) -> None:
        if self.current is None:
            return
        self._flush_dialogue()
        self._flush_direction()

        scene = self.current
        for name in scene.present:
            self.membership[name].add(scene.scene_number)
        self.closed.append(scene)
        self.current = None
        self.state = ParserState.OUTSIDE_SCENE

    def _flush_dialogue(self) -> None:
        if self.dialogue is None or self.current is None:
            return
        block = self.dialogue
        self.dialogue = None
        self.state = ParserState.IN_SCENE

        text = " ".join(block.lines).strip()
        if text:
            self.current.parts.append(Dialogue(character=block.character, text=text))
            self.current.present[block.character] = None
            self.dialogue_counts[block.character] += 1
        else:
            # A cue with nothing under it is kept as plain direction text
            self.current.parts.append(Direction(text=block.character))

    def _flush_direction(self) -> None:
        if not self.direction or self.current is None:
            self.direction = []
            return
        text = " ".join(self.direction).strip()
        self.direction = []
        if not text:
            return

        self.current.parts.append(Direction(text=text))
        if CUT_TO_PATTERN.search(text):
            return
        for name in self._capitalized_runs(text):
            self.current.present.setdefault(name, None)

    def _capitalized_runs(self, text: str) -> list[str]:
        """Maximal runs of capitalized words, cleaned, minus stop words."""
        runs: list[list[str]] = []
        run: list[str] = []
        for raw_token in text.split():
            token = raw_token.strip(TOKEN_EDGE_PUNCTUATION)
            if token and token[0].isupper():
                run.append(token)
                if raw_token[-1] in SENTENCE_END:
                    runs.append(run)
                    run = []
            elif run:
                runs.append(run)
                run = []
        if run:
            runs.append(run)

        names = []
        for words in runs:
            name = canonical_name(" ".join(words))
            if len(name) > 1 and not self.vocabulary.is_stop_word(name):
                names.append(name)
        return names


class ScreenplayParser:
    """Parse raw screenplay text into scenes and a character roster.

    The parser keeps no state between calls, so one instance can serve any
    number of concurrent parses.
    """

    def __init__(self, vocabulary: Vocabulary | None = None) -> None:
        """Initialize the parser.

        Args:
            vocabulary: Stop words and synonyms; the packaged vocabulary by default.
        """
        self.vocabulary = vocabulary or load_vocabulary()

    def parse(self, text: str | None) -> ParseResult:
        """Parse a whole script.

        Input without any recognizable scene heading yields an empty result
        rather than an error.

        Args:
            text: Raw text extracted from a screenplay

        Returns:
            Ordered scenes and the speaking-character roster
        """
        run = _ParseRun(self.vocabulary)
        for line in (text or "").splitlines():
            run.feed(line)
        result = run.finish()

        logger.info(
            "Parsed screenplay",
            scenes=len(result.scenes),
            characters=len(result.characters),
        )
        return result


def parse_screenplay(text: str | None) -> ParseResult:
    """Parse ``text`` with the packaged vocabulary."""
    return ScreenplayParser().parse(text)
