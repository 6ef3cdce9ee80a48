"""Markdown rendering of scenes with character names in bold."""

from __future__ import annotations

import re
from collections.abc import Iterable

from scenarios.parser.models import Dialogue, Scene
from scenarios.utils.text import fold_preserving_length


def _name_pattern(names: Iterable[str]) -> re.Pattern[str] | None:
    """Whole-word, case-insensitive pattern over names, longest first.

    Roster names have punctuation replaced by spaces ("JEAN LUC"), so words
    may be separated by any run of non-word characters in the text.
    """
    alternatives = []
    for name in sorted(set(names), key=len, reverse=True):
        words = name.split()
        if words:
            alternatives.append(r"[^\w']+".join(re.escape(word) for word in words))
    if not alternatives:
        return None
    alternation = "|".join(alternatives)
    return re.compile(rf"(?<![\w'])(?:{alternation})(?![\w'])", re.IGNORECASE)


def embolden_names(text: str, names: Iterable[str]) -> str:
    """Wrap every whole-word occurrence of any name in ``**`` markers.

    Matching ignores case and accents ("MARIA" finds "María"); the original
    spelling is kept in the output.
    """
    pattern = _name_pattern(names)
    if pattern is None or not text:
        return text

    folded = fold_preserving_length(text)
    pieces = []
    last = 0
    for match in pattern.finditer(folded):
        start, end = match.span()
        pieces.append(text[last:start])
        pieces.append(f"**{text[start:end]}**")
        last = end
    pieces.append(text[last:])
    return "".join(pieces)


class MarkdownFormatter:
    """Render scenes as Markdown for chat clients and the terminal."""

    def format_header(self, scene: Scene) -> str:
        header = f"**{scene.id}.** `{scene.setting}.`"
        if scene.location:
            header += f" {scene.location}"
        if scene.time:
            header += f" - {scene.time}"
        return header

    def format_body(self, scene: Scene) -> str:
        """Scene transcript without the heading, rebuilt from parts if needed."""
        body = scene.body
        if body.strip():
            return body
        blocks = []
        for part in scene.parts:
            if isinstance(part, Dialogue):
                blocks.append(f"{part.character}\n{part.text}")
            else:
                blocks.append(part.text)
        return "\n\n".join(blocks)

    def format_metadata(self, scene: Scene) -> list[str]:
        lines = []
        if scene.scene_duration is not None:
            lines.append(f"> Duration: {scene.scene_duration} s")
        if scene.shooting_dates:
            lines.append(f"> Shooting dates: {', '.join(scene.shooting_dates)}")
        if scene.shooting_locations:
            lines.append(
                f"> Shooting locations: {', '.join(scene.shooting_locations)}"
            )
        return lines

    def format_scene(self, scene: Scene) -> str:
        """Header line, body with names in bold, then any production metadata."""
        sections = [self.format_header(scene)]
        body = self.format_body(scene)
        if body:
            sections.append(embolden_names(body, scene.characters))
        metadata = self.format_metadata(scene)
        if metadata:
            sections.append("\n".join(metadata))
        return "\n".join(sections)

    def format_scenes(self, scenes: Iterable[Scene]) -> str:
        """Render scenes separated by a blank line."""
        return "\n\n".join(self.format_scene(scene) for scene in scenes)
