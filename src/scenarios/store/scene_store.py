"""Process-lifetime stores for scenes and the character roster.

Records are immutable models. Every write swaps a whole record under the
store lock, so a reader holding a snapshot never sees a half-updated scene.
The lock is never held across I/O.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Any

from scenarios.config import get_logger
from scenarios.exceptions import SceneNotFoundError
from scenarios.parser.models import CharacterStats, Scene
from scenarios.utils.text import canonical_name

logger = get_logger(__name__)


class SceneStore:
    """Mapping from scene id to Scene, kept in insertion order."""

    def __init__(self, scenes: Iterable[Scene] | None = None) -> None:
        self._lock = threading.Lock()
        self._scenes: dict[str, Scene] = {}
        if scenes is not None:
            self.replace_all(scenes)

    def upsert(self, scene: Scene) -> Scene:
        """Insert or replace the scene stored under ``scene.id``."""
        with self._lock:
            replaced = scene.id in self._scenes
            self._scenes[scene.id] = scene
        logger.debug("Stored scene", scene_id=scene.id, replaced=replaced)
        return scene

    def replace_all(self, scenes: Iterable[Scene]) -> None:
        """Drop every stored scene and store ``scenes`` in order."""
        fresh = {scene.id: scene for scene in scenes}
        with self._lock:
            self._scenes = fresh
        logger.debug("Replaced scene store", scenes=len(fresh))

    def update(self, scene_id: str, **fields: Any) -> Scene:
        """Atomically replace some fields of a stored scene.

        Raises:
            SceneNotFoundError: If no scene is stored under ``scene_id``
        """
        with self._lock:
            current = self._scenes.get(scene_id)
            if current is None:
                raise SceneNotFoundError(
                    message=f"Scene '{scene_id}' not found",
                    hint="Parse a script or register the scene first",
                    details={"scene_id": scene_id, "known_scenes": len(self._scenes)},
                )
            updated = current.model_copy(update=fields)
            self._scenes[scene_id] = updated
        return updated

    def get(self, scene_id: str) -> Scene | None:
        with self._lock:
            return self._scenes.get(scene_id)

    def all(self) -> list[Scene]:
        """Snapshot of every stored scene in store order."""
        with self._lock:
            return list(self._scenes.values())

    def clear(self) -> None:
        with self._lock:
            self._scenes = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._scenes)

    def __contains__(self, scene_id: object) -> bool:
        with self._lock:
            return scene_id in self._scenes


class CharacterStore:
    """Character roster keyed by normalized name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._characters: dict[str, CharacterStats] = {}

    def replace_all(self, characters: Iterable[CharacterStats]) -> None:
        fresh = {canonical_name(c.name): c for c in characters}
        with self._lock:
            self._characters = fresh

    def get(self, name: str) -> CharacterStats | None:
        with self._lock:
            return self._characters.get(canonical_name(name))

    def update(self, name: str, **fields: Any) -> CharacterStats:
        """Atomically replace some fields of a roster entry.

        Raises:
            SceneNotFoundError: If the character is not in the roster
        """
        key = canonical_name(name)
        with self._lock:
            current = self._characters.get(key)
            if current is None:
                raise SceneNotFoundError(
                    message=f"Character '{name}' not found",
                    hint="Parse a script or register a scene that names the character",
                    details={
                        "character": key,
                        "known_characters": len(self._characters),
                    },
                )
            updated = current.model_copy(update=fields)
            self._characters[key] = updated
        return updated

    def all(self) -> list[CharacterStats]:
        """Snapshot of the roster sorted by name."""
        with self._lock:
            return sorted(self._characters.values(), key=lambda c: c.name)

    def clear(self) -> None:
        with self._lock:
            self._characters = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._characters)
