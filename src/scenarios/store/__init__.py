"""In-memory scene and character stores."""

from scenarios.store.scene_store import CharacterStore, SceneStore

__all__ = ["CharacterStore", "SceneStore"]
