"""Scenarios API module."""

from __future__ import annotations

from scenarios.api.service import SceneService

__all__ = ["SceneService"]
