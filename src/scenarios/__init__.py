"""Scenarios: screenplay scene parsing and multilingual scene queries.

A screenplay's raw text is split into scenes (heading metadata plus dialogue
and direction parts) and a roster of speaking characters. Stored scenes can
then be searched by setting, location, time, characters and production
data, with filters in another language translated and retried.
"""

from .api import SceneService
from .config import ScenariosSettings, get_logger, get_settings
from .parser import CharacterStats, ParseResult, Scene, parse_screenplay

__version__ = "0.1.0"

__all__ = [
    "CharacterStats",
    "ParseResult",
    "Scene",
    "SceneService",
    "ScenariosSettings",
    "__version__",
    "get_logger",
    "get_settings",
    "parse_screenplay",
]
