"""Character roster tools for MCP server."""

from __future__ import annotations

from typing import Any

from mcp.server import FastMCP

from scenarios.api.service import SceneService
from scenarios.config import get_logger
from scenarios.mcp.utils import dump, format_error

logger = get_logger(__name__)


def register_character_tools(mcp: FastMCP, service: SceneService) -> None:
    """Register character roster tools with the MCP server.

    Args:
        mcp: FastMCP server instance
        service: Scene service holding the roster
    """

    @mcp.tool()
    async def list_characters() -> dict[str, Any]:
        """List speaking characters with scene and dialogue counts.

        Returns:
            Dictionary containing the roster sorted by name
        """
        try:
            characters = service.list_characters()
            return {
                "success": True,
                "characters": dump(characters),
                "total_count": len(characters),
            }
        except Exception as e:
            logger.error("Character listing failed", error=str(e))
            return format_error(e)

    @mcp.tool()
    async def assign_actor(
        character: str,
        actor_name: str,
        actor_email: str | None = None,
    ) -> dict[str, Any]:
        """Record which actor plays a character.

        Args:
            character: Character name, any case or accents
            actor_name: Actor's name
            actor_email: Actor's email address

        Returns:
            Dictionary containing the updated character
        """
        try:
            stats = service.assign_actor(character, actor_name, actor_email)
            return {"success": True, "character": dump(stats)}
        except Exception as e:
            logger.error("Actor assignment failed", character=character, error=str(e))
            return format_error(e)
