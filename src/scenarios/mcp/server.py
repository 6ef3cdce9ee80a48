"""MCP server exposing the scene service as tools."""

from __future__ import annotations

from mcp.server import FastMCP

from scenarios.api.service import SceneService
from scenarios.config import ScenariosSettings, get_logger, get_settings
from scenarios.mcp.tools.characters import register_character_tools
from scenarios.mcp.tools.scenes import register_scene_tools
from scenarios.mcp.tools.script import register_script_tools

logger = get_logger(__name__)


def create_server(
    service: SceneService | None = None,
    settings: ScenariosSettings | None = None,
) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        service: Scene service shared by every tool; built from settings if omitted
        settings: Configuration settings

    Returns:
        Configured FastMCP server instance
    """
    settings = settings or get_settings()
    service = service or SceneService.from_settings(settings)

    mcp = FastMCP(settings.app_name, host=settings.mcp_host, port=settings.mcp_port)

    register_script_tools(mcp, service)
    register_scene_tools(mcp, service)
    register_character_tools(mcp, service)

    logger.info(
        "Created MCP server",
        host=settings.mcp_host,
        port=settings.mcp_port,
        transport=settings.mcp_transport,
    )
    return mcp


def main() -> None:
    """Main entry point for MCP server."""
    settings = get_settings()
    server = create_server(settings=settings)
    server.run(transport=settings.mcp_transport)  # type: ignore[arg-type]


if __name__ == "__main__":
    main()
