"""MCP server command for Scenarios."""

from __future__ import annotations

from typing import Annotated

import typer

from scenarios.config import get_logger, get_settings

logger = get_logger(__name__)

TRANSPORTS = ("stdio", "sse", "streamable-http")


def mcp_command(
    host: Annotated[str | None, typer.Option("--host", help="Host to bind to")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Port to bind to")] = None,
    transport: Annotated[
        str | None,
        typer.Option("--transport", help="stdio, sse or streamable-http"),
    ] = None,
) -> None:
    """Run the Scenarios MCP (Model Context Protocol) server.

    Example:
        scenarios mcp
        scenarios mcp --transport streamable-http --host 0.0.0.0 --port 8080
    """
    # Import here so that plain parsing commands do not load the MCP SDK
    from scenarios.mcp.server import create_server

    if transport is not None and transport not in TRANSPORTS:
        raise typer.BadParameter(
            f"Unknown transport '{transport}'", param_hint="--transport"
        )

    overrides = {
        "mcp_host": host,
        "mcp_port": port,
        "mcp_transport": transport,
    }
    settings = get_settings().model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    server = create_server(settings=settings)

    logger.info(
        "Starting MCP server",
        host=settings.mcp_host,
        port=settings.mcp_port,
        transport=settings.mcp_transport,
    )
    try:
        server.run(transport=settings.mcp_transport)  # type: ignore[arg-type]
    except KeyboardInterrupt:
        logger.info("MCP server stopped by user")
        raise typer.Exit(0) from None
