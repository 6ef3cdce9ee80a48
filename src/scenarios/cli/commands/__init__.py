"""CLI commands for Scenarios."""

from scenarios.cli.commands.mcp import mcp_command
from scenarios.cli.commands.script import (
    characters_command,
    parse_command,
    scenes_command,
)

__all__ = [
    "characters_command",
    "mcp_command",
    "parse_command",
    "scenes_command",
]
