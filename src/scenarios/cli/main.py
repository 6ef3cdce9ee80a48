"""Main CLI entry point for Scenarios."""

from __future__ import annotations

import typer
from rich.console import Console

from scenarios import __version__
from scenarios.cli.commands import (
    characters_command,
    mcp_command,
    parse_command,
    scenes_command,
)

console = Console()

app = typer.Typer(
    name="scenarios",
    help="Parse screenplays into scenes and query them in any language",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="parse")(parse_command)
app.command(name="scenes")(scenes_command)
app.command(name="characters")(characters_command)
app.command(name="mcp")(mcp_command)


@app.command()
def version() -> None:
    """Show the Scenarios version."""
    console.print(f"scenarios {__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
