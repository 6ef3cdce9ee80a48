"""Screenplay parsing and scene query commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from scenarios.api.service import SceneService
from scenarios.cli.handler import CLIHandler, load_screenplay
from scenarios.config import get_logger
from scenarios.mcp.utils import dump, filter_params

logger = get_logger(__name__)
console = Console()

ScreenplayFile = Annotated[
    Path,
    typer.Argument(
        help="Screenplay as a PDF or plain-text file",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
]


def parse_command(
    file: ScreenplayFile,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Parse a screenplay and summarize its scenes."""
    handler = CLIHandler(console)
    try:
        result = load_screenplay(SceneService.from_settings(), file)
    except Exception as e:
        handler.handle_error(e, json_output)

    if json_output:
        handler.print_json(
            {"scenes": dump(result.scenes), "characters": dump(result.characters)}
        )
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Scene", justify="right")
    table.add_column("Setting")
    table.add_column("Location")
    table.add_column("Time")
    table.add_column("Characters")
    for scene in result.scenes:
        table.add_row(
            scene.id,
            scene.setting,
            scene.location,
            scene.time,
            ", ".join(scene.characters),
        )
    console.print(table)
    console.print(
        f"[green]{len(result.scenes)} scenes, "
        f"{len(result.characters)} characters[/green]"
    )


def scenes_command(
    file: ScreenplayFile,
    character: Annotated[
        list[str] | None,
        typer.Option("--character", "-c", help="Character present (repeatable)"),
    ] = None,
    setting: Annotated[
        str | None, typer.Option("--setting", help="INT, EXT or INT/EXT")
    ] = None,
    location: Annotated[
        str | None, typer.Option("--location", help="Text in the location")
    ] = None,
    time: Annotated[
        str | None, typer.Option("--time", help="Text in the time of day")
    ] = None,
    scene: Annotated[
        str | None, typer.Option("--scene", help="Scene number")
    ] = None,
    count: Annotated[
        bool, typer.Option("--count", help="Only print the number of matches")
    ] = False,
) -> None:
    """Print the scenes of a screenplay matching every given filter."""
    handler = CLIHandler(console)
    params = filter_params(
        characters=character or None,
        setting=setting,
        location=location,
        time=time,
        scene_number=scene,
    )
    try:
        service = SceneService.from_settings()
        load_screenplay(service, file)
        outcome = asyncio.run(service.search(params))
    except Exception as e:
        handler.handle_error(e)

    if count:
        console.print(str(outcome.count))
        return
    if not outcome.scenes:
        console.print(f"[yellow]{outcome.explanation}[/yellow]")
        return
    console.print(
        service.formatter.format_scenes(outcome.scenes),
        markup=False,
        highlight=False,
    )


def characters_command(
    file: ScreenplayFile,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List the speaking characters of a screenplay."""
    handler = CLIHandler(console)
    try:
        result = load_screenplay(SceneService.from_settings(), file)
    except Exception as e:
        handler.handle_error(e, json_output)

    if json_output:
        handler.print_json(dump(result.characters))
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Character")
    table.add_column("Scenes", justify="right")
    table.add_column("Dialogue", justify="right")
    table.add_column("Scene numbers")
    for stats in result.characters:
        table.add_row(
            stats.name,
            str(stats.scene_count),
            str(stats.dialogue_count),
            ", ".join(str(n) for n in stats.scenes),
        )
    console.print(table)
