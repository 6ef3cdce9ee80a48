"""Shared error handling and input loading for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from scenarios.api.service import SceneService
from scenarios.config import get_logger
from scenarios.exceptions import ScenariosError
from scenarios.mcp.utils import format_error
from scenarios.parser import ParseResult

logger = get_logger(__name__)


class CLIHandler:
    """Error and JSON output shared by the command modules."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> NoReturn:
        """Report ``error`` in red with its hint (or as a JSON payload) and exit."""
        logger.error("Command failed", error=str(error))
        if json_output:
            self.console.print_json(json.dumps(format_error(error)))
            raise typer.Exit(exit_code)

        message = error.message if isinstance(error, ScenariosError) else str(error)
        self.console.print(f"[red]Error: {escape(message)}[/red]")
        if isinstance(error, ScenariosError) and error.hint:
            self.console.print(f"[dim]Hint: {escape(error.hint)}[/dim]")
        raise typer.Exit(exit_code)

    def print_json(self, data: Any) -> None:
        self.console.print_json(json.dumps(data, ensure_ascii=False))


def load_screenplay(service: SceneService, path: Path) -> ParseResult:
    """Load a screenplay from a PDF or a plain-text file into ``service``."""
    if path.suffix.lower() == ".pdf":
        return service.load_pdf(path.read_bytes())
    return service.load_script(path.read_text(encoding="utf-8"))
