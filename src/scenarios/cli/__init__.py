"""Command line interface for Scenarios."""

from scenarios.cli.main import app, main

__all__ = ["app", "main"]
