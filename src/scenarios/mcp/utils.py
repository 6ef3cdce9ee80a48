"""Utility functions for MCP server."""

from __future__ import annotations

from typing import Any

from scenarios.exceptions import ScenariosError
from scenarios.parser.models import CamelModel


def format_error(error: Exception) -> dict[str, Any]:
    """Format an exception as an MCP error response.

    Args:
        error: The exception to format

    Returns:
        Dictionary with error information
    """
    if isinstance(error, ScenariosError):
        return error.to_dict()
    return {
        "success": False,
        "error": str(error),
        "error_type": type(error).__name__,
    }


def dump(data: Any) -> Any:
    """Convert models (or lists of models) to camelCase JSON-ready values."""
    if isinstance(data, CamelModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [dump(item) for item in data]
    return data


def filter_params(**fields: Any) -> dict[str, Any]:
    """Drop unset tool arguments so they impose no constraint."""
    return {key: value for key, value in fields.items() if value is not None}
