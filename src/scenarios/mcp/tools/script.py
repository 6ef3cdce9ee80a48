"""Screenplay loading tools for MCP server."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from mcp.server import FastMCP

from scenarios.api.service import SceneService
from scenarios.config import get_logger
from scenarios.exceptions import TextExtractionError
from scenarios.mcp.utils import dump, format_error

logger = get_logger(__name__)


def register_script_tools(mcp: FastMCP, service: SceneService) -> None:
    """Register screenplay loading tools with the MCP server.

    Args:
        mcp: FastMCP server instance
        service: Scene service the tools load into
    """

    @mcp.tool()
    async def parse_script(text: str) -> dict[str, Any]:
        """Parse raw screenplay text and make its scenes searchable.

        Replaces any previously loaded script.

        Args:
            text: Screenplay text, e.g. as extracted from a PDF

        Returns:
            Dictionary containing the parsed scenes and character roster
        """
        try:
            result = service.load_script(text)
            return {
                "success": True,
                "scenes": dump(result.scenes),
                "characters": dump(result.characters),
            }
        except Exception as e:
            logger.error("Script parsing failed", error=str(e))
            return format_error(e)

    @mcp.tool()
    async def parse_pdf(pdf_base64: str) -> dict[str, Any]:
        """Extract the text of a screenplay PDF, parse it and load its scenes.

        Args:
            pdf_base64: The PDF file, base64 encoded

        Returns:
            Dictionary containing the extracted text, scenes and characters
        """
        try:
            try:
                pdf_bytes = base64.b64decode(pdf_base64, validate=True)
            except (binascii.Error, ValueError) as e:
                raise TextExtractionError(
                    message="PDF payload is not valid base64",
                    hint="Encode the raw PDF bytes with base64",
                ) from e
            text, result = service.read_pdf(pdf_bytes)
            return {
                "success": True,
                "text": text,
                "scenes": dump(result.scenes),
                "characters": dump(result.characters),
            }
        except Exception as e:
            logger.error("PDF parsing failed", error=str(e))
            return format_error(e)
