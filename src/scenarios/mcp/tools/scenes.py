"""Scene registration and query tools for MCP server."""

from __future__ import annotations

from typing import Any

from mcp.server import FastMCP

from scenarios.api.service import SceneService
from scenarios.config import get_logger
from scenarios.mcp.utils import dump, filter_params, format_error

logger = get_logger(__name__)


def register_scene_tools(mcp: FastMCP, service: SceneService) -> None:
    """Register scene tools with the MCP server.

    Args:
        mcp: FastMCP server instance
        service: Scene service the tools read from and write to
    """

    @mcp.tool()
    async def register_scene(
        scene_id: str,
        text: str | None = None,
        setting: str | None = None,
        location: str | None = None,
        time: str | None = None,
        characters: list[str] | None = None,
        scene_duration: int | None = None,
        shooting_dates: list[str] | None = None,
        shooting_locations: list[str] | None = None,
    ) -> dict[str, Any]:
        """Register or replace one scene.

        Pass either the scene text (starting with its heading) or structured
        fields. Re-registering an id replaces the stored scene.

        Args:
            scene_id: Scene number, e.g. "12" or "12A"
            text: Scene text, parsed only when setting and location are absent
            setting: INT, EXT or INT/EXT
            location: Location from the heading
            time: Time of day from the heading
            characters: Character names present in the scene
            scene_duration: Estimated duration in seconds
            shooting_dates: ISO dates or date-times
            shooting_locations: Real-world filming places

        Returns:
            Dictionary containing the stored scene
        """
        try:
            scene = service.register_scene(
                scene_id,
                text=text,
                setting=setting,
                location=location,
                time=time,
                characters=characters,
                scene_duration=scene_duration,
                shooting_dates=shooting_dates,
                shooting_locations=shooting_locations,
            )
            return {"success": True, "scene": dump(scene)}
        except Exception as e:
            logger.error("Scene registration failed", scene_id=scene_id, error=str(e))
            return format_error(e)

    @mcp.tool()
    async def find_scenes(
        scene_number: int | str | None = None,
        characters: list[str] | str | None = None,
        setting: str | None = None,
        location: str | None = None,
        time: str | None = None,
        scene_duration: int | str | None = None,
        shooting_date: str | None = None,
        shooting_location: str | None = None,
        has_dates: bool | None = None,
        has_location: bool | None = None,
        min_date_count: int | None = None,
    ) -> dict[str, Any]:
        """Find scenes matching every given filter.

        Filters in another language than the script are translated and
        retried when the literal search finds nothing.

        Args:
            scene_number: Scene number
            characters: Names that must all appear, as a list or "A, B"
            setting: INT, EXT or INT/EXT (may include a time, "INT at night")
            location: Text contained in the location
            time: Text contained in the time of day
            scene_duration: Exact duration in seconds
            shooting_date: ISO date the scene is scheduled on
            shooting_location: Text contained in a filming place
            has_dates: Whether the scene has shooting dates
            has_location: Whether the scene has filming places
            min_date_count: Minimum number of shooting dates

        Returns:
            Dictionary containing matching scenes and, if none, an explanation
        """
        params = filter_params(
            scene_number=scene_number,
            characters=characters,
            setting=setting,
            location=location,
            time=time,
            scene_duration=scene_duration,
            shooting_date=shooting_date,
            shooting_location=shooting_location,
            has_dates=has_dates,
            has_location=has_location,
            min_date_count=min_date_count,
        )
        try:
            outcome = await service.search(params)
            return {
                "success": True,
                "scenes": dump(outcome.scenes),
                "count": outcome.count,
                "phase": outcome.phase.value,
                "message": outcome.explanation,
            }
        except Exception as e:
            logger.error("Scene search failed", error=str(e))
            return format_error(e)

    @mcp.tool()
    async def print_scenes(
        scene_number: int | str | None = None,
        characters: list[str] | str | None = None,
        setting: str | None = None,
        location: str | None = None,
        time: str | None = None,
        scene_duration: int | str | None = None,
        shooting_date: str | None = None,
        shooting_location: str | None = None,
        has_dates: bool | None = None,
        has_location: bool | None = None,
        min_date_count: int | None = None,
    ) -> dict[str, Any]:
        """Render matching scenes as Markdown with character names in bold.

        Args:
            scene_number: Scene number
            characters: Names that must all appear
            setting: INT, EXT or INT/EXT
            location: Text contained in the location
            time: Text contained in the time of day
            scene_duration: Exact duration in seconds
            shooting_date: ISO date the scene is scheduled on
            shooting_location: Text contained in a filming place
            has_dates: Whether the scene has shooting dates
            has_location: Whether the scene has filming places
            min_date_count: Minimum number of shooting dates

        Returns:
            Dictionary containing the Markdown, or an explanation if none match
        """
        params = filter_params(
            scene_number=scene_number,
            characters=characters,
            setting=setting,
            location=location,
            time=time,
            scene_duration=scene_duration,
            shooting_date=shooting_date,
            shooting_location=shooting_location,
            has_dates=has_dates,
            has_location=has_location,
            min_date_count=min_date_count,
        )
        try:
            return {"success": True, "markdown": await service.print_scenes(params)}
        except Exception as e:
            logger.error("Scene printing failed", error=str(e))
            return format_error(e)

    @mcp.tool()
    async def count_scenes(
        scene_number: int | str | None = None,
        characters: list[str] | str | None = None,
        setting: str | None = None,
        location: str | None = None,
        time: str | None = None,
        scene_duration: int | str | None = None,
        shooting_date: str | None = None,
        shooting_location: str | None = None,
        has_dates: bool | None = None,
        has_location: bool | None = None,
        min_date_count: int | None = None,
    ) -> dict[str, Any]:
        """Count scenes matching every given filter.

        Args:
            scene_number: Scene number
            characters: Names that must all appear
            setting: INT, EXT or INT/EXT
            location: Text contained in the location
            time: Text contained in the time of day
            scene_duration: Exact duration in seconds
            shooting_date: ISO date the scene is scheduled on
            shooting_location: Text contained in a filming place
            has_dates: Whether the scene has shooting dates
            has_location: Whether the scene has filming places
            min_date_count: Minimum number of shooting dates

        Returns:
            Dictionary containing the count and, if zero, an explanation
        """
        params = filter_params(
            scene_number=scene_number,
            characters=characters,
            setting=setting,
            location=location,
            time=time,
            scene_duration=scene_duration,
            shooting_date=shooting_date,
            shooting_location=shooting_location,
            has_dates=has_dates,
            has_location=has_location,
            min_date_count=min_date_count,
        )
        try:
            outcome = await service.search(params)
            return {
                "success": True,
                "count": outcome.count,
                "message": outcome.explanation,
            }
        except Exception as e:
            logger.error("Scene count failed", error=str(e))
            return format_error(e)

    @mcp.tool()
    async def query_scenes(prompt: str) -> dict[str, Any]:
        """Answer a free-form request about scenes, in any language.

        Args:
            prompt: Request such as "night scenes with Maria outside"

        Returns:
            Dictionary containing the matching scenes as Markdown
        """
        try:
            return {"success": True, "markdown": await service.query_scenes(prompt)}
        except Exception as e:
            logger.error("Scene query failed", error=str(e))
            return format_error(e)

    @mcp.tool()
    async def enrich_scene(scene_id: str) -> dict[str, Any]:
        """Estimate a scene's duration and suggest filming locations.

        Only fields the scene does not have yet are filled in.

        Args:
            scene_id: Scene number

        Returns:
            Dictionary containing the updated scene
        """
        try:
            scene = await service.enrich_scene(scene_id)
            return {"success": True, "scene": dump(scene)}
        except Exception as e:
            logger.error("Scene enrichment failed", scene_id=scene_id, error=str(e))
            return format_error(e)
