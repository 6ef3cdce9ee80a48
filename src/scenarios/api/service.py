"""Scene service: the one handle request handlers use to parse and query scenes."""

from __future__ import annotations

import re
from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from scenarios.capabilities import (
    LLMCapabilities,
    PdfTextExtractor,
    SafeCapabilities,
    SceneCapabilities,
    TextExtractor,
    guarded,
)
from scenarios.config import ScenariosSettings, get_logger, get_settings
from scenarios.exceptions import (
    SceneNotFoundError,
    SceneRegistrationError,
    ValidationError,
)
from scenarios.llm.provider import OpenAICompatibleProvider
from scenarios.parser import (
    CharacterStats,
    ParseResult,
    Scene,
    ScreenplayParser,
    Vocabulary,
    load_vocabulary,
)
from scenarios.query import (
    FilterEngine,
    FilterNormalizer,
    FilterRequest,
    MarkdownFormatter,
    SearchOutcome,
    TranslationRetryStrategy,
)
from scenarios.store import CharacterStore, SceneStore
from scenarios.utils.text import canonical_name, collapse_whitespace

logger = get_logger(__name__)

FilterParams = FilterRequest | Mapping[str, Any] | None

_SCENE_LIST = TypeAdapter(list[Scene])
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _validate_shooting_date(value: str) -> str:
    text = value.strip()
    try:
        if "T" in text or " " in text:
            datetime.fromisoformat(text)
        else:
            date.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(
            message=f"Invalid shooting date '{value}'",
            hint="Use ISO dates such as 2024-05-01 or 2024-05-01T09:00",
            details={"value": value},
        ) from e
    return text


def _roster_from_scenes(
    scenes: Iterable[Scene], previous: Mapping[str, CharacterStats]
) -> list[CharacterStats]:
    """Rebuild character statistics from stored scenes.

    Every speaker and every name listed on a scene is on the roster, so scene
    character lists stay within it. Casting assignments already in
    ``previous`` are carried over by name.
    """
    dialogue_counts: Counter[str] = Counter()
    membership: defaultdict[str, set[int]] = defaultdict(set)
    for position, scene in enumerate(scenes, start=1):
        number = scene.scene_number if scene.scene_number is not None else position
        for part in scene.dialogue:
            dialogue_counts[canonical_name(part.character)] += 1
        for name in scene.characters:
            membership[canonical_name(name)].add(number)

    roster = []
    for name in sorted(set(dialogue_counts) | set(membership)):
        cast = previous.get(name)
        roster.append(
            CharacterStats(
                name=name,
                scene_count=len(membership[name]),
                dialogue_count=dialogue_counts[name],
                scenes=sorted(membership[name]),
                actor_name=cast.actor_name if cast else None,
                actor_email=cast.actor_email if cast else None,
            )
        )
    return roster


class SceneService:
    """Parse screenplays into the scene store and answer queries over it.

    One service instance owns one scene store and one character roster for
    the lifetime of the process. Outer surfaces (MCP tools, the CLI) receive
    the instance explicitly instead of reaching for module globals.
    """

    def __init__(
        self,
        store: SceneStore | None = None,
        characters: CharacterStore | None = None,
        capabilities: SceneCapabilities | None = None,
        text_extractor: TextExtractor | None = None,
        settings: ScenariosSettings | None = None,
        vocabulary: Vocabulary | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Scene store; a fresh empty one by default
            characters: Character roster store; a fresh empty one by default
            capabilities: Translation, filter extraction, duration and location
                capabilities; identity/empty answers by default
            text_extractor: PDF text extractor; pdfplumber by default
            settings: Configuration settings
            vocabulary: Stop words and synonyms; packaged data by default
        """
        self.settings = settings or get_settings()
        self.store = store if store is not None else SceneStore()
        self.characters = characters if characters is not None else CharacterStore()
        self.capabilities: SafeCapabilities = guarded(
            capabilities, timeout=self.settings.capability_timeout
        )
        self.text_extractor = text_extractor or PdfTextExtractor()

        self.vocabulary = vocabulary or load_vocabulary()
        self.parser = ScreenplayParser(self.vocabulary)
        self.normalizer = FilterNormalizer(
            self.vocabulary, translator=self.capabilities
        )
        self.engine = FilterEngine(self.vocabulary)
        self.strategy = TranslationRetryStrategy(
            self.normalizer,
            self.engine,
            self.store.all,
            translate_enabled=self.settings.translation_enabled,
        )
        self.formatter = MarkdownFormatter()

    @classmethod
    def from_settings(cls, settings: ScenariosSettings | None = None) -> SceneService:
        """Build a service with LLM capabilities when an endpoint is configured."""
        settings = settings or get_settings()
        capabilities: SceneCapabilities | None = None
        if settings.llm_configured:
            capabilities = LLMCapabilities(
                OpenAICompatibleProvider.from_settings(settings),
                model=settings.llm_model,
                temperature=settings.llm_temperature,
            )
        else:
            logger.info("No LLM endpoint configured, translation is disabled")
        return cls(capabilities=capabilities, settings=settings)

    # Loading

    def load_script(self, text: str) -> ParseResult:
        """Parse a whole script and replace the stored scenes and roster."""
        result = self.parser.parse(text)
        self.store.replace_all(result.scenes)
        self.characters.replace_all(result.characters)
        logger.info(
            "Loaded screenplay",
            scenes=len(result.scenes),
            characters=len(result.characters),
        )
        return result

    def load_pdf(self, pdf_bytes: bytes) -> ParseResult:
        """Extract the text of a screenplay PDF and load it.

        Raises:
            TextExtractionError: If the PDF cannot be read
        """
        return self.read_pdf(pdf_bytes)[1]

    def read_pdf(self, pdf_bytes: bytes) -> tuple[str, ParseResult]:
        """Load a screenplay PDF and return its extracted text with the parse.

        Raises:
            TextExtractionError: If the PDF cannot be read
        """
        text = self.text_extractor.extract_raw_text(pdf_bytes)
        return text, self.load_script(text)

    def register_scene(
        self,
        scene_id: str | int,
        text: str | None = None,
        setting: str | None = None,
        location: str | None = None,
        time: str | None = None,
        characters: list[str] | None = None,
        scene_duration: int | None = None,
        shooting_dates: list[str] | None = None,
        shooting_locations: list[str] | None = None,
    ) -> Scene:
        """Insert or replace one scene.

        Structured fields win over ``text``; the parser only runs on ``text``
        when neither ``setting`` nor ``location`` is given. Text without a scene
        heading is kept as the body when ``time`` or ``characters`` is given.
        A call for a stored id carrying only production fields updates those
        fields in place. Names of the scene join the character roster.

        Raises:
            SceneRegistrationError: If there is neither text nor structured
                data to build the scene from, or the text has no scene heading
                and no structured field is given
            ValidationError: If a shooting date is not an ISO date
        """
        key = str(scene_id).strip()
        if not key:
            raise SceneRegistrationError(
                message="Scene id is required",
                hint="Pass the scene number printed on the heading, e.g. 12",
            )

        production: dict[str, Any] = {}
        if scene_duration is not None:
            production["scene_duration"] = int(scene_duration)
        if shooting_dates is not None:
            production["shooting_dates"] = [
                _validate_shooting_date(d) for d in shooting_dates
            ]
        if shooting_locations is not None:
            production["shooting_locations"] = [
                place.strip() for place in shooting_locations if place.strip()
            ]

        has_text = bool(text and text.strip())
        has_structure = any(
            value is not None for value in (setting, location, time, characters)
        )

        if not has_text and not has_structure:
            if production and key in self.store:
                scene = self.store.update(key, **production)
                logger.info("Updated scene", scene_id=key, fields=sorted(production))
                return scene
            raise SceneRegistrationError(
                message=f"Cannot register scene '{key}' without text or fields",
                hint="Pass the scene text, or at least its setting and location",
                details={"scene_id": key},
            )

        scene: Scene | None = None
        if has_text and setting is None and location is None:
            scene = self._scene_from_text(key, text or "")
            if scene is None and not has_structure:
                raise SceneRegistrationError(
                    message=f"No scene heading found in the text for scene '{key}'",
                    hint="Start the text with a heading such as 'INT. OFFICE - DAY'",
                    details={"scene_id": key, "preview": (text or "").strip()[:80]},
                )
        if scene is None:
            scene = self._scene_from_fields(key, text, setting, location, time)

        overrides: dict[str, Any] = dict(production)
        if time is not None:
            overrides["time"] = collapse_whitespace(time)
        if characters is not None:
            names = (canonical_name(name) for name in characters)
            overrides["characters"] = list(dict.fromkeys(n for n in names if n))
        if overrides:
            scene = scene.model_copy(update=overrides)

        replaced = key in self.store
        self.store.upsert(scene)
        self._rebuild_roster()
        logger.info("Registered scene", scene_id=key, replaced=replaced)
        return scene

    def _scene_from_text(self, key: str, text: str) -> Scene | None:
        parsed = self.parser.parse(text)
        if not parsed.scenes:
            return None
        first = parsed.scenes[0]
        return first.model_copy(
            update={"id": key, "scene_number": self._number_of(key)}
        )

    def _scene_from_fields(
        self,
        key: str,
        text: str | None,
        setting: str | None,
        location: str | None,
        time: str | None,
    ) -> Scene:
        setting_value = self._canonical_setting(setting) if setting else ""
        location_value = collapse_whitespace(location or "")
        time_value = collapse_whitespace(time or "")
        heading = location_value
        if setting_value:
            heading = f"{setting_value}. {location_value}"
        if time_value:
            heading = f"{heading} - {time_value}"
        return Scene(
            id=key,
            scene_number=self._number_of(key),
            heading=collapse_whitespace(heading),
            setting=setting_value,
            location=location_value,
            time=time_value,
            raw=(text or "").strip(),
        )

    def _canonical_setting(self, setting: str) -> str:
        tokens = self.vocabulary.setting_tokens(setting)
        if tokens == {"int", "ext"}:
            return "INT/EXT"
        if tokens:
            return tokens.pop().upper()
        return collapse_whitespace(setting).upper().rstrip(".")

    @staticmethod
    def _number_of(key: str) -> int | None:
        digits = re.match(r"\d+", key)
        return int(digits.group()) if digits else None

    # Queries

    async def search(self, params: FilterParams) -> SearchOutcome:
        """Literal-then-translated search, with an explanation when empty."""
        return await self.strategy.find(params)

    async def find_scenes(self, params: FilterParams) -> list[Scene]:
        return (await self.search(params)).scenes

    async def print_scenes(self, params: FilterParams) -> str:
        """Matching scenes as Markdown, or the no-match explanation."""
        outcome = await self.search(params)
        if not outcome.scenes:
            return outcome.explanation or ""
        return self.formatter.format_scenes(outcome.scenes)

    async def count_scenes(self, params: FilterParams) -> int:
        return (await self.search(params)).count

    async def query_scenes(self, prompt: str) -> str:
        """Answer a free-form request such as "night scenes with Maria"."""
        outcome = await self.strategy.query(prompt, self.capabilities)
        if not outcome.scenes:
            return outcome.explanation or ""
        return self.formatter.format_scenes(outcome.scenes)

    # Characters and production data

    def list_characters(self) -> list[CharacterStats]:
        return self.characters.all()

    def assign_actor(
        self, name: str, actor_name: str, actor_email: str | None = None
    ) -> CharacterStats:
        """Record who plays a character.

        Raises:
            SceneNotFoundError: If the character is not in the roster
            ValidationError: If the actor name is blank or the email malformed
        """
        actor_name = collapse_whitespace(actor_name)
        if not actor_name:
            raise ValidationError(
                message="Actor name is required",
                details={"character": name},
            )
        if actor_email is not None:
            actor_email = actor_email.strip() or None
        if actor_email is not None and not _EMAIL_PATTERN.match(actor_email):
            raise ValidationError(
                message=f"Invalid email address '{actor_email}'",
                hint="Use an address such as actor@example.com",
                details={"character": name},
            )
        stats = self.characters.update(
            canonical_name(name), actor_name=actor_name, actor_email=actor_email
        )
        logger.info("Assigned actor", character=stats.name, actor=actor_name)
        return stats

    async def enrich_scene(self, scene_id: str | int) -> Scene:
        """Fill in a missing duration estimate and filming location guesses.

        Raises:
            SceneNotFoundError: If no scene is stored under ``scene_id``
        """
        key = str(scene_id).strip()
        scene = self.store.get(key)
        if scene is None:
            raise SceneNotFoundError(
                message=f"Scene '{key}' not found",
                hint="Parse a script or register the scene first",
                details={"scene_id": key},
            )

        text = "\n".join(
            part for part in (scene.heading, self.formatter.format_body(scene)) if part
        )
        updates: dict[str, Any] = {}
        if scene.scene_duration is None:
            seconds = await self.capabilities.estimate_scene_duration(text)
            if seconds > 0:
                updates["scene_duration"] = seconds
        if not scene.shooting_locations:
            places = await self.capabilities.guess_filming_locations(text)
            if places:
                updates["shooting_locations"] = places

        if not updates:
            return scene
        enriched = self.store.update(key, **updates)
        logger.info("Enriched scene", scene_id=key, fields=sorted(updates))
        return enriched

    # Snapshots

    def export_snapshot(self) -> str:
        """JSON array of every stored scene, camelCase field names."""
        data = _SCENE_LIST.dump_json(self.store.all(), by_alias=True, indent=2)
        return data.decode("utf-8")

    def import_snapshot(self, snapshot: str | bytes) -> list[Scene]:
        """Replace the stored scenes with a JSON snapshot and rebuild the roster.

        Raises:
            ValidationError: If the snapshot is not a JSON array of scenes
        """
        try:
            scenes = _SCENE_LIST.validate_json(snapshot)
        except PydanticValidationError as e:
            raise ValidationError(
                message="Invalid scene snapshot",
                hint="Expected a JSON array of scene objects",
                details={"errors": e.error_count()},
            ) from e

        self.store.replace_all(scenes)
        self._rebuild_roster()
        logger.info("Imported scene snapshot", scenes=len(scenes))
        return scenes

    def _rebuild_roster(self) -> None:
        previous = {stats.name: stats for stats in self.characters.all()}
        self.characters.replace_all(_roster_from_scenes(self.store.all(), previous))

    def reset(self) -> None:
        """Drop every stored scene and character."""
        self.store.clear()
        self.characters.clear()
        logger.info("Reset scene service")
