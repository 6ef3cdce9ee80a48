"""Tests for the scene service."""

import json

import pytest

from scenarios.api import SceneService
from scenarios.exceptions import (
    SceneNotFoundError,
    SceneRegistrationError,
    TextExtractionError,
    ValidationError,
)
from scenarios.query import SearchPhase
from scenarios.query.strategy import NO_FILTERS_UNDERSTOOD
from tests.utils import SAMPLE_SCRIPT, SIMPLE_SCRIPT, FakeCapabilities


class TestLoading:
    """Test loading whole scripts."""

    def test_load_script_fills_stores(self, service):
        """Scenes and roster are replaced by the parsed script."""
        result = service.load_script(SAMPLE_SCRIPT)

        assert len(service.store) == 3
        assert [c.name for c in service.list_characters()] == ["MARIA", "PEDRO"]
        assert result.scenes[0].id == "1"

    def test_load_script_replaces_previous(self, loaded_service):
        """Loading another script drops the old scenes."""
        loaded_service.load_script("INT. HALL - DAY\nANNA\nHi.")

        assert [s.id for s in loaded_service.store.all()] == ["1"]
        assert loaded_service.store.get("1").location == "HALL"

    def test_load_pdf_uses_extractor(self, isolated_settings):
        """PDF bytes go through the text extractor."""

        class Extractor:
            def extract_raw_text(self, pdf_bytes):
                assert pdf_bytes == b"%PDF"
                return SAMPLE_SCRIPT

        service = SceneService(text_extractor=Extractor(), settings=isolated_settings)
        assert len(service.load_pdf(b"%PDF").scenes) == 3

    def test_read_pdf_returns_text(self, isolated_settings):
        """The extracted text comes back with the parse result."""

        class Extractor:
            def extract_raw_text(self, pdf_bytes):
                return SIMPLE_SCRIPT

        service = SceneService(text_extractor=Extractor(), settings=isolated_settings)
        text, result = service.read_pdf(b"%PDF")

        assert text == SIMPLE_SCRIPT
        assert [s.location for s in result.scenes] == ["OFFICE", "STREET"]
        assert len(service.store) == 2

    def test_load_pdf_rejects_garbage(self, service):
        """Bytes that are not a PDF raise a TextExtractionError."""
        with pytest.raises(TextExtractionError):
            service.load_pdf(b"not a pdf at all")


class TestRegisterScene:
    """Test registering single scenes."""

    def test_register_from_text(self, service):
        """Text is parsed when no setting or location is given."""
        scene = service.register_scene(
            "12A", text="INT. OFFICE - DAY\nPAUL\nMorning."
        )

        assert scene.id == "12A"
        assert scene.scene_number == 12
        assert scene.location == "OFFICE"
        assert scene.characters == ["PAUL"]
        assert service.store.get("12A") == scene

    def test_register_from_fields(self, service):
        """Structured fields build the scene without parsing."""
        scene = service.register_scene(
            5,
            setting="exterior",
            location="  Beach ",
            time="dusk",
            characters=["María", "maria", "Jean-Luc"],
        )

        assert scene.id == "5"
        assert scene.setting == "EXT"
        assert scene.location == "Beach"
        assert scene.heading == "EXT. Beach - dusk"
        assert scene.characters == ["MARIA", "JEAN LUC"]

    def test_structured_fields_win_over_text(self, service):
        """Fields override what the text would give."""
        scene = service.register_scene(
            "1", text="INT. OFFICE - DAY\nPAUL\nHi.", setting="EXT", location="ROOF"
        )
        assert scene.setting == "EXT"
        assert scene.location == "ROOF"
        assert scene.raw.startswith("INT. OFFICE")

    def test_register_is_idempotent(self, service):
        """Registering the same id twice keeps one scene."""
        service.register_scene("1", setting="INT", location="A")
        service.register_scene("1", setting="INT", location="B")

        assert len(service.store) == 1
        assert service.store.get("1").location == "B"

    def test_requires_text_or_fields(self, service):
        """A scene with nothing to build from is rejected."""
        with pytest.raises(SceneRegistrationError, match="without text or fields"):
            service.register_scene("7")

    def test_text_without_heading(self, service):
        """Text with no scene heading is rejected."""
        with pytest.raises(SceneRegistrationError, match="No scene heading"):
            service.register_scene("7", text="PAUL\nHello.")

    def test_blank_id(self, service):
        """The scene id is required."""
        with pytest.raises(SceneRegistrationError):
            service.register_scene("  ", setting="INT", location="A")

    def test_text_without_heading_uses_fields(self, service):
        """Headingless text becomes the body when a field is given."""
        scene = service.register_scene("9", text="Paul walks in.", time="NIGHT")

        assert scene.time == "NIGHT"
        assert scene.raw == "Paul walks in."
        assert service.store.get("9") == scene

    def test_registered_speaker_joins_roster(self, loaded_service):
        """A new speaker can be listed and cast after registration."""
        scene = loaded_service.register_scene(
            "4", text="INT. BAR - NIGHT\nMARY\nHi.\n"
        )

        roster = {c.name: c for c in loaded_service.list_characters()}
        assert set(scene.characters) <= set(roster)
        assert roster["MARY"].dialogue_count == 1
        assert roster["MARY"].scenes == [4]
        assert loaded_service.assign_actor("Mary", "Eva Lopes").actor_name == (
            "Eva Lopes"
        )

    def test_listed_characters_join_roster(self, loaded_service):
        """Names given as fields are on the roster, and casting survives."""
        loaded_service.assign_actor("PEDRO", "Rui Costa")
        loaded_service.register_scene(
            "5", setting="INT", location="HALL", characters=["Bob"]
        )

        roster = {c.name: c for c in loaded_service.list_characters()}
        assert set(roster) == {"BOB", "MARIA", "PEDRO"}
        assert roster["BOB"].dialogue_count == 0
        assert roster["PEDRO"].actor_name == "Rui Costa"

    def test_production_fields_update_existing_scene(self, loaded_service):
        """Only production fields update a stored scene in place."""
        scene = loaded_service.register_scene(
            "2",
            scene_duration=75,
            shooting_dates=["2024-05-01", "2024-05-02T08:30"],
            shooting_locations=["Sintra", " "],
        )

        assert scene.location == "GARDEN"
        assert scene.scene_duration == 75
        assert scene.shooting_dates == ["2024-05-01", "2024-05-02T08:30"]
        assert scene.shooting_locations == ["Sintra"]

    def test_invalid_shooting_date(self, loaded_service):
        """Shooting dates must be ISO dates."""
        with pytest.raises(ValidationError, match="Invalid shooting date"):
            loaded_service.register_scene("2", shooting_dates=["next tuesday"])


class TestSearch:
    """Test query surfaces over a loaded script."""

    @pytest.mark.asyncio
    async def test_find_scenes(self, loaded_service):
        """Scenes are found by character in order."""
        scenes = await loaded_service.find_scenes({"characters": "maría"})
        assert [s.id for s in scenes] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_setting_with_time(self, loaded_service):
        """A time word in the setting is applied to the time."""
        scenes = await loaded_service.find_scenes({"setting": "INT at night"})
        assert [s.id for s in scenes] == ["1"]

    @pytest.mark.asyncio
    async def test_empty_character_list_counts_everything(self, loaded_service):
        """An empty character list imposes no constraint."""
        assert await loaded_service.count_scenes({"characters": []}) == 3

    @pytest.mark.asyncio
    async def test_search_retries_in_english(self, loaded_service):
        """Spanish filters are translated when the literal search is empty."""
        outcome = await loaded_service.search({"location": "cocina"})

        assert outcome.phase is SearchPhase.TRANSLATED
        assert [s.id for s in outcome.scenes] == ["1"]

    @pytest.mark.asyncio
    async def test_print_scenes(self, loaded_service):
        """Matches render as Markdown."""
        markdown = await loaded_service.print_scenes({"sceneNumber": "3"})
        assert markdown.startswith("**3.** `INT/EXT.` CAR - DUSK")
        assert "**PEDRO** drives." in markdown

    @pytest.mark.asyncio
    async def test_print_scenes_explains_empty_result(self, loaded_service):
        """No match prints the explanation."""
        markdown = await loaded_service.print_scenes({"location": "moon"})
        assert markdown == "No scenes found matching location moon."

    @pytest.mark.asyncio
    async def test_invalid_number_raises(self, loaded_service):
        """Unparseable numbers are reported."""
        with pytest.raises(ValidationError):
            await loaded_service.find_scenes({"sceneNumber": "three"})

    @pytest.mark.asyncio
    async def test_query_scenes(self, isolated_settings):
        """Free-form requests go through filter extraction."""
        fake = FakeCapabilities(filters={"characters": ["PEDRO"], "time": "dusk"})
        service = SceneService(capabilities=fake, settings=isolated_settings)
        service.load_script(SAMPLE_SCRIPT)

        markdown = await service.query_scenes("Pedro driving at dusk")

        assert markdown.startswith("**3.**")
        assert fake.prompts == ["Pedro driving at dusk"]

    @pytest.mark.asyncio
    async def test_hyphenated_character(self, service):
        """Names with punctuation or a cue extension find their scenes."""
        service.load_script("INT. OFFICE - DAY\nJEAN-LUC\nBonjour.\n")

        assert [c.name for c in service.list_characters()] == ["JEAN LUC"]
        assert len(await service.find_scenes({"characters": ["Jean-Luc"]})) == 1
        assert len(await service.find_scenes({"characters": "JEAN-LUC (V.O.)"})) == 1

    @pytest.mark.asyncio
    async def test_query_with_failed_extraction(self, isolated_settings):
        """An extractor that fails finds nothing instead of everything."""

        class Broken(FakeCapabilities):
            async def extract_filters(self, prompt):
                raise RuntimeError("provider down")

        service = SceneService(capabilities=Broken(), settings=isolated_settings)
        service.load_script(SAMPLE_SCRIPT)

        markdown = await service.query_scenes("night scenes with Maria")
        assert markdown == NO_FILTERS_UNDERSTOOD

    @pytest.mark.asyncio
    async def test_query_with_unusable_extraction(self, isolated_settings):
        """Extracted values that cannot be coerced find nothing."""
        fake = FakeCapabilities(filters={"sceneNumber": "three"})
        service = SceneService(capabilities=fake, settings=isolated_settings)
        service.load_script(SAMPLE_SCRIPT)

        outcome = await service.strategy.query("the third scene", fake)

        assert outcome.scenes == []
        assert outcome.phase is SearchPhase.EXHAUSTED
        assert outcome.explanation == NO_FILTERS_UNDERSTOOD

    @pytest.mark.asyncio
    async def test_failing_translator_degrades(self, isolated_settings):
        """A translator that raises behaves like no translation."""

        class Broken(FakeCapabilities):
            async def translate_to_english(self, text):
                raise RuntimeError("provider down")

        service = SceneService(capabilities=Broken(), settings=isolated_settings)
        service.load_script(SAMPLE_SCRIPT)

        outcome = await service.search({"location": "cocina"})
        assert outcome.phase is SearchPhase.EXHAUSTED


class TestCharacters:
    """Test the roster and casting."""

    def test_roster(self, loaded_service):
        """The roster has scene and dialogue counts."""
        maria, pedro = loaded_service.list_characters()
        assert (maria.name, maria.scene_count, maria.dialogue_count) == ("MARIA", 2, 2)
        assert pedro.scenes == [1, 3]

    def test_assign_actor(self, loaded_service):
        """Actors are assigned by any spelling of the name."""
        stats = loaded_service.assign_actor("María", "Ana Silva", "ana@example.com")

        assert stats.name == "MARIA"
        assert stats.actor_email == "ana@example.com"

    def test_assign_actor_bad_email(self, loaded_service):
        """Malformed emails are rejected."""
        with pytest.raises(ValidationError, match="Invalid email"):
            loaded_service.assign_actor("MARIA", "Ana Silva", "not-an-email")

    def test_assign_actor_unknown_character(self, loaded_service):
        """Unknown characters are reported."""
        with pytest.raises(SceneNotFoundError):
            loaded_service.assign_actor("REX", "Good Dog")


class TestEnrichScene:
    """Test duration and location enrichment."""

    @pytest.mark.asyncio
    async def test_fills_missing_fields(self, loaded_service):
        """Missing duration and locations are filled in."""
        scene = await loaded_service.enrich_scene("1")

        assert scene.scene_duration == 90
        assert scene.shooting_locations == ["Lisbon"]
        assert loaded_service.store.get("1") == scene

    @pytest.mark.asyncio
    async def test_keeps_existing_fields(self, loaded_service):
        """Fields already set are not overwritten."""
        loaded_service.register_scene("1", scene_duration=30)

        scene = await loaded_service.enrich_scene("1")

        assert scene.scene_duration == 30
        assert scene.shooting_locations == ["Lisbon"]

    @pytest.mark.asyncio
    async def test_without_capabilities(self, isolated_settings):
        """With no LLM the scene is returned unchanged."""
        service = SceneService(settings=isolated_settings)
        service.load_script(SAMPLE_SCRIPT)

        scene = await service.enrich_scene("2")

        assert scene.scene_duration is None
        assert scene.shooting_locations == []

    @pytest.mark.asyncio
    async def test_unknown_scene(self, loaded_service):
        """Enriching an unknown scene raises."""
        with pytest.raises(SceneNotFoundError):
            await loaded_service.enrich_scene("99")


class TestSnapshots:
    """Test exporting and importing the scene store."""

    def test_export_uses_camel_case(self, loaded_service):
        """Snapshots are JSON arrays with camelCase keys."""
        data = json.loads(loaded_service.export_snapshot())

        assert len(data) == 3
        assert data[0]["sceneNumber"] == 1
        assert "shootingDates" in data[0]

    def test_import_restores_scenes_and_roster(self, loaded_service, isolated_settings):
        """Importing a snapshot rebuilds scenes and characters."""
        loaded_service.register_scene("2", scene_duration=75)
        snapshot = loaded_service.export_snapshot()

        other = SceneService(settings=isolated_settings)
        scenes = other.import_snapshot(snapshot)

        assert [s.id for s in scenes] == ["1", "2", "3"]
        assert other.store.get("2").scene_duration == 75
        assert [c.name for c in other.list_characters()] == ["MARIA", "PEDRO"]
        assert other.list_characters()[1].scenes == [1, 3]

    def test_import_keeps_actor_assignments(self, loaded_service):
        """Re-importing keeps who plays whom."""
        loaded_service.assign_actor("PEDRO", "Rui Costa")

        loaded_service.import_snapshot(loaded_service.export_snapshot())

        assert loaded_service.characters.get("PEDRO").actor_name == "Rui Costa"

    def test_import_rejects_invalid_json(self, service):
        """Malformed snapshots raise a ValidationError."""
        with pytest.raises(ValidationError, match="Invalid scene snapshot"):
            service.import_snapshot('{"scenes": 1}')

    def test_reset(self, loaded_service):
        """Reset empties both stores."""
        loaded_service.reset()
        assert loaded_service.store.all() == []
        assert loaded_service.list_characters() == []
