"""Pytest configuration and fixtures."""

import pytest

from scenarios.api.service import SceneService
from scenarios.config import ScenariosSettings, reset_settings, set_settings
from tests.utils import SAMPLE_SCRIPT, FakeCapabilities


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test with default settings and no LLM endpoint."""
    for name in ("SCENARIOS_LLM_ENDPOINT", "SCENARIOS_LLM_API_KEY", "PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = ScenariosSettings(_env_file=None, capability_timeout=2.0)
    set_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def fake_capabilities():
    """Capabilities translating Spanish names and places to English."""
    return FakeCapabilities(
        translations={"Pedro": "Peter", "cocina": "kitchen", "noche": "night"}
    )


@pytest.fixture
def service(fake_capabilities, isolated_settings):
    """Scene service with fake capabilities and empty stores."""
    return SceneService(capabilities=fake_capabilities, settings=isolated_settings)


@pytest.fixture
def loaded_service(service):
    """Scene service with SAMPLE_SCRIPT loaded."""
    service.load_script(SAMPLE_SCRIPT)
    return service


@pytest.fixture
def script_file(tmp_path):
    """SAMPLE_SCRIPT written to a plain-text file."""
    path = tmp_path / "kitchen.txt"
    path.write_text(SAMPLE_SCRIPT, encoding="utf-8")
    return path
