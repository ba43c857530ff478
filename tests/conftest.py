"""Shared pytest fixtures for the MobSF MCP test suite."""
from __future__ import annotations

import pytest

from catalog import build_default_registry
from tests.mocking import MockMobSF
from tools import ToolRouter


@pytest.fixture
def mobsf() -> MockMobSF:
    """Provide an empty scripted MobSF; tests queue the responses they need."""
    return MockMobSF()


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Clear MobSF environment variables and point config lookup at an empty dir."""
    for name in (
        "MOBSF_BASE_URL",
        "MOBSF_API_KEY",
        "MOBSF_REQUEST_TIMEOUT",
        "MOBSF_UPLOAD_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("config.DEFAULT_CONFIG_PATHS", (tmp_path / "missing.toml",))
    return monkeypatch


@pytest.fixture
def router(mobsf: MockMobSF) -> ToolRouter:
    """Route calls through the full catalog against the scripted MobSF."""
    return ToolRouter(build_default_registry(), mobsf.client())
