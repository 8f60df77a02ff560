"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from onsystem.core.models.system import SystemContext
from onsystem.core.services.on_system import simulate_system

# Host used whenever a test does not simulate every field
FAKE_HOST = SystemContext(arch="intel", os="linux")


@pytest.fixture(autouse=True)
def isolated_system(monkeypatch: pytest.MonkeyPatch):
    """Pin the host, drop simulation overrides and ONSYSTEM_* env vars."""
    for name in (
        "ONSYSTEM_SIMULATE_OS",
        "ONSYSTEM_SIMULATE_ARCH",
        "ONSYSTEM_SIMULATE_MACOS_ON_LINUX",
        "ONSYSTEM_LOG_LEVEL",
        "ONSYSTEM_LOG_FILE",
        "ONSYSTEM_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(simulate_system, "_host", FAKE_HOST)
    simulate_system.clear()
    yield
    simulate_system.clear()


@pytest.fixture
def in_tmp_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory (no onsystem.yml above it)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() so handlers do not leak between tests."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
