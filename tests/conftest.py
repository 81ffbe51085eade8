"""
Pytest configuration and shared fixtures for the solution_events test suite.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest
import toml

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from solution_events.config import manager as config_manager  # noqa: E402
from solution_events.execution.sink import LogSink  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Helpers
# ============================================================================


class RecordingSink(LogSink):
    """LogSink that keeps every accepted line in memory."""

    def __init__(self):
        self.entries: List[Tuple[str, str]] = []
        self.closed = False

    def _emit(self, channel: str, line: str) -> None:
        self.entries.append((channel, line))

    def close(self) -> None:
        self.closed = True

    @property
    def lines(self) -> List[str]:
        return [line for _, line in self.entries]


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache(monkeypatch):
    """Keep the settings singleton from leaking between tests."""
    monkeypatch.setattr(config_manager, "_CONFIG", None)
    monkeypatch.setattr(config_manager, "_CONFIG_FILE_PATH", None)
    monkeypatch.delenv("SOLUTION_EVENTS_CONFIG", raising=False)
    yield


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def solution_file(tmp_path: Path) -> Path:
    """An (empty) solution file inside its own directory."""
    solution_dir = tmp_path / "solution"
    solution_dir.mkdir()
    solution = solution_dir / "App.sln"
    solution.write_text("")
    return solution


@pytest.fixture
def write_document(solution_file: Path):
    """Write a command document next to ``solution_file``."""
    import json

    def _write(data: Any, raw: bool = False) -> Path:
        path = solution_file.parent / "SolutionBuildEvents.json"
        path.write_text(data if raw else json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def settings_file(tmp_path: Path):
    """Write a hooks settings TOML file and return its path."""

    def _write(hooks: Dict[str, Any]) -> Path:
        path = tmp_path / "config.toml"
        with open(path, "w") as f:
            toml.dump({"hooks": hooks}, f)
        return path

    return _write
