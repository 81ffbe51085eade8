"""
Tests for the solution-events command-line driver.
"""

import json
import sys
from unittest.mock import patch

import pytest

from solution_events.cli import main_cli


class TestEditCommand:
    def test_creates_and_opens_document(self, solution_file, settings_file):
        settings = settings_file({"editor": "my-editor"})

        with patch("solution_events.system.commands.subprocess.Popen") as mock_popen:
            main_cli(["--settings", str(settings), "edit", str(solution_file)])

        document = solution_file.parent / "SolutionBuildEvents.json"
        assert set(json.loads(document.read_text())) == {
            "PreBuildEvent",
            "PostBuildEvent",
            "ConfigurationChangedEvent",
        }
        mock_popen.assert_called_once_with(["my-editor", str(document.resolve())])

    def test_unwritable_location_exits_with_error(self, tmp_path, settings_file):
        settings = settings_file({})
        solution = tmp_path / "missing-dir" / "App.sln"

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--settings", str(settings), "edit", str(solution)])

        assert exc_info.value.code == 1


@pytest.mark.skipif(sys.platform == "win32", reason="uses /bin/sh command lines")
class TestFireCommand:
    def test_runs_commands_into_channel_log(self, solution_file, write_document, settings_file, tmp_path):
        write_document({"PreBuildEvent": ["echo building", "echo warn >&2"]})
        log_dir = tmp_path / "logs"
        settings = settings_file({"shell": "/bin/sh", "log_dir": str(log_dir)})

        main_cli(["--settings", str(settings), "fire", str(solution_file), "pre-build"])

        assert (log_dir / "Solution Build Events.log").read_text() == (
            "Prebuild event: building\nPrebuild event (ERROR): warn\n"
        )

    def test_configuration_changed_uses_custom_channel(
        self, solution_file, write_document, settings_file, tmp_path
    ):
        write_document({"ConfigurationChangedEvent": ["echo switched"]})
        log_dir = tmp_path / "logs"
        settings = settings_file({"shell": "/bin/sh", "log_dir": str(log_dir), "channel": "Hooks"})

        main_cli([
            "--settings", str(settings),
            "fire", str(solution_file), "configuration-changed",
            "--configuration", "Release|x64",
        ])

        assert (log_dir / "Hooks.log").read_text() == "ConfigurationChanged event: switched\n"

    def test_failing_commands_do_not_change_exit_status(
        self, solution_file, write_document, settings_file, tmp_path
    ):
        write_document({"PostBuildEvent": ["exit 5"]})
        settings = settings_file({"shell": "/bin/sh", "log_dir": str(tmp_path / "logs")})

        main_cli(["--settings", str(settings), "fire", str(solution_file), "post-build"])

    def test_without_document_nothing_is_logged(self, solution_file, settings_file, tmp_path):
        log_dir = tmp_path / "logs"
        settings = settings_file({"shell": "/bin/sh", "log_dir": str(log_dir)})

        main_cli(["--settings", str(settings), "fire", str(solution_file), "pre-build"])

        assert not log_dir.exists()
        assert not (solution_file.parent / "SolutionBuildEvents.json").exists()


class TestSettingsErrors:
    def test_invalid_settings_exit_with_error(self, solution_file, settings_file):
        settings = settings_file({"continue_on_failure": "sometimes"})

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--settings", str(settings), "fire", str(solution_file), "pre-build"])

        assert exc_info.value.code == 1

    def test_unparseable_settings_exit_with_error(self, solution_file, tmp_path):
        settings = tmp_path / "config.toml"
        settings.write_text("[hooks\nbroken")

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--settings", str(settings), "edit", str(solution_file)])

        assert exc_info.value.code == 1

    def test_unknown_event_is_a_usage_error(self, solution_file):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["fire", str(solution_file), "mid-build"])

        assert exc_info.value.code == 2
