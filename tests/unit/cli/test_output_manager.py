# tests/unit/cli/test_output_manager.py
# Unit tests for the Rich-backed output manager

import pytest

from create_image.cli.output_manager import OutputManager
from create_image.core.output import OutputLevel
from create_image.ui.console import configure_console, reset_console


@pytest.fixture
def recorded_console():
    console = configure_console(width=200, force_terminal=False, record=True)
    yield console
    reset_console()


class TestConsoleOutput:
    # * Verify verbose lines reach the console only at VERBOSE
    def test_verbose_console(self, recorded_console):
        manager = OutputManager()
        manager.initialize(OutputLevel.NORMAL)
        manager.verbose("hidden", "GRID")

        manager.initialize(OutputLevel.VERBOSE)
        manager.verbose("shown", "GRID", detail="line a\nline b")

        text = recorded_console.export_text()
        assert "hidden" not in text
        assert "[GRID] shown" in text
        assert "line b" in text

    # * Verify warnings reach stderr at every level
    def test_warning_stderr(self, recorded_console, capsys):
        manager = OutputManager()
        manager.initialize(OutputLevel.NORMAL)
        manager.warning("careful", "PROVIDER")

        assert "[PROVIDER] careful" in capsys.readouterr().err
        assert "careful" not in recorded_console.export_text()


class TestLogFile:
    # * Verify file receives verbose lines regardless of console level
    def test_file_logging(self, tmp_path):
        log = tmp_path / "logs" / "run.log"
        manager = OutputManager()
        manager.initialize(OutputLevel.NORMAL, log_file=log)

        manager.verbose("to file", "GRID", detail="extra")
        manager.warning("careful")
        manager.end_session()

        content = log.read_text(encoding="utf-8")
        assert "Session Started" in content
        assert "Level: NORMAL" in content
        assert "[GRID] to file" in content
        assert "  extra" in content
        assert "[WARN] careful" in content
        assert "Session Ended" in content

    # * Verify unwritable log path degrades to a warning
    def test_unwritable_log(self, tmp_path, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not dir", encoding="utf-8")

        manager = OutputManager()
        manager.initialize(log_file=blocker / "run.log")

        assert manager._log_file_handle is None
        assert "Could not open log file" in capsys.readouterr().err
        manager.cleanup()
