# create_image/cli/output_manager.py
# Rich-backed output manager: verbose console lines, stderr warnings & an optional session log file

# * Registered via set_output_manager() at CLI startup (see core/verbose.init_verbose)

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from ..core.output import OutputLevel


class OutputManager:
    def __init__(self) -> None:
        self._level = OutputLevel.NORMAL
        self._session_start: float | None = None
        self._log_file_path: Path | None = None
        self._log_file_handle: TextIO | None = None

    def initialize(
        self,
        requested_level: OutputLevel = OutputLevel.NORMAL,
        log_file: Path | None = None,
    ) -> None:
        self._level = requested_level
        self._session_start = time.time()
        self._setup_log_file(log_file)
        self.start_session()

    def verbose(
        self,
        msg: str,
        category: str = "INFO",
        detail: Optional[str] = None,
    ) -> None:
        if self._level >= OutputLevel.VERBOSE:
            from ..ui.console import console

            prefix = f"[dim][{self._elapsed()}][/] [bold cyan]\\[{category}][/]"
            console.print(f"{prefix} {msg}")
            if detail:
                for line in detail.split("\n"):
                    console.print(f"  [dim]{line}[/]")
        # file logging (plain text) regardless of console level
        self._write_to_file(f"[{self._elapsed()}] [{category}] {msg}")
        if detail:
            for line in detail.split("\n"):
                self._write_to_file(f"  {line}")

    # warnings always reach stderr
    def warning(self, msg: str, category: str = "WARN") -> None:
        from ..ui.console import err_console

        err_console.print(f"[yellow]\\[{category}][/] {msg}")
        self._write_to_file(f"[{self._elapsed()}] [{category}] {msg}")

    def start_session(self) -> None:
        self._session_start = time.time()
        if self._log_file_handle:
            self._write_to_file(f"\n{'='*60}")
            self._write_to_file(f"Session Started: {datetime.now().isoformat()}")
            self._write_to_file(f"Level: {self._level.name}")
            self._write_to_file(f"{'='*60}\n")

    def end_session(self) -> None:
        if self._log_file_handle:
            self._write_to_file(f"\n{'='*60}")
            self._write_to_file(f"Session Ended: {datetime.now().isoformat()}")
            self._write_to_file(f"{'='*60}\n")
        self.cleanup()

    # File logging

    def _elapsed(self) -> str:
        if self._session_start is None:
            return "0.00s"
        return f"{time.time() - self._session_start:.2f}s"

    def _setup_log_file(self, log_file: Path | None) -> None:
        self.cleanup()

        self._log_file_path = log_file
        if log_file is not None:
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                self._log_file_handle = open(log_file, "a", encoding="utf-8")
            except OSError as e:
                self._log_file_path = None
                self._log_file_handle = None
                self.warning(f"Could not open log file {log_file}: {e}")

    def _write_to_file(self, msg: str) -> None:
        if self._log_file_handle is not None:
            try:
                self._log_file_handle.write(f"{msg}\n")
                self._log_file_handle.flush()
            except OSError:
                # stop logging to a file that can no longer be written
                self._log_file_handle = None

    def cleanup(self) -> None:
        if self._log_file_handle is not None:
            try:
                self._log_file_handle.close()
            finally:
                self._log_file_handle = None
