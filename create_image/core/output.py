# create_image/core/output.py
# Output registry used by core modules for verbose logging & warnings
# * Pure module (no I/O); the Rich-backed implementation lives in create_image/cli/output_manager.py
# * Core code logs through get_output_manager() so it never imports the CLI layer

from __future__ import annotations

from enum import IntEnum
from typing import Optional, Protocol, runtime_checkable


# * Console verbosity for a CLI session
class OutputLevel(IntEnum):
    NORMAL = 1
    VERBOSE = 2


# * What core modules need from an output manager
@runtime_checkable
class OutputInterface(Protocol):
    def verbose(self, msg: str, category: str = "INFO", detail: Optional[str] = None) -> None: ...

    def warning(self, msg: str, category: str = "WARN") -> None: ...

    def end_session(self) -> None: ...


# * Silent manager used until the CLI registers a real one (library use, tests)
class NullOutputManager:
    def verbose(self, msg: str, category: str = "INFO", detail: Optional[str] = None) -> None:
        pass

    def warning(self, msg: str, category: str = "WARN") -> None:
        pass

    def end_session(self) -> None:
        pass


_output_manager: OutputInterface = NullOutputManager()


def set_output_manager(manager: OutputInterface) -> None:
    global _output_manager
    _output_manager = manager


def get_output_manager() -> OutputInterface:
    return _output_manager


# back to the silent manager (test isolation)
def reset_output_manager() -> None:
    global _output_manager
    _output_manager = NullOutputManager()
