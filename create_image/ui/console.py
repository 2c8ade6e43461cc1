# create_image/ui/console.py
# Centralized console management for the entire create-image application

# This module provides a single Console instance that all other modules import to ensure consistent output formatting.
#
# Architecture notes:
# - Console is created as a bare Console() at import time
# - The _ConsoleProxy pattern allows reconfiguring/resetting without breaking module-level references
# - Tests: Use reset_console() for isolation; configure_console(record=True) to capture output

from __future__ import annotations
from typing import Optional, Any
from rich.console import Console


# proxy delegating to underlying Console instance; all Console methods forwarded via __getattr__
class _ConsoleProxy:
    __slots__ = ("_console",)

    def __init__(self) -> None:
        self._console = Console()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._console, name)

    def _set_console(self, new_console: Console) -> None:
        self._console = new_console

    def _get_console(self) -> Console:
        return self._console


# single proxy instance used by all modules
console = _ConsoleProxy()

# stderr console for warnings & errors
err_console = _ConsoleProxy()
err_console._set_console(Console(stderr=True))


# * Get the underlying Console instance
def get_console() -> Console:
    # handle both proxy & direct Console (e.g., when patched in tests)
    if hasattr(console, "_get_console"):
        return console._get_console()
    return console  # type: ignore[return-value]


# * Configure console w/ specific settings (useful for tests & CLI modes)
def configure_console(
    width: Optional[int] = None,
    force_terminal: Optional[bool] = None,
    record: bool = False,
) -> Console:
    kwargs: dict[str, Any] = {}
    if width is not None:
        kwargs["width"] = width
    if force_terminal is not None:
        kwargs["force_terminal"] = force_terminal
    if record:
        kwargs["record"] = True

    if kwargs:  # only recreate if settings provided
        console._set_console(Console(**kwargs))
    return console._get_console()


# * Reset consoles to default configuration (useful for tests)
def reset_console() -> Console:
    console._set_console(Console())
    err_console._set_console(Console(stderr=True))
    return console._get_console()


__all__ = [
    "console",
    "err_console",
    "get_console",
    "configure_console",
    "reset_console",
]
