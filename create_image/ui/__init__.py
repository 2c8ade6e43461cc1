# create_image/ui/__init__.py
# Rich console & display helpers

from .console import console, err_console, get_console, configure_console, reset_console

__all__ = ["console", "err_console", "get_console", "configure_console", "reset_console"]
