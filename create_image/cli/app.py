# create_image/cli/app.py
# Root Typer application & command registration
#
# ! Command imports at bottom of file are deferred to avoid circular dependencies.

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

# load environment variables once at startup
load_dotenv()

from ..orchestrator import ImageOrchestrator


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=False,
    help="Generate images through AI providers w/ automatic fallback & manage style templates.",
    context_settings={"help_option_names": ["--help", "-h"]},
)


# * Set up logging & the orchestrator for every invocation
@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging for debugging"
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Write verbose logs to file (enables verbose mode)"
    ),
) -> None:
    from ..core.verbose import init_verbose, cleanup_verbose

    # log_file implies verbose mode
    init_verbose(enabled=verbose or log_file is not None, log_file=log_file)
    ctx.call_on_close(cleanup_verbose)

    # respect injected ctx.obj from tests/embedding; only create if absent
    if getattr(ctx, "obj", None) is None:
        ctx.obj = ImageOrchestrator()

    if ctx.invoked_subcommand is None:
        from ..ui.console import console

        console.print(ctx.get_help())
        ctx.exit()


# ! import command modules here to avoid circular import w/ app object
from .commands import generate as _generate  # noqa: F401, E402
from .commands import providers as _providers  # noqa: F401, E402
from .commands import templates as _templates  # noqa: F401, E402
from .commands import refs as _refs  # noqa: F401, E402
from .commands import knowledge as _knowledge  # noqa: F401, E402
from .commands import active as _active  # noqa: F401, E402
from .commands import config as _config  # noqa: F401, E402
