# create_image/cli/commands/active.py
# Active template commands (show/set)

from __future__ import annotations

import typer

from ...ui.console import console
from ..app import app
from ..decorators import handle_create_image_error
from ..helpers import get_active_template_manager
from ..params import TemplateNameArg

active_app = typer.Typer(rich_markup_mode="rich", help="Show or change the active template")
app.add_typer(active_app, name="active")


@active_app.command("show", help="Show the active template")
@handle_create_image_error
def show_active(ctx: typer.Context) -> None:
    manager = get_active_template_manager(ctx)
    console.print(f"Active template: [bold]{manager.get_active_template()}[/]")
    console.print(f"[dim]{manager.get_active_template_dir()}[/]")


@active_app.command("set", help="Make a template the active one")
@handle_create_image_error
def set_active(ctx: typer.Context, template: str = TemplateNameArg()) -> None:
    get_active_template_manager(ctx).set_active_template(template)
    console.print(f"[green]Active template set:[/] {template}")
