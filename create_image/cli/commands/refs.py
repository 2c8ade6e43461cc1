# create_image/cli/commands/refs.py
# Style reference commands (list/set/generate) for a template

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ...ai.prompts import AUDIENCE_STYLES
from ...core.cancellation import CancelToken
from ...ui.console import console
from ..app import app
from ..decorators import handle_create_image_error
from ..helpers import (
    cancel_on_interrupt,
    get_style_reference_manager,
    resolve_template_name,
)
from ..params import ResolutionOpt, TemplateOpt

refs_app = typer.Typer(rich_markup_mode="rich", help="Manage template style references")
app.add_typer(refs_app, name="refs")


@refs_app.command("list", help="List style reference images")
@handle_create_image_error
def list_refs(ctx: typer.Context, template: Optional[str] = TemplateOpt()) -> None:
    name = resolve_template_name(ctx, template)
    references = get_style_reference_manager(ctx).list_style_references(name)
    if not references:
        console.print(f"[yellow]No style references for {name}[/]")
        return

    table = Table(title=f"Style references: {name}")
    table.add_column("Active")
    table.add_column("File")
    table.add_column("Size (KB)", justify="right")
    for ref in references:
        table.add_row("[green]*[/]" if ref.is_active else "", ref.filename, str(ref.size_kb))
    console.print(table)


@refs_app.command("set", help="Set the active style reference")
@handle_create_image_error
def set_ref(
    ctx: typer.Context,
    filename: str = typer.Argument(..., help="Reference filename (.png optional)"),
    template: Optional[str] = TemplateOpt(),
) -> None:
    name = resolve_template_name(ctx, template)
    activated = get_style_reference_manager(ctx).set_active_reference(name, filename)
    console.print(f"[green]Active reference for {name}:[/] {activated}")


@refs_app.command("generate", help="Generate a new 2x2 style reference grid")
@handle_create_image_error
def generate_ref(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Base name for the new reference files"),
    template: Optional[str] = TemplateOpt(),
    resolution: str = ResolutionOpt(),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Style description (defaults to the name)"
    ),
    audience: Optional[str] = typer.Option(
        None,
        "--audience",
        "-a",
        help=f"Target audience: {'|'.join(AUDIENCE_STYLES)}",
    ),
    visual_style: Optional[str] = typer.Option(
        None, "--visual-style", help="Additional visual preferences"
    ),
    ref_image: Optional[Path] = typer.Option(
        None, "--ref-image", help="Existing image to match stylistically"
    ),
) -> None:
    template_name = resolve_template_name(ctx, template)
    manager = get_style_reference_manager(ctx)

    available, reason = manager.check_generation_availability()
    if not available:
        console.print(f"[red]Generation unavailable:[/] {reason}")
        raise typer.Exit(1)

    cancel = CancelToken()
    with cancel_on_interrupt(cancel), console.status(
        "[bold cyan]Generating style reference (4 images)..."
    ):
        result = manager.generate_style_reference(
            template_name,
            name,
            resolution=resolution,
            description=description,
            audience=audience,
            visual_style=visual_style,
            ref_images=[ref_image] if ref_image else [],
            cancel=cancel,
        )

    if cancel.cancelled:
        console.print(f"[yellow]Cancelled:[/] {cancel.reason}")
        raise typer.Exit(130)

    if not result.success:
        console.print(f"[red]Generation failed:[/] {result.error}")
        raise typer.Exit(1)

    console.print(f"[green]Grid saved:[/] {result.path} ({result.grid_size_kb} KB)")
    for path in result.individual_paths:
        console.print(f"  [dim]{path}[/]")
    if result.padded:
        console.print("[yellow]Some images failed; grid cells were filled w/ the first image[/]")
    if result.error:
        console.print(f"[yellow]Warnings:[/] {result.error}")
    console.print(f"Active reference for {template_name}: {name}.png")
