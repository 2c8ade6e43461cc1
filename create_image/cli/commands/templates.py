# create_image/cli/commands/templates.py
# Template registry commands (list/search/rebuild)

from __future__ import annotations

import typer

from ...template_io.types import TemplateInfo
from ...ui.console import console
from ..app import app
from ..decorators import handle_create_image_error
from ..helpers import get_active_template_manager, get_orchestrator

# * Sub-app for template commands; registered on root app
templates_app = typer.Typer(rich_markup_mode="rich", help="Browse image templates")
app.add_typer(templates_app, name="templates")


def _print_template(template: TemplateInfo, active: bool, detailed: bool = True) -> None:
    marker = " [green](active)[/]" if active else ""
    console.print(f"[bold]{template.name}[/]{marker}")
    if detailed:
        console.print(f"  Topic: {template.topic}")
        console.print(f"  Style: {template.style}")
    console.print(f"  Description: {template.description}")
    if detailed and template.supported_types:
        console.print(f"  Types: {', '.join(template.supported_types)}")
    if detailed and template.tags:
        console.print(f"  Tags: {', '.join(template.tags)}")


@templates_app.command("list", help="List available templates")
@handle_create_image_error
def list_templates(ctx: typer.Context) -> None:
    templates = get_orchestrator(ctx).list_templates()
    if not templates:
        console.print("[yellow]No templates found[/]")
        return

    active = get_active_template_manager(ctx).get_active_template()
    console.print(f"Available Templates ({len(templates)}):\n")
    for template in templates:
        _print_template(template, template.name == active)
        console.print()


@templates_app.command("search", help="Search templates by name, description or tag")
@handle_create_image_error
def search_templates(
    ctx: typer.Context,
    keyword: str = typer.Argument(..., help="Search keyword"),
) -> None:
    templates = get_orchestrator(ctx).search_templates(keyword)
    if not templates:
        console.print(f"No templates found matching: {keyword}")
        return

    console.print(f'Templates matching "{keyword}" ({len(templates)}):\n')
    for template in templates:
        _print_template(template, active=False, detailed=False)


@templates_app.command("rebuild", help="Rescan the templates directory & rewrite registry.json")
@handle_create_image_error
def rebuild_registry(ctx: typer.Context) -> None:
    registry = get_orchestrator(ctx).rebuild_registry()
    console.print(f"Registry rebuilt: {len(registry.templates)} templates found")
