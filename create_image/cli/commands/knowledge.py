# create_image/cli/commands/knowledge.py
# Domain knowledge commands (show/set/append/import)

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ...template_io.types import DomainKnowledgeInfo
from ...ui.console import console
from ..app import app
from ..decorators import handle_create_image_error
from ..helpers import get_domain_knowledge_manager, resolve_template_name
from ..params import TemplateOpt

knowledge_app = typer.Typer(
    rich_markup_mode="rich", help="View & edit template domain knowledge"
)
app.add_typer(knowledge_app, name="knowledge")


def _print_summary(info: DomainKnowledgeInfo) -> None:
    console.print(
        f"[green]Saved[/] {info.path} ({info.line_count} lines, {info.size_bytes:,} bytes)"
    )


@knowledge_app.command("show", help="Print domain knowledge")
@handle_create_image_error
def show_knowledge(ctx: typer.Context, template: Optional[str] = TemplateOpt()) -> None:
    name = resolve_template_name(ctx, template)
    info = get_domain_knowledge_manager(ctx).get_domain_knowledge(name)
    if info is None:
        console.print(f"[yellow]No domain knowledge for {name}[/]")
        return
    console.print(f"[dim]{info.path} ({info.line_count} lines, {info.size_bytes:,} bytes)[/]")
    console.print(info.content, markup=False, highlight=False)


@knowledge_app.command("set", help="Replace domain knowledge w/ inline text")
@handle_create_image_error
def set_knowledge(
    ctx: typer.Context,
    content: str = typer.Argument(..., help="New domain knowledge text"),
    template: Optional[str] = TemplateOpt(),
) -> None:
    name = resolve_template_name(ctx, template)
    _print_summary(get_domain_knowledge_manager(ctx).update_domain_knowledge(name, content))


@knowledge_app.command("append", help="Append a rule to domain knowledge")
@handle_create_image_error
def append_knowledge(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Text to append"),
    template: Optional[str] = TemplateOpt(),
) -> None:
    name = resolve_template_name(ctx, template)
    _print_summary(get_domain_knowledge_manager(ctx).append_to_domain_knowledge(name, text))


@knowledge_app.command("import", help="Replace domain knowledge w/ a file's contents")
@handle_create_image_error
def import_knowledge(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Text file to import"),
    template: Optional[str] = TemplateOpt(),
) -> None:
    name = resolve_template_name(ctx, template)
    _print_summary(get_domain_knowledge_manager(ctx).update_from_file(name, file))
