# create_image/cli/commands/config.py
# Configuration commands (show/init) for ~/.config/create-image/config.yaml

from __future__ import annotations

import typer

from ...config.settings import SettingsManager
from ...ui.console import console
from ..app import app
from ..decorators import handle_create_image_error
from ..helpers import get_orchestrator

config_app = typer.Typer(rich_markup_mode="rich", help="Show or create configuration")
app.add_typer(config_app, name="config")


@config_app.command("show", help="Show the resolved configuration")
@handle_create_image_error
def show_config(ctx: typer.Context) -> None:
    orchestrator = get_orchestrator(ctx)
    config = orchestrator.config

    console.print("[bold]Current Configuration[/]\n")
    console.print(f"Config file: {orchestrator.settings.config_path}")
    console.print(f"Repository: {config.repository_path}")
    console.print(f"Default Provider: {config.default_provider}")
    console.print(f"Default Template: {config.default_template or 'none'}")
    console.print(f"Auto Fallback: {'enabled' if config.auto_fallback else 'disabled'}")
    console.print(f"Cache Enabled: {'yes' if config.cache_enabled else 'no'}")
    console.print(f"Cache TTL: {config.cache_ttl:g}s")
    console.print(f"Generation Timeout: {config.generation_timeout:g}s\n")

    console.print(f"Providers ({len(config.providers)}):")
    for provider in config.providers:
        status = "[green]enabled[/]" if provider.enabled else "[dim]disabled[/]"
        console.print(f"  {provider.name} (priority: {provider.priority}) {status}")
        console.print(f"    Model: {provider.model or 'default'}")
        console.print(f"    API Key: {provider.masked_api_key}")
        if provider.project:
            console.print(f"    Project: {provider.project} ({provider.location or 'global'})")


@config_app.command("init", help="Write an example config file")
@handle_create_image_error
def init_config(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    settings = get_orchestrator(ctx).settings
    if settings.config_path.exists() and not force:
        console.print(f"[yellow]Config already exists:[/] {settings.config_path}")
        console.print("Use --force to overwrite")
        raise typer.Exit(1)

    path = SettingsManager.create_example_config(settings.config_dir)
    console.print(f"[green]Example config written:[/] {path}")
