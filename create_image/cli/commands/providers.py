# create_image/cli/commands/providers.py
# Provider health command (configuration readiness per provider)

from __future__ import annotations

from typing import Optional

import typer
from rich.table import Table

from ...ai.models import get_provider_description
from ...ui.console import console
from ..app import app
from ..decorators import handle_create_image_error
from ..helpers import get_orchestrator


@app.command(help="Show provider health & fallback order")
@handle_create_image_error
def providers(
    ctx: typer.Context,
    refresh: Optional[str] = typer.Option(
        None, "--refresh", help="Re-check one provider, bypassing the health cache"
    ),
) -> None:
    orchestrator = get_orchestrator(ctx)
    config = orchestrator.config

    if refresh:
        health = orchestrator.refresh_provider(refresh)
        if health is None:
            console.print(f"[red]Provider not configured:[/] {refresh}")
            raise typer.Exit(1)
        status = "[green]healthy[/]" if health.healthy else f"[red]unhealthy[/] - {health.error}"
        console.print(f"{health.provider}: {status}")
        return

    if not config.providers:
        console.print("[yellow]No providers configured[/]")
        console.print("Set GOOGLE_API_KEY, OPENROUTER_API_KEY or GOOGLE_CLOUD_PROJECT")
        return

    statuses = {h.provider: h for h in orchestrator.provider_health()}

    table = Table(title="Provider Health")
    table.add_column("Provider")
    table.add_column("Priority", justify="right")
    table.add_column("Model")
    table.add_column("Status")
    table.add_column("Description", style="dim")

    for provider in config.providers:
        health = statuses.get(provider.name)
        if not provider.enabled:
            status = "[dim]disabled[/]"
        elif health is not None and health.healthy:
            status = "[green]healthy[/]"
        else:
            status = f"[red]unhealthy[/] {health.error if health else ''}"
        table.add_row(
            provider.name,
            str(provider.priority),
            provider.model or "default",
            status,
            get_provider_description(provider.name),
        )

    console.print(table)
    console.print(
        f"Default: [bold]{config.default_provider}[/]  "
        f"Auto fallback: {'on' if config.auto_fallback else 'off'}"
    )
