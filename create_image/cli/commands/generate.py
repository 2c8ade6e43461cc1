# create_image/cli/commands/generate.py
# Generate command: one image through the provider fallback chain

from __future__ import annotations

from typing import Optional

import typer

from ...ai.types import GenerationRequest
from ...core.cancellation import CancelToken
from ...ui.console import console
from ..app import app
from ..decorators import handle_create_image_error
from ..helpers import cancel_on_interrupt, get_orchestrator
from ..params import (
    ModelOpt,
    OutputOpt,
    PromptArg,
    ProviderOpt,
    StyleGridOpt,
    TemplateOpt,
    TypeOpt,
)


@app.command(help="Generate an image w/ automatic provider fallback")
@handle_create_image_error
def generate(
    ctx: typer.Context,
    prompt: str = PromptArg(),
    template: Optional[str] = TemplateOpt(),
    provider: Optional[str] = ProviderOpt(),
    model: Optional[str] = ModelOpt(),
    image_type: Optional[str] = TypeOpt(),
    output: Optional[str] = OutputOpt(),
    style_grid: Optional[str] = StyleGridOpt(),
) -> None:
    orchestrator = get_orchestrator(ctx)
    request = GenerationRequest(
        prompt=prompt,
        template=template or orchestrator.config.default_template,
        type=image_type,
        provider=provider,
        model=model,
        output_path=output,
        style_grid_path=style_grid,
    )

    cancel = CancelToken()
    with cancel_on_interrupt(cancel), console.status("[bold cyan]Generating image..."):
        result = orchestrator.generate_image(request, cancel)

    if cancel.cancelled:
        console.print(f"[yellow]Cancelled:[/] {cancel.reason}")
        raise typer.Exit(130)

    if not result.success:
        console.print(f"[red]Generation failed:[/] {result.error}")
        for attempt in result.attempts:
            console.print(f"  [dim]{attempt.provider}: {attempt.error}[/]")
        raise typer.Exit(1)

    console.print(f"[green]Image saved:[/] {result.path}")
    size = f" ({result.size_kb} KB)" if result.size_kb else ""
    model_str = f" / {result.model}" if result.model else ""
    console.print(f"  Provider: {result.provider}{model_str}{size}")
    if result.fallback_used:
        console.print("  [yellow]Primary provider failed; fallback used[/]")
