# create_image/cli/params.py
# CLI argument definitions & normalization helpers

from __future__ import annotations

from typing import Any

import typer

from ..ai.models import SUPPORTED_PROVIDERS
from ..ai.types import Resolution


def _normalize_resolution(value: str | None) -> str:
    if value is None:
        return Resolution.TWO_K.value
    try:
        return Resolution.parse(value).value
    except ValueError:
        raise typer.BadParameter("Invalid resolution. Choose: 2K|4K")


def _normalize_provider(value: str | None) -> str | None:
    if value is None:
        return None
    v = value.strip().lower()
    if v not in SUPPORTED_PROVIDERS:
        raise typer.BadParameter(
            f"Invalid provider. Choose: {'|'.join(SUPPORTED_PROVIDERS)}"
        )
    return v


def PromptArg() -> Any:
    return typer.Argument(..., help="Text prompt describing the image")


def TemplateOpt() -> Any:
    return typer.Option(
        None,
        "--template",
        "-t",
        help="Template name (topic/style); defaults to the active template",
    )


def ProviderOpt() -> Any:
    return typer.Option(
        None,
        "--provider",
        "-p",
        callback=lambda v: _normalize_provider(v),
        help="Preferred provider: gemini|vertexai|openrouter (others become fallbacks)",
    )


def ModelOpt() -> Any:
    return typer.Option(
        None,
        "--model",
        "-m",
        help="Model override for the preferred provider",
    )


def TypeOpt() -> Any:
    return typer.Option(
        None,
        "--type",
        help="Image type understood by the generator (e.g. diagram, illustration)",
    )


def OutputOpt() -> Any:
    return typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (relative paths resolve inside the generator repository)",
    )


def StyleGridOpt() -> Any:
    return typer.Option(
        None,
        "--style-grid",
        help="Style grid image to guide the generation; defaults to the template's grid",
    )


def ResolutionOpt() -> Any:
    return typer.Option(
        "2K",
        "--resolution",
        "-r",
        callback=lambda v: _normalize_resolution(v),
        help="Grid resolution: 2K|4K",
    )


def TemplateNameArg() -> Any:
    return typer.Argument(..., help="Template name (topic/style)")
