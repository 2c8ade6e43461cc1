# create_image/template_io/style_references.py
# Style reference images per template: list, activate & generate new reference grids
#
# * The active reference filename lives in {template}/.active-reference

from __future__ import annotations

import base64
from pathlib import Path
from typing import Callable, Optional, Sequence

from .generics import read_text_safe, write_text_safe
from .template_loader import get_template_dir
from .types import StyleReferenceGeneration, StyleReferenceInfo
from ..ai.types import GridGenerationOptions, GridGenerationResult, Resolution
from ..core.cancellation import CancelToken
from ..core.exceptions import StyleReferenceNotFoundError
from ..core.verbose import vlog, vlog_stage

ACTIVE_REFERENCE_FILENAME = ".active-reference"
REFERENCES_DIRNAME = "style-references"
IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg")

# (output_dir, base_name, options, cancel) -> GridGenerationResult
GridGenerator = Callable[..., GridGenerationResult]


def _default_generator(
    output_dir: Path,
    base_name: str,
    options: GridGenerationOptions,
    cancel: Optional[CancelToken] = None,
) -> GridGenerationResult:
    from ..ai.reference_grid import generate_reference_grid

    return generate_reference_grid(output_dir, base_name, options, cancel=cancel)


class StyleReferenceManager:
    def __init__(
        self,
        repository_path: Path | str,
        generator: Optional[GridGenerator] = None,
    ):
        self.templates_dir = Path(repository_path) / "templates"
        self._generator = generator or _default_generator

    def _template_dir(self, template_name: str) -> Path:
        return get_template_dir(self.templates_dir, template_name)

    def get_active_reference(self, template_name: str) -> str | None:
        marker = self._template_dir(template_name) / ACTIVE_REFERENCE_FILENAME
        if not marker.exists():
            return None
        return read_text_safe(marker).strip() or None

    # * Activate a reference (".png" appended when the bare name is missing)
    def set_active_reference(self, template_name: str, filename: str) -> str:
        template_dir = self._template_dir(template_name)
        refs_dir = template_dir / REFERENCES_DIRNAME

        if not (refs_dir / filename).is_file():
            with_png = filename if filename.endswith(".png") else f"{filename}.png"
            if not (refs_dir / with_png).is_file():
                raise StyleReferenceNotFoundError(f"Style reference not found: {filename}")
            filename = with_png

        write_text_safe(template_dir / ACTIVE_REFERENCE_FILENAME, filename)
        return filename

    def list_style_references(self, template_name: str) -> list[StyleReferenceInfo]:
        refs_dir = self._template_dir(template_name) / REFERENCES_DIRNAME
        if not refs_dir.is_dir():
            return []

        active = self.get_active_reference(template_name)
        references = []
        for entry in sorted(refs_dir.iterdir()):
            if not entry.is_file() or entry.suffix.lower() not in IMAGE_SUFFIXES:
                continue
            references.append(
                StyleReferenceInfo(
                    name=entry.stem,
                    filename=entry.name,
                    path=entry,
                    size_kb=round(entry.stat().st_size / 1024),
                    is_active=entry.name == active,
                )
            )
        return references

    # full path to the active reference (None if unset or deleted)
    def get_active_reference_path(self, template_name: str) -> Path | None:
        active = self.get_active_reference(template_name)
        if not active:
            return None
        path = self._template_dir(template_name) / REFERENCES_DIRNAME / active
        return path if path.is_file() else None

    def load_active_reference_base64(self, template_name: str) -> str | None:
        path = self.get_active_reference_path(template_name)
        if path is None:
            return None
        try:
            return base64.b64encode(path.read_bytes()).decode("ascii")
        except OSError:
            return None

    def check_generation_availability(self) -> tuple[bool, str | None]:
        from ..ai.reference_grid import check_generation_availability

        return check_generation_availability()

    # * Generate a new reference grid into style-references/ & activate it
    def generate_style_reference(
        self,
        template_name: str,
        name: str,
        resolution: Resolution | str = Resolution.TWO_K,
        description: str | None = None,
        audience: str | None = None,
        visual_style: str | None = None,
        ref_images: Sequence[Path | str] = (),
        cancel: Optional[CancelToken] = None,
    ) -> StyleReferenceGeneration:
        template_dir = self._template_dir(template_name)
        available, reason = self.check_generation_availability()
        if not available:
            return StyleReferenceGeneration(success=False, error=reason)

        refs_dir = template_dir / REFERENCES_DIRNAME
        refs_dir.mkdir(parents=True, exist_ok=True)

        reference_b64 = None
        if ref_images:
            first = Path(ref_images[0])
            if first.is_file():
                reference_b64 = base64.b64encode(first.read_bytes()).decode("ascii")
            else:
                vlog("REFS", f"Reference image not found, ignoring: {first}")

        dk_path = template_dir / "domain-knowledge.txt"
        domain_knowledge = read_text_safe(dk_path) if dk_path.exists() else None

        options = GridGenerationOptions(
            description=description or name,
            audience=audience,
            visual_style=visual_style,
            resolution=Resolution.parse(resolution),
            reference_image_base64=reference_b64,
            domain_knowledge=domain_knowledge,
        )

        vlog_stage("Generating style reference", f"{template_name} -> {name}")
        result = self._generator(refs_dir, name, options, cancel=cancel)

        if result.success and result.grid_path:
            self.set_active_reference(template_name, f"{name}.png")
            return StyleReferenceGeneration(
                success=True,
                path=result.grid_path,
                individual_paths=list(result.individual_paths),
                grid_size_kb=result.grid_size_kb,
                padded=result.padded,
                error="; ".join(result.errors) or None,
            )

        return StyleReferenceGeneration(
            success=False,
            individual_paths=list(result.individual_paths),
            error="; ".join(result.errors) or "Generation failed",
        )
