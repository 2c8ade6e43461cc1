# create_image/ai/reference_grid.py
# Four-image style reference pipeline: sequential paced calls -> per-image files -> 2x2 grid
#
# * Partial success still yields a grid (missing cells repeat the first image)
# * Zero successes is terminal: no compositing, no grid file

from __future__ import annotations

import base64
import binascii
import time
from pathlib import Path
from typing import Callable, Optional

from .clients.gemini_image_client import GeminiImageClient
from .grid import GRID_CELLS, composite_to_grid
from .prompts import DEFAULT_AUDIENCE, PROMPT_VARIATIONS, build_prompt
from .types import ErrorKind, GridGenerationOptions, GridGenerationResult
from ..config.env_validator import get_reference_grid_api_key
from ..core.cancellation import CancelToken
from ..core.verbose import vlog, vlog_file_write, vlog_stage, vlog_think

# * Pause between consecutive image calls (rate limiting)
PACING_DELAY = 1.5

NO_API_KEY_ERROR = "No API key. Set GOOGLE_API_KEY or GEMINI_API_KEY."


class ReferenceGridPipeline:
    def __init__(
        self,
        client: Optional[GeminiImageClient] = None,
        api_key: str | None = None,
        pacing_delay: float = PACING_DELAY,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.client = client if client is not None else GeminiImageClient(sleep=sleep)
        self._api_key = api_key
        self.pacing_delay = pacing_delay
        self._sleep = sleep

    # * Run the full pipeline (never raises for provider failures)
    def run(
        self,
        output_dir: Path | str,
        base_name: str,
        options: GridGenerationOptions,
        cancel: Optional[CancelToken] = None,
    ) -> GridGenerationResult:
        api_key = self._api_key or get_reference_grid_api_key()
        if not api_key:
            return GridGenerationResult(
                success=False,
                resolution=options.resolution,
                errors=[NO_API_KEY_ERROR],
                error_kind=ErrorKind.CONFIGURATION,
            )

        out_dir = Path(output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        vlog_stage("Style reference", base_name)
        vlog("GRID", f"Description: {options.description or 'default'}")
        vlog("GRID", f"Audience: {options.audience or DEFAULT_AUDIENCE}")

        images: list[bytes] = []
        individual_paths: list[str] = []
        errors: list[str] = []
        cancelled = False
        total = len(PROMPT_VARIATIONS)

        for i, variation in enumerate(PROMPT_VARIATIONS, start=1):
            if cancel is not None and cancel.cancelled:
                cancelled = True
                errors.append(f"Image {i}: {cancel.reason or 'Generation cancelled'}")
                break

            vlog_stage(f"Generating image {i}/{total}")
            prompt = build_prompt(
                variation, options.description, options.audience, options.visual_style
            )
            result = self.client.generate_image(
                prompt,
                api_key,
                options.reference_image_base64,
                options.domain_knowledge,
                resolution=options.resolution,
                cancel=cancel,
            )

            if result.success and result.image_data:
                try:
                    data = base64.b64decode(result.image_data)
                    path = out_dir / f"{base_name}-{i}.png"
                    path.write_bytes(data)
                except (binascii.Error, ValueError, OSError) as e:
                    errors.append(f"Image {i}: {e}")
                else:
                    vlog_file_write(path, len(data))
                    images.append(data)
                    individual_paths.append(str(path))
            else:
                errors.append(f"Image {i}: {result.error}")
                vlog_think(f"Image {i} failed: {result.error}")
                if result.error_kind is ErrorKind.CANCELLED:
                    cancelled = True
                    break

            if i < total:
                if self._pause(cancel):
                    cancelled = True
                    break

        generated = len(images)
        if generated == 0:
            return GridGenerationResult(
                success=False,
                generated_count=0,
                failed_count=GRID_CELLS,
                resolution=options.resolution,
                errors=errors,
                error_kind=ErrorKind.CANCELLED if cancelled else ErrorKind.TOTAL_GENERATION,
            )

        vlog_stage("Compositing", f"{generated} image(s)")
        grid = composite_to_grid(images, options.resolution)
        grid_path = out_dir / f"{base_name}.png"
        failed = GRID_CELLS - generated

        try:
            grid_path.write_bytes(grid)
        except OSError as e:
            errors.append(f"Grid failed: {e}")
            return GridGenerationResult(
                success=False,
                individual_paths=individual_paths,
                generated_count=generated,
                failed_count=failed,
                resolution=options.resolution,
                errors=errors,
                error_kind=ErrorKind.TOTAL_GENERATION,
            )

        vlog_file_write(grid_path, len(grid))
        if failed == 0:
            error_kind = None
        elif cancelled:
            error_kind = ErrorKind.CANCELLED
        else:
            error_kind = ErrorKind.PARTIAL_GENERATION

        return GridGenerationResult(
            success=True,
            grid_path=str(grid_path),
            individual_paths=individual_paths,
            grid_size_kb=round(len(grid) / 1024),
            generated_count=generated,
            failed_count=failed,
            resolution=options.resolution,
            errors=errors,
            error_kind=error_kind,
            padded=generated < GRID_CELLS,
        )

    # pacing pause between calls; True if cancelled meanwhile
    def _pause(self, cancel: Optional[CancelToken]) -> bool:
        if self._sleep is not None:
            self._sleep(self.pacing_delay)
        elif cancel is not None:
            cancel.wait(self.pacing_delay)
        else:
            time.sleep(self.pacing_delay)
        return cancel is not None and cancel.cancelled


# * Generate a style reference grid in output_dir as {base_name}.png (+ -1..-4 files)
def generate_reference_grid(
    output_dir: Path | str,
    base_name: str,
    options: GridGenerationOptions,
    *,
    api_key: str | None = None,
    client: Optional[GeminiImageClient] = None,
    sleep: Optional[Callable[[float], None]] = None,
    cancel: Optional[CancelToken] = None,
) -> GridGenerationResult:
    pipeline = ReferenceGridPipeline(client=client, api_key=api_key, sleep=sleep)
    return pipeline.run(output_dir, base_name, options, cancel=cancel)


# * Whether direct reference generation has a credential (available, reason)
def check_generation_availability() -> tuple[bool, str | None]:
    if not get_reference_grid_api_key():
        return False, "No API key. Set GOOGLE_API_KEY."
    return True, None
