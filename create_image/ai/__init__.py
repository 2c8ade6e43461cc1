# create_image/ai/__init__.py
# Provider fallback, health tracking & reference-grid generation

from .types import (
    ErrorKind,
    GenerationRequest,
    GenerationResult,
    GridGenerationOptions,
    GridGenerationResult,
    Resolution,
)


# * Lazy proxy to avoid importing httpx & Pillow at package import time
def generate_reference_grid(output_dir, base_name, options, **kwargs) -> GridGenerationResult:
    from .reference_grid import generate_reference_grid as _generate_reference_grid

    return _generate_reference_grid(output_dir, base_name, options, **kwargs)


__all__ = [
    "ErrorKind",
    "GenerationRequest",
    "GenerationResult",
    "GridGenerationOptions",
    "GridGenerationResult",
    "Resolution",
    "generate_reference_grid",
]
