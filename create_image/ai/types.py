# create_image/ai/types.py
# Shared request/result types for image generation, provider health & fallback

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config.settings import ProviderConfig


# * Tagged failure categories carried by every result object
class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    TRANSIENT_PROVIDER = "transient_provider"
    CONTENT = "content"
    PROVIDER_UNHEALTHY = "provider_unhealthy"
    PARTIAL_GENERATION = "partial_generation"
    TOTAL_GENERATION = "total_generation"
    ALL_PROVIDERS_EXHAUSTED = "all_providers_exhausted"
    CANCELLED = "cancelled"
    TIMEOUT = "timeout"


# * Grid output resolution (value doubles as the API image size tier)
class Resolution(str, Enum):
    TWO_K = "2K"
    FOUR_K = "4K"

    @classmethod
    def parse(cls, value: "str | Resolution") -> "Resolution":
        if isinstance(value, Resolution):
            return value
        normalized = str(value).strip().upper()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"resolution must be one of 2K, 4K; got '{value}'")


# * Cached configuration-readiness record for one provider
@dataclass(slots=True)
class ProviderHealth:
    provider: str  # provider name (cache key)
    healthy: bool
    last_checked: float  # epoch seconds
    error: str | None = None  # reason when unhealthy


# * Primary provider plus ordered alternates for one request
@dataclass(slots=True)
class FallbackChain:
    primary: ProviderConfig
    fallbacks: list[ProviderConfig] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [self.primary.name] + [p.name for p in self.fallbacks]


# * Image generation request consumed once by the fallback orchestrator
@dataclass(slots=True)
class GenerationRequest:
    prompt: str
    template: str | None = None
    type: str | None = None  # image type understood by the generator (e.g. "diagram")
    provider: str | None = None  # explicit provider override
    model: str | None = None  # model override for the explicit provider
    output_path: str | None = None
    style_grid_path: str | None = None


# * One provider attempt inside a fallback run
@dataclass(slots=True)
class ProviderAttempt:
    provider: str
    success: bool
    error: str = ""
    error_kind: ErrorKind | None = None


# * Terminal result of generate_with_fallback
@dataclass(slots=True)
class GenerationResult:
    success: bool
    path: str | None = None
    size: int | None = None  # bytes on disk
    provider: str | None = None
    model: str | None = None
    error: str = ""
    error_kind: ErrorKind | None = None
    fallback_used: bool = False
    attempts: list[ProviderAttempt] = field(default_factory=list)

    @property
    def size_kb(self) -> str | None:
        if self.size is None:
            return None
        return f"{self.size / 1024:.1f}"


# * Result of one single-image API call (image_data is base64)
@dataclass(slots=True)
class ImageCallResult:
    success: bool
    image_data: str | None = None
    error: str = ""
    error_kind: ErrorKind | None = None
    attempts: int = 0


# * Options for the four-image reference grid pipeline
@dataclass(slots=True)
class GridGenerationOptions:
    description: str = ""
    audience: str | None = None
    visual_style: str | None = None
    resolution: Resolution = Resolution.TWO_K
    reference_image_base64: str | None = None
    domain_knowledge: str | None = None  # sent as the system instruction

    def __post_init__(self) -> None:
        # accept "2K" / "4k" text as well as the enum
        self.resolution = Resolution.parse(self.resolution)


# * Result of the reference grid pipeline
@dataclass(slots=True)
class GridGenerationResult:
    success: bool
    grid_path: str | None = None
    individual_paths: list[str] = field(default_factory=list)
    grid_size_kb: int | None = None
    generated_count: int = 0
    failed_count: int = 0
    resolution: Resolution = Resolution.TWO_K
    errors: list[str] = field(default_factory=list)
    error_kind: ErrorKind | None = None
    padded: bool = False  # grid built from fewer than 4 unique images
