# create_image/ai/models.py
# Provider catalog: supported providers, default models, priorities & env variable names

from __future__ import annotations

# * Supported provider IDs
GEMINI = "gemini"
VERTEXAI = "vertexai"
OPENROUTER = "openrouter"

SUPPORTED_PROVIDERS: list[str] = [GEMINI, VERTEXAI, OPENROUTER]

# * Default models by provider - single source of truth
DEFAULT_MODELS_BY_PROVIDER: dict[str, str] = {
    GEMINI: "gemini-3-pro-image-preview",
    VERTEXAI: "gemini-3-pro-image-preview",
    OPENROUTER: "google/gemini-3-pro-image-preview",
}

# * Default priorities for env-discovered providers (lower = tried first)
DEFAULT_PRIORITIES: dict[str, int] = {
    GEMINI: 1,
    VERTEXAI: 2,
    OPENROUTER: 3,
}

# * Env variables overriding the model per provider
MODEL_ENV_VARS: dict[str, str] = {
    GEMINI: "GEMINI_MODEL",
    VERTEXAI: "VERTEX_MODEL",
    OPENROUTER: "OPENROUTER_MODEL",
}

# * Model used for direct style-reference generation
REFERENCE_GRID_MODEL = "gemini-2.0-flash-preview-image-generation"

# * Human-readable provider descriptions for CLI display
PROVIDER_DESCRIPTIONS: dict[str, str] = {
    GEMINI: "Google Gemini API (API key)",
    VERTEXAI: "Google Vertex AI (GCP project)",
    OPENROUTER: "OpenRouter (API key)",
}


def get_default_model(provider: str) -> str:
    return DEFAULT_MODELS_BY_PROVIDER.get(provider, DEFAULT_MODELS_BY_PROVIDER[GEMINI])


def get_provider_description(provider: str) -> str:
    return PROVIDER_DESCRIPTIONS.get(provider, provider)


def is_supported_provider(provider: str) -> bool:
    return provider in SUPPORTED_PROVIDERS
