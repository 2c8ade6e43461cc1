# create_image/config/env_validator.py
# Centralized environment variable registry for provider credentials

import os
from typing import Mapping, Optional


# * Primary credential variable by provider ID (also the variable injected into the generator)
REQUIRED_ENV_VARS: dict[str, str] = {
    "gemini": "GOOGLE_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "vertexai": "GOOGLE_CLOUD_PROJECT",
}

# * Accepted variables in lookup order (first non-empty wins)
CREDENTIAL_ENV_ALIASES: dict[str, list[str]] = {
    "gemini": ["GOOGLE_API_KEY", "GOOGLE_GENERATIVE_AI_API_KEY"],
    "openrouter": ["OPENROUTER_API_KEY"],
    "vertexai": ["GOOGLE_CLOUD_PROJECT", "VERTEX_PROJECT"],
}

# * Variables for the cloud-hosted (Vertex AI) location
LOCATION_ENV_VARS: list[str] = ["GOOGLE_CLOUD_LOCATION", "VERTEX_LOCATION"]

# * Keys accepted for direct reference-grid generation
REFERENCE_GRID_ENV_VARS: list[str] = ["GOOGLE_API_KEY", "GEMINI_API_KEY"]


def get_required_env_var(provider: str) -> Optional[str]:
    """Get the credential environment variable name for a provider."""
    return REQUIRED_ENV_VARS.get(provider)


def first_env(names: list[str], environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the first non-empty value among `names`, or None."""
    env = os.environ if environ is None else environ
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def get_provider_credential(
    provider: str, environ: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    return first_env(CREDENTIAL_ENV_ALIASES.get(provider, []), environ)


def validate_provider_env(provider: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check if a credential is present in the environment for provider.

    Returns True if the provider has no env requirement or any accepted
    variable is set & non-empty.
    """
    if provider not in CREDENTIAL_ENV_ALIASES:
        return True
    return get_provider_credential(provider, environ) is not None


def get_reference_grid_api_key(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    return first_env(REFERENCE_GRID_ENV_VARS, environ)


def get_missing_env_message(provider: str) -> str:
    """Generate error message for missing environment variable."""
    names = CREDENTIAL_ENV_ALIASES.get(provider)
    if not names:
        return f"Provider '{provider}' does not require credentials."
    return f"Missing {' or '.join(names)} in environment or .env"
