# create_image/config/settings.py
# Layered configuration for create-image: defaults -> YAML file -> env-discovered providers
#
# * Each layer is a plain function returning data; resolve_config() folds them into a frozen GlobalConfig
# * Request-level overrides (explicit provider/model) are applied later when the fallback chain is built

from __future__ import annotations

import os
from dataclasses import dataclass, asdict, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import typer
import yaml

from ..ai.models import (
    GEMINI,
    VERTEXAI,
    OPENROUTER,
    DEFAULT_PRIORITIES,
    MODEL_ENV_VARS,
    get_default_model,
)
from ..core.exceptions import ConfigurationError
from ..core.verbose import vlog_warning
from .env_validator import (
    LOCATION_ENV_VARS,
    first_env,
    get_provider_credential,
)

CONFIG_FILENAME = "config.yaml"
DEFAULT_LOCATION = "global"
DEFAULT_PRIORITY = 99

# YAML uses the camelCase keys of the shared config file
_PROVIDER_KEY_MAP: dict[str, str] = {
    "name": "name",
    "apiKey": "api_key",
    "api_key": "api_key",
    "model": "model",
    "project": "project",
    "location": "location",
    "priority": "priority",
    "enabled": "enabled",
}


# * Default config directory (~/.config/create-image)
def default_config_dir() -> Path:
    return Path.home() / ".config" / "create-image"


# * Default image-generator checkout the provider CLI runs from
def default_repository_path() -> Path:
    return Path.home() / "Documents" / "github" / "image-generator"


# * Immutable provider configuration
@dataclass(frozen=True)
class ProviderConfig:
    name: str
    api_key: str = ""
    model: str = ""
    project: str | None = None
    location: str | None = None
    priority: int = DEFAULT_PRIORITY
    enabled: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("provider name must be a non-empty string")
        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise ValueError(
                f"priority for '{self.name}' must be an integer, got {self.priority!r}"
            )
        if not isinstance(self.enabled, bool):
            raise ValueError(
                f"enabled for '{self.name}' must be a boolean (true/false), "
                f"got {type(self.enabled).__name__}"
            )

    # copy w/ a request-level model override
    def with_model(self, model: str) -> "ProviderConfig":
        return replace(self, model=model)

    # masked api key for display
    @property
    def masked_api_key(self) -> str:
        if not self.api_key:
            return "not set"
        return "***" + self.api_key[-4:]


# * Fully-resolved, immutable global configuration
@dataclass(frozen=True)
class GlobalConfig:
    repository_path: str = field(default_factory=lambda: str(default_repository_path()))
    default_provider: str = GEMINI
    providers: tuple[ProviderConfig, ...] = ()
    default_template: str | None = None
    auto_fallback: bool = True
    cache_enabled: bool = True
    cache_ttl: float = 3600.0  # seconds (template cache)
    generator_command: tuple[str, ...] = ("node", "scripts/generate.js")
    generation_timeout: float = 300.0  # seconds per provider attempt

    def __post_init__(self) -> None:
        if not isinstance(self.auto_fallback, bool):
            raise ValueError(
                f"autoFallback must be a boolean (true/false), "
                f"got {type(self.auto_fallback).__name__}"
            )
        if not isinstance(self.cache_enabled, bool):
            raise ValueError(
                f"cacheEnabled must be a boolean (true/false), "
                f"got {type(self.cache_enabled).__name__}"
            )
        if not isinstance(self.cache_ttl, (int, float)) or self.cache_ttl <= 0:
            raise ValueError(f"cacheTTL must be positive, got {self.cache_ttl}")
        if (
            not isinstance(self.generation_timeout, (int, float))
            or self.generation_timeout <= 0
        ):
            raise ValueError(
                f"generationTimeout must be positive, got {self.generation_timeout}"
            )
        if not self.generator_command:
            raise ValueError("generatorCommand must not be empty")

    @property
    def templates_dir(self) -> Path:
        return Path(self.repository_path) / "templates"

    # enabled provider by name
    def get_provider(self, name: str) -> ProviderConfig | None:
        for provider in self.providers:
            if provider.name == name and provider.enabled:
                return provider
        return None

    # enabled providers, stable-sorted by priority (ties keep list order)
    def enabled_providers(self) -> list[ProviderConfig]:
        return sorted(
            (p for p in self.providers if p.enabled), key=lambda p: p.priority
        )


# ---------------------------------------------------------------------------
# Layer 1: YAML file
# ---------------------------------------------------------------------------


# * Read YAML config file into a mapping (missing file -> empty layer)
def load_yaml_layer(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}"
        )
    return data


# normalize one YAML provider entry to ProviderConfig field names (only keys present)
def normalize_provider_entry(entry: Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Provider entry must be a mapping, got {entry!r}")
    normalized: dict[str, Any] = {}
    for key, value in entry.items():
        field_name = _PROVIDER_KEY_MAP.get(str(key))
        if field_name is None:
            vlog_warning(f"Ignoring unknown provider setting: {key}")
            continue
        if value is None:
            continue
        normalized[field_name] = value
    if not normalized.get("name"):
        raise ConfigurationError("Provider entry is missing 'name'")
    return normalized


# ---------------------------------------------------------------------------
# Layer 2: environment
# ---------------------------------------------------------------------------


# * Discover providers whose credentials are present in the environment
def discover_providers_from_env(
    environ: Optional[Mapping[str, str]] = None,
) -> list[ProviderConfig]:
    env = os.environ if environ is None else environ
    providers: list[ProviderConfig] = []

    gemini_key = get_provider_credential(GEMINI, env)
    if gemini_key:
        providers.append(
            ProviderConfig(
                name=GEMINI,
                api_key=gemini_key,
                model=env.get(MODEL_ENV_VARS[GEMINI]) or get_default_model(GEMINI),
                priority=DEFAULT_PRIORITIES[GEMINI],
            )
        )

    vertex_project = get_provider_credential(VERTEXAI, env)
    if vertex_project:
        providers.append(
            ProviderConfig(
                name=VERTEXAI,
                model=env.get(MODEL_ENV_VARS[VERTEXAI]) or get_default_model(VERTEXAI),
                project=vertex_project,
                location=first_env(LOCATION_ENV_VARS, env) or DEFAULT_LOCATION,
                priority=DEFAULT_PRIORITIES[VERTEXAI],
            )
        )

    openrouter_key = get_provider_credential(OPENROUTER, env)
    if openrouter_key:
        providers.append(
            ProviderConfig(
                name=OPENROUTER,
                api_key=openrouter_key,
                model=env.get(MODEL_ENV_VARS[OPENROUTER])
                or get_default_model(OPENROUTER),
                priority=DEFAULT_PRIORITIES[OPENROUTER],
            )
        )

    return providers


# * Merge file & env providers: file values win per field, env api key fills a blank one
def merge_providers(
    file_entries: list[Mapping[str, Any]],
    env_providers: list[ProviderConfig],
) -> list[ProviderConfig]:
    merged: dict[str, ProviderConfig] = {p.name: p for p in env_providers}

    for raw in file_entries:
        entry = normalize_provider_entry(raw)
        name = entry["name"]
        env_provider = merged.get(name)
        if env_provider is not None:
            combined = {**asdict(env_provider), **entry}
            combined["api_key"] = entry.get("api_key") or env_provider.api_key
        else:
            combined = dict(entry)
            combined.setdefault("priority", DEFAULT_PRIORITIES.get(name, DEFAULT_PRIORITY))
        merged[name] = ProviderConfig(**combined)

    return sorted(merged.values(), key=lambda p: p.priority)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


# * Fold the file layer & env providers over defaults into a GlobalConfig
def resolve_config(
    file_data: Mapping[str, Any],
    env_providers: list[ProviderConfig],
    repository_path: Optional[Path] = None,
) -> GlobalConfig:
    raw_providers = file_data.get("providers") or []
    if not isinstance(raw_providers, list):
        raise ConfigurationError("'providers' must be a list")

    try:
        providers = merge_providers(raw_providers, env_providers)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid provider configuration: {e}") from e

    kwargs: dict[str, Any] = {
        "repository_path": str(repository_path or default_repository_path()),
        "providers": tuple(providers),
    }
    if file_data.get("repositoryPath"):
        kwargs["repository_path"] = str(Path(str(file_data["repositoryPath"])).expanduser())
    if "defaultProvider" in file_data:
        kwargs["default_provider"] = str(file_data["defaultProvider"])
    if "defaultTemplate" in file_data:
        kwargs["default_template"] = file_data["defaultTemplate"]
    if "autoFallback" in file_data:
        kwargs["auto_fallback"] = file_data["autoFallback"]
    if "cacheEnabled" in file_data:
        kwargs["cache_enabled"] = file_data["cacheEnabled"]
    # file stores milliseconds
    if "cacheTTL" in file_data:
        kwargs["cache_ttl"] = _ms_to_seconds("cacheTTL", file_data["cacheTTL"])
    if "generationTimeout" in file_data:
        kwargs["generation_timeout"] = _ms_to_seconds(
            "generationTimeout", file_data["generationTimeout"]
        )
    if "generatorCommand" in file_data:
        command = file_data["generatorCommand"]
        if isinstance(command, str):
            command = command.split()
        kwargs["generator_command"] = tuple(str(part) for part in command)

    # default provider falls back to the first configured provider
    default_provider = kwargs.get("default_provider", GEMINI)
    if providers and not any(p.name == default_provider for p in providers):
        kwargs["default_provider"] = providers[0].name

    try:
        return GlobalConfig(**kwargs)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(str(e)) from e


def _ms_to_seconds(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{key} must be a number of milliseconds, got {value!r}")
    return float(value) / 1000.0


# * Settings management class w/ YAML persistence & env discovery
class SettingsManager:
    def __init__(
        self,
        config_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        repository_path: Optional[Path] = None,
    ):
        self.config_dir = config_dir or default_config_dir()
        self.environ = environ
        self.repository_path = repository_path
        self._config: GlobalConfig | None = None

    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    # load configuration from all layers (cached)
    def load(self) -> GlobalConfig:
        if self._config is not None:
            return self._config

        env_providers = discover_providers_from_env(self.environ)
        try:
            file_data = load_yaml_layer(self.config_path)
            self._config = resolve_config(
                file_data, env_providers, self.repository_path
            )
        except ConfigurationError as e:
            typer.echo(f"Warning: Invalid config file {self.config_path}: {e}", err=True)
            typer.echo("Using default settings", err=True)
            self._config = resolve_config({}, env_providers, self.repository_path)

        return self._config

    # drop cached config & re-read all layers
    def reload(self) -> GlobalConfig:
        self._config = None
        return self.load()

    # get enabled provider by name
    def get_provider(self, name: str) -> ProviderConfig | None:
        return self.load().get_provider(name)

    # get enabled providers sorted by priority
    def get_enabled_providers(self) -> list[ProviderConfig]:
        return self.load().enabled_providers()

    # * Write a commented example config file & return its path
    @staticmethod
    def create_example_config(config_dir: Path) -> Path:
        config_dir.mkdir(parents=True, exist_ok=True)
        config_path = config_dir / CONFIG_FILENAME
        config_path.write_text(_example_config(), encoding="utf-8")
        return config_path


def _example_config() -> str:
    return f"""# create-image configuration
# Location: ~/.config/create-image/config.yaml

# Path to image-generator repository
repositoryPath: {default_repository_path()}

# Default provider to use (gemini, openrouter, vertexai)
defaultProvider: gemini

# Enable automatic fallback to other providers on failure
autoFallback: true

# Enable template caching (faster subsequent loads)
cacheEnabled: true

# Cache TTL in milliseconds (default: 1 hour)
cacheTTL: 3600000

# Per-provider generation timeout in milliseconds (default: 5 minutes)
generationTimeout: 300000

# Default template to use if none specified
# defaultTemplate: sports/illustrative

# Provider configurations (optional - can use environment variables instead)
# providers:
#   - name: gemini
#     apiKey: your_key_here  # Or use GOOGLE_API_KEY env var
#     model: gemini-3-pro-image-preview
#     priority: 1
#     enabled: true
#
#   - name: openrouter
#     apiKey: your_key_here  # Or use OPENROUTER_API_KEY env var
#     model: google/gemini-3-pro-image-preview
#     priority: 3
#     enabled: true
#
#   - name: vertexai
#     project: your_gcp_project_id
#     location: global
#     model: gemini-3-pro-image-preview
#     priority: 2
#     enabled: true

# Notes:
# - An apiKey set here wins; otherwise the environment variable is used
# - Priority determines fallback order (lower = higher priority)
# - Disabled providers will not be used even if configured
"""


# global settings manager instance
settings_manager = SettingsManager()
