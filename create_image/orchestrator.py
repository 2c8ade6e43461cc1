# create_image/orchestrator.py
# Coordinates config loading, template resolution & provider fallback for one CLI session

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Callable, Optional

from .ai.executor import ProviderExecutor, ProviderRunner
from .ai.fallback import ProviderManager
from .ai.health import ProviderHealthTracker
from .ai.types import ErrorKind, GenerationRequest, GenerationResult, ProviderHealth
from .config.settings import GlobalConfig, SettingsManager, settings_manager
from .core.cancellation import CancelToken
from .core.verbose import vlog, vlog_config, vlog_stage
from .template_io.template_loader import TemplateLoader
from .template_io.types import TemplateInfo, TemplateRegistry


def _default_runner(config: GlobalConfig) -> ProviderRunner:
    return ProviderExecutor(
        config.repository_path,
        command=config.generator_command,
        timeout=config.generation_timeout,
    )


class ImageOrchestrator:
    def __init__(
        self,
        settings: Optional[SettingsManager] = None,
        runner_factory: Callable[[GlobalConfig], ProviderRunner] = _default_runner,
        health: Optional[ProviderHealthTracker] = None,
    ):
        self.settings = settings if settings is not None else settings_manager
        self._runner_factory = runner_factory
        self._health = health
        self._config: GlobalConfig | None = None
        self._templates: TemplateLoader | None = None
        self._providers: ProviderManager | None = None

    # * Load config & build components (idempotent)
    def initialize(self) -> None:
        vlog_stage("Initializing")
        self._build(self.settings.load())

    def _build(self, config: GlobalConfig) -> None:
        self._config = config
        vlog_config("repository", config.repository_path)
        vlog_config("providers", ", ".join(p.name for p in config.providers) or "none")

        # cacheEnabled: false turns the template cache off
        cache_ttl = config.cache_ttl if config.cache_enabled else 0.0
        self._templates = TemplateLoader(config.repository_path, cache_ttl)
        health = self._health if self._health is not None else ProviderHealthTracker()
        self._providers = ProviderManager(self._runner_factory(config), health)

    def _ensure(self) -> tuple[GlobalConfig, TemplateLoader, ProviderManager]:
        if self._config is None or self._templates is None or self._providers is None:
            self.initialize()
        assert self._config is not None
        assert self._templates is not None
        assert self._providers is not None
        return self._config, self._templates, self._providers

    @property
    def config(self) -> GlobalConfig:
        return self._ensure()[0]

    @property
    def templates(self) -> TemplateLoader:
        return self._ensure()[1]

    @property
    def providers(self) -> ProviderManager:
        return self._ensure()[2]

    # * Generate an image w/ automatic provider fallback
    def generate_image(
        self, request: GenerationRequest, cancel: Optional[CancelToken] = None
    ) -> GenerationResult:
        config, templates, providers = self._ensure()

        vlog_stage("Generating image")
        vlog("GENERATE", f"Prompt: {request.prompt[:50]}...")
        vlog("GENERATE", f"Template: {request.template or 'none'}")
        vlog("GENERATE", f"Provider: {request.provider or 'auto'}")

        if request.template:
            template = templates.load(request.template)
            if template is None:
                return GenerationResult(
                    success=False,
                    error=f"Template not found: {request.template}",
                    error_kind=ErrorKind.CONFIGURATION,
                )
            if template.style_grid_path and not request.style_grid_path:
                request = dataclasses.replace(
                    request, style_grid_path=template.style_grid_path
                )

        result = providers.generate_with_fallback(request, config, cancel)

        if result.success and result.path:
            output = Path(result.path)
            if not output.is_absolute():
                output = Path(config.repository_path) / output
            if output.exists():
                result.path = str(output)
                result.size = output.stat().st_size

        return result

    def list_templates(self) -> list[TemplateInfo]:
        return self.templates.list()

    def search_templates(self, keyword: str) -> list[TemplateInfo]:
        return self.templates.search(keyword)

    def rebuild_registry(self) -> TemplateRegistry:
        return self.templates.rebuild_registry()

    def provider_health(self) -> list[ProviderHealth]:
        config, _, providers = self._ensure()
        return providers.get_health_status(config)

    def refresh_provider(self, name: str) -> ProviderHealth | None:
        config, _, providers = self._ensure()
        return providers.refresh_health(name, config)

    def cache_stats(self) -> dict:
        return self.templates.cache_stats()

    def clear_caches(self) -> None:
        _, templates, providers = self._ensure()
        templates.clear_cache()
        providers.clear_health_cache()

    # * Re-read config from disk & rebuild components
    def reload_config(self) -> GlobalConfig:
        self._build(self.settings.reload())
        assert self._config is not None
        return self._config
