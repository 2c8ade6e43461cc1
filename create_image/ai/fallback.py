# create_image/ai/fallback.py
# Provider selection w/ automatic fallback (primary -> alternates in priority order)
#
# * Providers are tried strictly one at a time; each attempt is health-checked first
# * Always returns GenerationResult, never raises to callers

from __future__ import annotations

from typing import Optional

from .executor import ProviderRunner
from .health import ProviderHealthTracker
from .types import (
    ErrorKind,
    FallbackChain,
    GenerationRequest,
    GenerationResult,
    ProviderAttempt,
)
from ..config.settings import GlobalConfig, ProviderConfig
from ..core.cancellation import CancelToken
from ..core.exceptions import ConfigurationError
from ..core.verbose import vlog_provider


# * Build primary + fallback chain for a request
def build_fallback_chain(
    request: GenerationRequest, config: GlobalConfig
) -> FallbackChain:
    enabled = config.enabled_providers()
    if not enabled:
        raise ConfigurationError(
            "No enabled providers configured. Set GOOGLE_API_KEY, OPENROUTER_API_KEY "
            "or GOOGLE_CLOUD_PROJECT, or add providers to config.yaml."
        )

    # explicit provider becomes primary (w/ optional model override)
    if request.provider:
        requested = next((p for p in enabled if p.name == request.provider), None)
        if requested is not None:
            if request.model:
                requested = requested.with_model(request.model)
            return FallbackChain(
                primary=requested,
                fallbacks=[p for p in enabled if p.name != request.provider],
            )
        vlog_provider(
            f"Requested provider '{request.provider}' is not enabled, using default"
        )

    primary = next((p for p in enabled if p.name == config.default_provider), enabled[0])
    return FallbackChain(
        primary=primary,
        fallbacks=[p for p in enabled if p.name != primary.name],
    )


# * Sequences provider attempts & interprets their outcomes
class ProviderManager:
    def __init__(
        self,
        runner: ProviderRunner,
        health: Optional[ProviderHealthTracker] = None,
    ):
        self.runner = runner
        self.health = health if health is not None else ProviderHealthTracker()

    # * Generate image w/ automatic provider fallback
    def generate_with_fallback(
        self,
        request: GenerationRequest,
        config: GlobalConfig,
        cancel: Optional[CancelToken] = None,
    ) -> GenerationResult:
        try:
            chain = build_fallback_chain(request, config)
        except ConfigurationError as e:
            return GenerationResult(
                success=False, error=str(e), error_kind=ErrorKind.CONFIGURATION
            )

        vlog_provider(f"Fallback chain: {' -> '.join(chain.names)}")
        attempts: list[ProviderAttempt] = []

        result = self._try_provider(chain.primary, request, cancel)
        attempts.append(_attempt_from(chain.primary, result))
        if result.success or result.error_kind is ErrorKind.CANCELLED:
            result.attempts = attempts
            return result

        if config.auto_fallback and chain.fallbacks:
            vlog_provider("Primary provider failed, trying fallbacks...")

            for provider in chain.fallbacks:
                vlog_provider(f"Trying fallback: {provider.name}")
                result = self._try_provider(provider, request, cancel)
                attempts.append(_attempt_from(provider, result))

                if result.success:
                    result.fallback_used = True
                    result.attempts = attempts
                    return result
                if result.error_kind is ErrorKind.CANCELLED:
                    result.attempts = attempts
                    return result

        # every attempt failed; readiness-only failures mean nothing is configured
        only_unhealthy = all(
            a.error_kind is ErrorKind.PROVIDER_UNHEALTHY for a in attempts
        )
        return GenerationResult(
            success=False,
            error=f"All providers failed. Last error: {result.error}",
            error_kind=(
                ErrorKind.CONFIGURATION
                if only_unhealthy
                else ErrorKind.ALL_PROVIDERS_EXHAUSTED
            ),
            provider=result.provider,
            attempts=attempts,
        )

    # * Attempt generation w/ one provider (health-checked first)
    def _try_provider(
        self,
        provider: ProviderConfig,
        request: GenerationRequest,
        cancel: Optional[CancelToken],
    ) -> GenerationResult:
        if cancel is not None and cancel.cancelled:
            return GenerationResult(
                success=False,
                error=cancel.reason or "Generation cancelled",
                error_kind=ErrorKind.CANCELLED,
                provider=provider.name,
            )

        vlog_provider(f"Attempting generation with {provider.name}")

        health = self.health.check_health(provider)
        if not health.healthy:
            return GenerationResult(
                success=False,
                error=f"Provider {provider.name} is unhealthy: {health.error}",
                error_kind=ErrorKind.PROVIDER_UNHEALTHY,
                provider=provider.name,
            )

        outcome = self.runner.run(provider, request, cancel)

        if outcome.success:
            return GenerationResult(
                success=True,
                path=outcome.output_path,
                provider=provider.name,
                model=provider.model or None,
            )

        if outcome.cancelled:
            kind = ErrorKind.CANCELLED
        elif outcome.timed_out:
            kind = ErrorKind.TIMEOUT
        else:
            kind = ErrorKind.TRANSIENT_PROVIDER
        return GenerationResult(
            success=False,
            error=outcome.error,
            error_kind=kind,
            provider=provider.name,
        )

    # health status for every configured provider
    def get_health_status(self, config: GlobalConfig):
        return self.health.get_health_status(config)

    def refresh_health(self, provider_name: str, config: GlobalConfig):
        return self.health.refresh_health(provider_name, config)

    def select_best_provider(self, config: GlobalConfig) -> ProviderConfig | None:
        return self.health.select_best_provider(config)

    def clear_health_cache(self) -> None:
        self.health.clear()


def _attempt_from(provider: ProviderConfig, result: GenerationResult) -> ProviderAttempt:
    return ProviderAttempt(
        provider=provider.name,
        success=result.success,
        error=result.error,
        error_kind=result.error_kind,
    )
