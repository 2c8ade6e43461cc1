# create_image/ai/health.py
# Provider readiness checks w/ a TTL health cache
#
# * Readiness only: validates configuration (credentials / GCP project), never calls the network
# * The cache is an injected instance owned by the tracker (no process-wide singleton)

from __future__ import annotations

import os
import threading
import time
from typing import Callable, Mapping, Optional

from .models import VERTEXAI
from .types import ProviderHealth
from ..config.settings import GlobalConfig, ProviderConfig
from ..core.verbose import vlog

# * Health records older than this are recomputed
HEALTH_TTL_SECONDS = 300.0


# * Thread-safe health cache keyed by provider name (last write wins)
class HealthCache:
    def __init__(
        self,
        ttl: float = HEALTH_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl = ttl
        self._clock = clock
        self._records: dict[str, ProviderHealth] = {}
        self._lock = threading.Lock()

    # fresh record for provider, or None if missing/expired
    def get(self, provider: str) -> ProviderHealth | None:
        with self._lock:
            record = self._records.get(provider)
        if record is None:
            return None
        if self._clock() - record.last_checked >= self.ttl:
            return None
        return record

    def set(self, record: ProviderHealth) -> None:
        with self._lock:
            self._records[record.provider] = record

    # drop one provider's record
    def invalidate(self, provider: str) -> None:
        with self._lock:
            self._records.pop(provider, None)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, provider: object) -> bool:
        with self._lock:
            return provider in self._records


# * Configuration-readiness tracker w/ cached results
class ProviderHealthTracker:
    def __init__(
        self,
        cache: Optional[HealthCache] = None,
        clock: Callable[[], float] = time.time,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._clock = clock
        self.cache = cache if cache is not None else HealthCache(clock=clock)
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    # * Cached health for provider (recomputed once the TTL window has passed)
    def check_health(self, provider: ProviderConfig) -> ProviderHealth:
        cached = self.cache.get(provider.name)
        if cached is not None:
            return cached

        health = self._evaluate(provider)
        self.cache.set(health)
        vlog(
            "HEALTH",
            f"{provider.name}: {'healthy' if health.healthy else 'unhealthy'}",
            health.error,
        )
        return health

    # * Evict & recompute health for a configured provider (None if unknown)
    def refresh_health(
        self, provider_name: str, config: GlobalConfig
    ) -> ProviderHealth | None:
        provider = next((p for p in config.providers if p.name == provider_name), None)
        if provider is None:
            return None

        self.cache.invalidate(provider_name)
        return self.check_health(provider)

    # health for every configured provider (enabled or not), in config order
    def get_health_status(self, config: GlobalConfig) -> list[ProviderHealth]:
        return [self.check_health(provider) for provider in config.providers]

    # * Enabled & healthy provider w/ lowest priority number
    def select_best_provider(self, config: GlobalConfig) -> ProviderConfig | None:
        for provider in config.enabled_providers():
            if self.check_health(provider).healthy:
                return provider
        return None

    def clear(self) -> None:
        self.cache.clear()
        vlog("HEALTH", "Health cache cleared")

    # provider-specific readiness rules
    def _evaluate(self, provider: ProviderConfig) -> ProviderHealth:
        health = ProviderHealth(
            provider=provider.name, healthy=True, last_checked=self._clock()
        )

        if provider.name == VERTEXAI:
            if not provider.project and not self.environ.get("GOOGLE_CLOUD_PROJECT"):
                health.healthy = False
                health.error = "GOOGLE_CLOUD_PROJECT not configured"
        elif not provider.api_key:
            health.healthy = False
            health.error = "API key not configured"

        return health
