"""Application service: Check Health use case (query).

The store is required; the cache is advisory, so losing it only
degrades the service.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from catalog.application.safe_cache import SafeCache
from catalog.domain.exceptions import DomainException
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository

HEALTHY = "healthy"
DEGRADED = "degraded"
UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class HealthReport:
    status: str
    services: dict[str, str]


class CheckHealthHandler:

    def __init__(self, product_repo: ProductRepository, cache: CacheRepository) -> None:
        self._product_repo = product_repo
        self._cache = SafeCache(cache)

    def handle(self) -> HealthReport:
        store_ok = self._store_ok()
        cache_ok = self._cache.is_healthy()

        if not store_ok:
            status = UNHEALTHY
        elif not cache_ok:
            status = DEGRADED
        else:
            status = HEALTHY

        return HealthReport(
            status=status,
            services={
                "store": HEALTHY if store_ok else UNHEALTHY,
                "cache": HEALTHY if cache_ok else UNHEALTHY,
            },
        )

    def _store_ok(self) -> bool:
        try:
            self._product_repo.health_check()
        except DomainException as exc:
            logger.warning("Store health check failed: {}", exc)
            return False
        return True
