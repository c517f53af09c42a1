"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from catalog.application.cache_cleanup import CacheCleanupScheduler
from catalog.domain.exceptions import CacheError
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.infrastructure.cache.in_memory_cache_repository import InMemoryCacheRepository
from catalog.infrastructure.cache.redis_cache_repository import (
    RedisCacheRepository,
    create_redis_client,
)
from catalog.infrastructure.config import Settings
from catalog.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from catalog.infrastructure.persistence.sql_product_repository import (
    SqlProductRepository,
    create_sql_engine,
)


def product_repository(settings: Settings) -> ProductRepository:
    if settings.store_backend == "sql":
        repo = SqlProductRepository(create_sql_engine(settings.database_url))
        repo.create_schema()
        return repo
    return JsonProductRepository(settings.products_file)


def cache_repository(settings: Settings) -> CacheRepository:
    if settings.cache_backend == "redis":
        client = create_redis_client(
            settings.redis_url,
            socket_timeout=settings.redis_socket_timeout,
            socket_connect_timeout=settings.redis_connect_timeout,
            max_connections=settings.redis_max_connections,
        )
        cache = RedisCacheRepository(client)
        try:
            cache.health_check()
        except CacheError as exc:
            logger.warning("Redis unreachable, using the in-process cache instead: {}", exc)
            cache.close()
            return InMemoryCacheRepository()
        return cache
    return InMemoryCacheRepository()


def cleanup_scheduler(cache: CacheRepository, settings: Settings) -> CacheCleanupScheduler:
    return CacheCleanupScheduler(
        cache,
        timeout=settings.cleanup_timeout_seconds,
        max_workers=settings.cleanup_workers,
    )


@dataclass
class Services:
    """Long-lived collaborators shared by every handler in one process."""

    settings: Settings
    product_repo: ProductRepository
    cache: CacheRepository
    cleanup: CacheCleanupScheduler

    def close(self) -> None:
        if not self.cleanup.wait(timeout=self.settings.cleanup_timeout_seconds):
            logger.warning("Exiting with cache cleanup still pending")
        self.cleanup.shutdown(wait=False)
        if isinstance(self.cache, RedisCacheRepository):
            self.cache.close()


def build_services(settings: Settings) -> Services:
    logger.info(
        "Starting catalog (store={}, cache={})",
        settings.store_backend,
        settings.cache_backend,
    )
    cache = cache_repository(settings)
    return Services(
        settings=settings,
        product_repo=product_repository(settings),
        cache=cache,
        cleanup=cleanup_scheduler(cache, settings),
    )
