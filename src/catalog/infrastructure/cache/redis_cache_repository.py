"""Redis-backed implementation of CacheRepository.

Entries are plain keys written without expiry; indices are Redis sets.
All Redis and decoding failures are raised as CacheError.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import redis
from loguru import logger
from redis.backoff import ExponentialBackoff
from redis.retry import Retry

from catalog.domain.exceptions import CacheError
from catalog.domain.model.product import Product
from catalog.domain.repository.cache_repository import CacheRepository
from catalog.infrastructure.cache.codec import JsonProductCodec, ProductCodec


def create_redis_client(
    url: str,
    socket_timeout: float = 2.0,
    socket_connect_timeout: float = 2.0,
    max_connections: int = 10,
) -> redis.Redis:
    """Build a pooled client; timeouts bound every synchronous call."""
    logger.info("Initializing Redis client for {}", _sanitize(url))
    return redis.Redis.from_url(
        url,
        decode_responses=False,
        max_connections=max_connections,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_connect_timeout,
        socket_keepalive=True,
        health_check_interval=30,
        retry=Retry(ExponentialBackoff(base=0.1, cap=1.0), retries=3),
        client_name="catalog_cache",
    )


class RedisCacheRepository(CacheRepository):

    def __init__(self, client: redis.Redis, codec: ProductCodec | None = None) -> None:
        self._client = client
        self._codec = codec or JsonProductCodec()

    # --- Entries --------------------------------------------------------------

    def get(self, key: str) -> Product | None:
        with _translate_errors("get"):
            data = self._client.get(key)
        return None if data is None else self._codec.unmarshal(data)

    def set(self, key: str, product: Product) -> None:
        data = self._codec.marshal(product)
        with _translate_errors("set"):
            self._client.set(key, data)

    def delete(self, key: str) -> None:
        with _translate_errors("delete"):
            self._client.delete(key)

    def get_multiple(self, keys: list[str]) -> list[Product]:
        if not keys:
            return []
        with _translate_errors("get_multiple"):
            pipe = self._client.pipeline(transaction=False)
            for key in keys:
                pipe.get(key)
            results = pipe.execute()
        return [self._codec.unmarshal(data) for data in results if data is not None]

    def exists(self, key: str) -> bool:
        with _translate_errors("exists"):
            return self._client.exists(key) > 0

    # --- Sets -----------------------------------------------------------------

    def add_to_set(self, set_key: str, member: str) -> None:
        with _translate_errors("add_to_set"):
            self._client.sadd(set_key, member)

    def remove_from_set(self, set_key: str, member: str) -> None:
        with _translate_errors("remove_from_set"):
            self._client.srem(set_key, member)

    def get_set(self, set_key: str) -> list[str]:
        with _translate_errors("get_set"):
            members = self._client.smembers(set_key)
        return sorted(_as_text(m) for m in members)

    def delete_set(self, set_key: str) -> None:
        with _translate_errors("delete_set"):
            self._client.delete(set_key)

    def health_check(self) -> None:
        with _translate_errors("health_check"):
            self._client.ping()

    def close(self) -> None:
        self._client.close()


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except redis.RedisError as exc:
        raise CacheError(f"Redis {operation} failed: {exc}") from exc


def _as_text(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def _sanitize(url: str) -> str:
    if "@" not in url:
        return url
    scheme, _, rest = url.partition("://")
    return f"{scheme}://***@{rest.split('@', 1)[1]}"
