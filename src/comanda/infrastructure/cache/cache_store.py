from __future__ import annotations

from comanda.application.ports.cache import CacheStore
from comanda.infrastructure.cache.redis_client import get_redis_client

KEY_PREFIX = "comanda:"


class RedisCacheStore(CacheStore):
    """String cache on redis; keys are namespaced so the instance can be shared."""

    def __init__(self, timeout_seconds: float = 0.5, key_prefix: str = KEY_PREFIX) -> None:
        self._timeout_seconds = timeout_seconds
        self._key_prefix = key_prefix

    def get(self, key: str) -> str | None:
        return self._client().get(self._key(key))

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._client().set(name=self._key(key), value=value, ex=ttl_seconds)

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(self._client().delete(*(self._key(key) for key in keys)))

    def _client(self):
        return get_redis_client(timeout_seconds=self._timeout_seconds)

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"
