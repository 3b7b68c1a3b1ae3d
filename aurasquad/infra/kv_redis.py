"""
Redis-backed key-value store.

Shared backend for multi-instance deployments. Uses the redis-py asyncio
client with a connection pool and a key prefix for namespace isolation.
Unlike the connection step, read/write failures are not swallowed: they
raise StorageError so squad operations fail loud.
"""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as redis

from aurasquad.core.errors import StorageError

from .kv_store import KVStore

logger = logging.getLogger(__name__)


class RedisKVStore(KVStore):
    """
    Args:
        redis_url: e.g. redis://localhost:6379/0
        key_prefix: namespace prepended to every key, default "aura:"
        max_connections: connection pool size

    Example:
        store = RedisKVStore("redis://localhost:6379/0")
        if await store.connect():
            await store.put_json("squad:abc", {"id": "abc"})
        await store.close()
    """

    def __init__(
        self,
        redis_url: str,
        key_prefix: str = "aura:",
        max_connections: int = 10,
        socket_timeout: float = 5.0,
        socket_connect_timeout: float = 5.0,
    ):
        self._redis_url = redis_url
        self._key_prefix = key_prefix
        self._max_connections = max_connections
        self._socket_timeout = socket_timeout
        self._socket_connect_timeout = socket_connect_timeout
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> bool:
        """Create the pool and PING. Returns False if Redis is unreachable."""
        try:
            self._client = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
                max_connections=self._max_connections,
                socket_timeout=self._socket_timeout,
                socket_connect_timeout=self._socket_connect_timeout,
            )
            await self._client.ping()
            logger.info(
                "Connected to Redis: %s (max_connections=%d)",
                self._mask_url(self._redis_url), self._max_connections,
            )
            return True
        except redis.RedisError as e:
            logger.error("Redis connection failed: %s", e)
            self._client = None
            return False

    @staticmethod
    def _mask_url(url: str) -> str:
        """redis://:password@host -> redis://:***@host"""
        if "@" in url and ":" in url.split("@")[0]:
            prefix, host = url.split("@", 1)
            scheme_and_auth = prefix.rsplit(":", 1)
            if len(scheme_and_auth) == 2:
                return f"{scheme_and_auth[0]}:***@{host}"
        return url

    def _make_key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def _require_client(self) -> redis.Redis:
        if self._client is None:
            raise StorageError("Redis client not connected")
        return self._client

    async def get(self, key: str) -> Optional[str]:
        client = self._require_client()
        try:
            return await client.get(self._make_key(key))
        except redis.RedisError as e:
            logger.error("Redis get error for key '%s': %s", key, e)
            raise StorageError(f"Redis get failed for '{key}': {e}") from e

    async def put(
        self,
        key: str,
        value: str,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        client = self._require_client()
        full_key = self._make_key(key)
        try:
            if ttl_seconds is not None and ttl_seconds > 0:
                await client.setex(full_key, ttl_seconds, value)
            else:
                await client.set(full_key, value)
        except redis.RedisError as e:
            logger.error("Redis set error for key '%s': %s", key, e)
            raise StorageError(f"Redis set failed for '{key}': {e}") from e

    async def delete(self, key: str) -> bool:
        client = self._require_client()
        try:
            return await client.delete(self._make_key(key)) > 0
        except redis.RedisError as e:
            logger.error("Redis delete error for key '%s': %s", key, e)
            raise StorageError(f"Redis delete failed for '{key}': {e}") from e

    async def exists(self, key: str) -> bool:
        client = self._require_client()
        try:
            return await client.exists(self._make_key(key)) > 0
        except redis.RedisError as e:
            raise StorageError(f"Redis exists failed for '{key}': {e}") from e

    async def health_check(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.ping()
            return True
        except redis.RedisError as e:
            logger.warning("Redis health check failed: %s", e)
            return False

    async def close(self) -> None:
        if self._client is not None:
            try:
                await self._client.aclose()
            except redis.RedisError as e:
                logger.warning("Error closing Redis connection: %s", e)
            finally:
                self._client = None
        logger.info("RedisKVStore closed")

    @property
    def store_type(self) -> str:
        return "redis"
