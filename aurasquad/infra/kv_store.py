"""
Key-value store abstraction.

Provides one async get/put/delete API over an in-memory backend and a
Redis backend. Values are strings; ``get_json`` / ``put_json`` handle the
JSON encoding used for all domain entities.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from aurasquad.core.errors import ConfigError, StorageError

logger = logging.getLogger(__name__)


class KVStoreType(str, Enum):
    AUTO = "auto"      # Redis when reachable, memory otherwise
    REDIS = "redis"
    MEMORY = "memory"


class KVStore(ABC):
    """
    Abstract key-value store.

    Implementations must be safe to use from concurrent coroutines in one
    event loop.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent."""
        ...

    @abstractmethod
    async def put(
        self,
        key: str,
        value: str,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        """Store ``value`` under ``key``; ``ttl_seconds=None`` never expires."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete ``key``. Returns True if it existed."""
        ...

    @abstractmethod
    async def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...

    @property
    @abstractmethod
    def store_type(self) -> str:
        ...

    async def get_json(self, key: str) -> Any:
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt JSON under key '{key}': {e}") from e

    async def put_json(
        self,
        key: str,
        value: Any,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        await self.put(key, json.dumps(value, ensure_ascii=False), ttl_seconds)


async def create_kv_store(
    store_type: KVStoreType | str = KVStoreType.AUTO,
    redis_url: Optional[str] = None,
    key_prefix: str = "aura:",
) -> KVStore:
    """
    Create a key-value store.

    AUTO tries Redis first when a URL is configured and falls back to the
    in-memory store if the connection fails.

    Raises:
        ConfigError: REDIS requested without a URL, or unknown store type.
        StorageError: REDIS requested and the connection failed.
    """
    from .kv_memory import MemoryKVStore
    from .kv_redis import RedisKVStore

    try:
        store_type = KVStoreType(str(getattr(store_type, "value", store_type)).lower())
    except ValueError as e:
        raise ConfigError(f"Unknown kv store type: {store_type}") from e

    if store_type == KVStoreType.MEMORY:
        logger.info("Using memory kv store (forced)")
        return MemoryKVStore()

    if store_type == KVStoreType.REDIS:
        if not redis_url:
            raise ConfigError("AURA_REDIS_URL is required for redis store type")
        store = RedisKVStore(redis_url, key_prefix=key_prefix)
        if not await store.connect():
            raise StorageError("Failed to connect to Redis")
        logger.info("Using Redis kv store (forced)")
        return store

    if redis_url:
        store = RedisKVStore(redis_url, key_prefix=key_prefix)
        if await store.connect():
            logger.info("Using Redis kv store (auto)")
            return store
        logger.warning("Redis connection failed, falling back to memory")
    else:
        logger.info("No redis_url configured, using memory store")

    return MemoryKVStore()
