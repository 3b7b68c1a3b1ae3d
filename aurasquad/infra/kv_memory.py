"""
In-memory key-value store.

Single-process backend for development and tests. Entries may carry a TTL;
expired entries are dropped lazily on access.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .kv_store import KVStore

logger = logging.getLogger(__name__)


@dataclass
class MemoryEntry:
    value: str
    expires_at: Optional[datetime] = None

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return datetime.now() >= self.expires_at


class MemoryKVStore(KVStore):
    """
    Dict-backed store guarded by an asyncio.Lock.

    Example:
        store = MemoryKVStore()
        await store.put_json("squad:abc", {"id": "abc"})
        squad = await store.get_json("squad:abc")
    """

    def __init__(self) -> None:
        self._data: dict[str, MemoryEntry] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.is_expired:
                del self._data[key]
                return None
            return entry.value

    async def put(
        self,
        key: str,
        value: str,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        async with self._lock:
            expires_at = None
            if ttl_seconds is not None:
                expires_at = datetime.now() + timedelta(seconds=ttl_seconds)
            self._data[key] = MemoryEntry(value=value, expires_at=expires_at)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            if key in self._data:
                del self._data[key]
                return True
            return False

    async def exists(self, key: str) -> bool:
        async with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return False
            if entry.is_expired:
                del self._data[key]
                return False
            return True

    async def close(self) -> None:
        self._data.clear()
        logger.info("MemoryKVStore closed")

    @property
    def store_type(self) -> str:
        return "memory"
