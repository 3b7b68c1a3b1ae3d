from .chain import ChainClient, ChainSettings
from .config import AuraSquadConfig
from .kv_memory import MemoryKVStore
from .kv_redis import RedisKVStore
from .kv_store import KVStore, KVStoreType, create_kv_store
from .llm_client import ClaudeTextClient
from .retry import linear_backoff, retry_async, retry_on, with_retry

__all__ = [
    "AuraSquadConfig", "ChainClient", "ChainSettings", "ClaudeTextClient",
    "KVStore", "KVStoreType", "MemoryKVStore", "RedisKVStore", "create_kv_store",
    "linear_backoff", "retry_async", "retry_on", "with_retry",
]
