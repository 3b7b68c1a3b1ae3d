"""
Aura Squad — squad formation, contribution tracking and rewards.

Public API surface. Import everything you need from here::

    from aurasquad import AuraSquadBuilder, SquadService, QueryProcessor

Extension points (implement these Protocols to customize):

- ``TextLLMClient`` — swap the language model behind query classification
- ``JSONStore`` / ``KVStore`` — back squad state with another store
"""

# -- Assembly --
from aurasquad.builder import AuraSquad, AuraSquadBuilder

# -- Data models --
from aurasquad.core.models import (
    ChatMessage,
    ContributionEntry,
    ContributionType,
    MemberRole,
    Squad,
    SquadMember,
    SquadStatus,
)

# -- Errors --
from aurasquad.core.errors import (
    AuraSquadError,
    ChainError,
    ClassificationError,
    ConfigError,
    LLMError,
    MessageNotFoundError,
    NotFoundError,
    RateLimitedError,
    SquadNotFoundError,
    StorageError,
    ValidationError,
)

# -- Protocols --
from aurasquad.core.protocols import JSONStore, TextLLMClient

# -- Infrastructure --
from aurasquad.infra.chain import ChainClient, ChainSettings
from aurasquad.infra.config import AuraSquadConfig
from aurasquad.infra.kv_memory import MemoryKVStore
from aurasquad.infra.kv_redis import RedisKVStore
from aurasquad.infra.kv_store import KVStore, KVStoreType, create_kv_store
from aurasquad.infra.llm_client import ClaudeTextClient

# -- Services --
from aurasquad.services.advisor import SquadAdvisor
from aurasquad.services.analytics import AnalyticsMetrics, AnalyticsService, TokenFlow
from aurasquad.services.query_processor import (
    QueryBranch,
    QueryProcessor,
    QueryRequest,
    SquadResponse,
)
from aurasquad.services.squad_service import SquadService
from aurasquad.services.templates import SquadTemplate, SquadType

__version__ = "0.1.0"

__all__ = [
    "AuraSquad", "AuraSquadBuilder",
    "ChatMessage", "ContributionEntry", "ContributionType", "MemberRole",
    "Squad", "SquadMember", "SquadStatus",
    "AuraSquadError", "ChainError", "ClassificationError", "ConfigError",
    "LLMError", "MessageNotFoundError", "NotFoundError", "RateLimitedError",
    "SquadNotFoundError", "StorageError", "ValidationError",
    "JSONStore", "TextLLMClient",
    "ChainClient", "ChainSettings", "AuraSquadConfig", "MemoryKVStore",
    "RedisKVStore", "KVStore", "KVStoreType", "create_kv_store", "ClaudeTextClient",
    "SquadAdvisor", "AnalyticsMetrics", "AnalyticsService", "TokenFlow",
    "QueryBranch", "QueryProcessor", "QueryRequest", "SquadResponse",
    "SquadService", "SquadTemplate", "SquadType",
]
