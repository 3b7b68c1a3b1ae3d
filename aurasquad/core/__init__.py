"""Core layer — entities, errors, key scheme and collaborator protocols."""

from .errors import (
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
from .models import (
    ChatMessage,
    ContributionEntry,
    ContributionType,
    MemberRole,
    Squad,
    SquadMember,
    SquadStatus,
    generate_id,
)
from .protocols import JSONStore, TextLLMClient

__all__ = [
    "AuraSquadError", "ChainError", "ClassificationError", "ConfigError",
    "LLMError", "MessageNotFoundError", "NotFoundError", "RateLimitedError",
    "SquadNotFoundError", "StorageError", "ValidationError",
    "ChatMessage", "ContributionEntry", "ContributionType", "MemberRole",
    "Squad", "SquadMember", "SquadStatus", "generate_id",
    "JSONStore", "TextLLMClient",
]
