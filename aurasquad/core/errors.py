"""
Unified exception hierarchy for Aura Squad.

All exceptions inherit from AuraSquadError. Squad-state operations fail
loud with these types; chain operations log and degrade instead.
"""


class AuraSquadError(Exception):
    """Base exception for all Aura Squad errors."""
    pass


class NotFoundError(AuraSquadError):
    """A persisted entity does not exist."""
    pass


class SquadNotFoundError(NotFoundError):
    def __init__(self, squad_id: str):
        super().__init__(f"Squad {squad_id} not found")
        self.squad_id = squad_id


class MessageNotFoundError(NotFoundError):
    def __init__(self, message_id: str):
        super().__init__(f"Message {message_id} not found")
        self.message_id = message_id


class ValidationError(AuraSquadError):
    """Precondition violated (duplicate member, removing the leader, bad rating, etc.)."""
    pass


class StorageError(AuraSquadError):
    """Key-value backend failure."""
    pass


class LLMError(AuraSquadError):
    """Language-model call failure."""
    pass


class RateLimitedError(LLMError):
    """The language-model API answered HTTP 429. Retryable."""
    pass


class ClassificationError(AuraSquadError):
    """The classification reply could not be parsed as JSON."""
    pass


class ChainError(AuraSquadError):
    """Chain client could not be initialized or a transaction failed."""
    pass


class ConfigError(AuraSquadError):
    """Configuration error (missing env vars, invalid config, etc.)."""
    pass
