"""
Configuration management using pydantic-settings.

All Aura Squad settings are loaded from environment variables
with the AURA_ prefix.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class AuraSquadConfig(BaseSettings):
    """
    Aura Squad configuration.

    Environment variables are prefixed with AURA_, e.g.:
    - AURA_ANTHROPIC_API_KEY=sk-...
    - AURA_KV_STORE_TYPE=redis
    - AURA_REDIS_URL=redis://localhost:6379/0
    """

    model_config = {"env_prefix": "AURA_"}

    # LLM
    anthropic_api_key: str = ""
    anthropic_api_keys: str = ""  # Comma-separated keys for round-robin
    anthropic_base_url: str = ""
    default_model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = Field(default=1024, ge=1)
    llm_max_retries: int = Field(default=5, ge=0)
    llm_retry_delay_seconds: float = Field(default=2.0, ge=0)

    def get_api_keys(self) -> list[str]:
        """Return list of API keys (multi-key preferred, fallback to single)."""
        if self.anthropic_api_keys:
            return [k.strip() for k in self.anthropic_api_keys.split(",") if k.strip()]
        if self.anthropic_api_key:
            return [self.anthropic_api_key]
        return []

    def get_base_url(self) -> str | None:
        """Return base URL or None for Anthropic default."""
        return self.anthropic_base_url or None

    # Key-value store
    kv_store_type: str = "auto"  # auto | memory | redis
    redis_url: str = ""
    redis_key_prefix: str = "aura:"

    # Squads / analytics
    chat_history_limit: int = Field(default=50, ge=0)
    analytics_window_days: int = Field(default=30, ge=1)

    # Chain
    chain_rpc_url: str = "https://sepolia.infura.io/v3/YOUR_INFURA_KEY"
    chain_id: int = 11155111
    chain_name: str = "sepolia"
    chain_signer_private_key: str = ""
    aura_token_address: str = "0x3856112c01D789da77f6218c4CBB2Bd05580FD70"
    rewards_minter_address: str = "0xb1A800F6F84176b9FeEd4300f581C7b654EA915e"
    token_converter_address: str = "0x34c9067E37cD3998A1c04C0cAac1065C0d54D876"
    agent_marketplace_address: str = "0x2DaFb69cA7b77712b8dA40A85d0e2cC46652FEFC"
