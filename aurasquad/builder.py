"""
AuraSquadBuilder — assembles the service graph from configuration.

Every collaborator can be injected; anything not injected is created from
``AuraSquadConfig``. Only the LLM client is optional: without one (and
without API keys) the query processor is left out.

Usage::

    from aurasquad import AuraSquadBuilder

    app = await AuraSquadBuilder().build()
    squad = await app.squads.create_squad("Launch", "Ship it", "user-1")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from aurasquad.core.protocols import TextLLMClient
from aurasquad.infra.chain import ChainClient, ChainSettings
from aurasquad.infra.config import AuraSquadConfig
from aurasquad.infra.kv_store import KVStore, create_kv_store
from aurasquad.infra.llm_client import ClaudeTextClient
from aurasquad.services.advisor import SquadAdvisor
from aurasquad.services.analytics import AnalyticsService
from aurasquad.services.query_processor import QueryProcessor
from aurasquad.services.squad_service import SquadService

logger = logging.getLogger(__name__)


@dataclass
class AuraSquad:
    """The assembled services. ``close()`` releases the store connection."""

    config: AuraSquadConfig
    store: KVStore
    analytics: AnalyticsService
    squads: SquadService
    advisor: SquadAdvisor
    chain: ChainClient
    query_processor: Optional[QueryProcessor] = None

    async def close(self) -> None:
        await self.store.close()


class AuraSquadBuilder:
    """Fluent builder for AuraSquad."""

    def __init__(self) -> None:
        self._config: AuraSquadConfig | None = None
        self._store: KVStore | None = None
        self._llm_client: TextLLMClient | None = None
        self._chain_client: ChainClient | None = None

    def with_config(self, config: AuraSquadConfig) -> AuraSquadBuilder:
        self._config = config
        return self

    def with_store(self, store: KVStore) -> AuraSquadBuilder:
        self._store = store
        return self

    def with_llm_client(self, client: TextLLMClient) -> AuraSquadBuilder:
        self._llm_client = client
        return self

    def with_chain_client(self, client: ChainClient) -> AuraSquadBuilder:
        self._chain_client = client
        return self

    def _make_llm_client(self, config: AuraSquadConfig) -> Optional[TextLLMClient]:
        if self._llm_client is not None:
            return self._llm_client
        api_keys = config.get_api_keys()
        if not api_keys:
            logger.warning("No Anthropic API key configured; query processing disabled")
            return None
        return ClaudeTextClient(
            api_key=api_keys,
            model=config.default_model,
            max_tokens=config.max_tokens,
            base_url=config.get_base_url(),
        )

    async def build(self) -> AuraSquad:
        """
        Build the service graph.

        Raises:
            ConfigError: invalid store configuration.
            StorageError: a forced Redis store could not connect.
        """
        config = self._config or AuraSquadConfig()
        store = self._store or await create_kv_store(
            config.kv_store_type, config.redis_url, config.redis_key_prefix,
        )

        analytics = AnalyticsService(store, window_days=config.analytics_window_days)
        squads = SquadService(store, analytics, chat_history_limit=config.chat_history_limit)

        llm = self._make_llm_client(config)
        query_processor = None
        if llm is not None:
            query_processor = QueryProcessor(
                llm,
                analytics,
                max_retries=config.llm_max_retries,
                retry_delay=config.llm_retry_delay_seconds,
            )

        chain = self._chain_client or ChainClient(
            ChainSettings.from_config(config),
            signer_private_key=config.chain_signer_private_key or None,
        )

        logger.info("AuraSquad built: store=%s llm=%s chain=%s",
                    store.store_type, "on" if llm else "off", config.chain_name)
        return AuraSquad(
            config=config,
            store=store,
            analytics=analytics,
            squads=squads,
            advisor=SquadAdvisor(squads),
            chain=chain,
            query_processor=query_processor,
        )
