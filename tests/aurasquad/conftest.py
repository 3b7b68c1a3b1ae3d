"""
Shared test fixtures for Aura Squad tests.

Provides a scripted LLM client, an in-memory store, a fixed clock and
factories for squads and contributions.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from aurasquad.core.models import (
    ContributionEntry,
    ContributionType,
    MemberRole,
    Squad,
    SquadMember,
)
from aurasquad.infra.kv_memory import MemoryKVStore
from aurasquad.services.analytics import AnalyticsService
from aurasquad.services.squad_service import SquadService

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


# ============ Mock LLM Client ============

class MockLLMClient:
    """
    Scripted TextLLMClient.

    Responses are consumed in order; an Exception instance in the script
    is raised instead of returned. Once the script runs out, the default
    response is returned.
    """

    def __init__(self, default_response: str = "Mock response"):
        self._script: list[Any] = []
        self._default_response = default_response
        self.calls: list[tuple[str, Optional[str]]] = []

    def add_response(self, response: Any) -> None:
        self._script.append(response)

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        self.calls.append((prompt, system_prompt))
        if self._script:
            item = self._script.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        return self._default_response


# ============ Fake Clock ============

class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


# ============ Factories ============

def make_squad(
    members: list[tuple[str, MemberRole, int, int]],
    created_at: datetime = FIXED_NOW,
    squad_id: str = "squad_test",
) -> Squad:
    """Build a squad from (user_id, role, earnings_share, contribution_score) tuples."""
    leader = next((uid for uid, role, _, _ in members if role == MemberRole.LEADER), "")
    ts = created_at.isoformat()
    return Squad(
        id=squad_id,
        name="Test Squad",
        description="A squad for tests",
        leader=leader,
        created_at=ts,
        updated_at=ts,
        members=[
            SquadMember(
                user_id=uid, role=role, joined_at=ts,
                earnings_share=share, contribution_score=score,
            )
            for uid, role, share, score in members
        ],
    )


def make_entry(
    user_id: str,
    contribution_type: ContributionType = ContributionType.SOLUTION,
    points: int = 10,
    squad_id: str = "squad_test",
    description: str = "",
) -> ContributionEntry:
    return ContributionEntry(
        squad_id=squad_id,
        user_id=user_id,
        type=contribution_type,
        points=points,
        timestamp=FIXED_NOW.isoformat(),
        description=description,
    )


# ============ Fixtures ============

@pytest.fixture
def squad_factory():
    return make_squad


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def mock_llm() -> MockLLMClient:
    return MockLLMClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryKVStore:
    return MemoryKVStore()


@pytest.fixture
def analytics(store: MemoryKVStore) -> AnalyticsService:
    return AnalyticsService(store, window_days=30)


@pytest.fixture
def squad_service(store: MemoryKVStore, analytics: AnalyticsService, clock: FakeClock) -> SquadService:
    return SquadService(store, analytics, chat_history_limit=50, clock=clock)
