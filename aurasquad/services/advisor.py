"""
SquadAdvisor — loads squad state and runs the scoring heuristics over it.

The scoring package stays pure; this class supplies the snapshots and the
current time.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from aurasquad.core.models import ContributionEntry, utc_now
from aurasquad.scoring import contribution, health, matching, profile, rewards

from .squad_service import SquadService

logger = logging.getLogger(__name__)


class SquadAdvisor:
    def __init__(self, squads: SquadService, clock: Callable[[], datetime] = utc_now):
        self._squads = squads
        self._clock = clock

    async def analyze_member_profile(self, user_id: str) -> profile.MemberProfile:
        """Profile a user from their contributions across every squad they belong to."""
        squads = await self._squads.list_squads_for_user(user_id)
        entries: list[ContributionEntry] = []
        for squad in squads:
            entries.extend(await self._squads.get_contributions(squad.id, user_id))

        joined = await self._squads.joined_squad_ids(user_id)
        result = profile.score_member_profile(
            user_id, entries, joined_squads_count=len(joined),
        )
        logger.debug("Profile for %s: %d contributions, role=%s",
                     user_id, result.total_contributions, result.recommended_role.value)
        return result

    async def analyze_squad_health(self, squad_id: str) -> health.SquadHealthReport:
        squad = await self._squads.require_squad(squad_id)
        return health.analyze_squad_health(squad)

    def analyze_contribution(self, entry: ContributionEntry) -> contribution.ContributionAnalysis:
        return contribution.analyze_contribution(entry)

    async def optimize_rewards(self, squad_id: str, total_reward: int) -> rewards.RewardOptimization:
        squad = await self._squads.require_squad(squad_id)
        history = await self._squads.get_squad_contributions(squad)
        return rewards.optimize_reward_distribution(squad, total_reward, history)

    async def predict_success(self, squad_id: str) -> float:
        squad = await self._squads.require_squad(squad_id)
        return health.predict_squad_success(squad, self._clock())

    def find_member_matches(
        self,
        needs: matching.SquadNeeds,
        candidates: Sequence[matching.Candidate] = matching.CANDIDATE_POOL,
    ) -> list[matching.MemberMatch]:
        return matching.find_member_matches(needs, candidates)
