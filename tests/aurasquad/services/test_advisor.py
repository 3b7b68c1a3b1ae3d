"""Tests for SquadAdvisor."""

from __future__ import annotations

from datetime import timedelta

import pytest

from aurasquad.core.errors import SquadNotFoundError
from aurasquad.core.models import ContributionType, MemberRole
from aurasquad.scoring.matching import SquadNeeds
from aurasquad.services.advisor import SquadAdvisor


@pytest.fixture
def advisor(squad_service, clock) -> SquadAdvisor:
    return SquadAdvisor(squad_service, clock=clock)


class TestMemberProfile:
    @pytest.mark.asyncio
    async def test_collects_across_squads(self, advisor, squad_service):
        own = await squad_service.create_squad("Own", "", "alice")
        other = await squad_service.create_squad("Other", "", "bob")
        await squad_service.add_member(other.id, "alice")
        await squad_service.log_contribution(own.id, "alice", ContributionType.SOLUTION, 10)
        await squad_service.log_contribution(other.id, "alice", ContributionType.REVIEW, 4)

        profile = await advisor.analyze_member_profile("alice")

        assert profile.total_contributions == 2
        assert profile.skill_tags == ["problem-solving", "quality-assurance"]
        assert profile.joined_squads_count == 1
        assert profile.average_quality == 35.0

    @pytest.mark.asyncio
    async def test_unknown_user(self, advisor):
        profile = await advisor.analyze_member_profile("nobody")
        assert profile.total_contributions == 0
        assert profile.availability == 50


class TestSquadAnalysis:
    @pytest.mark.asyncio
    async def test_health_of_new_squad(self, advisor, squad_service):
        squad = await squad_service.create_squad("Solo", "", "alice")

        report = await advisor.analyze_squad_health(squad.id)

        assert report.squad_id == squad.id
        assert report.health_score == 65

    @pytest.mark.asyncio
    async def test_missing_squad(self, advisor):
        with pytest.raises(SquadNotFoundError):
            await advisor.analyze_squad_health("nope")
        with pytest.raises(SquadNotFoundError):
            await advisor.predict_success("nope")

    @pytest.mark.asyncio
    async def test_optimize_rewards_uses_logged_history(self, advisor, squad_service):
        squad = await squad_service.create_squad("Duo", "", "alice")
        await squad_service.add_member(squad.id, "bob")
        await squad_service.log_contribution(squad.id, "alice", "solution", 3)
        await squad_service.log_contribution(squad.id, "bob", "message", 1)

        result = await advisor.optimize_rewards(squad.id, 100)

        assert result.optimized_distribution == {"alice": 75, "bob": 25}
        assert result.original_distribution == {"alice": 40, "bob": 20}

    @pytest.mark.asyncio
    async def test_predict_success_ages_with_clock(self, advisor, squad_service, clock):
        squad = await squad_service.create_squad("Trio", "", "alice")
        await squad_service.add_member(squad.id, "bob", MemberRole.ASSISTANT)
        await squad_service.add_member(squad.id, "carol")

        fresh = await advisor.predict_success(squad.id)
        clock.advance(days=8)
        aged = await advisor.predict_success(squad.id)

        # 50 + 15 (size) + 15 (roles), nobody active yet
        assert fresh == 80.0
        assert aged == 90.0

    def test_analyze_contribution(self, advisor, entry_factory):
        analysis = advisor.analyze_contribution(entry_factory("alice", points=10))
        assert analysis.analysis_score == 100

    def test_find_member_matches(self, advisor):
        matches = advisor.find_member_matches(SquadNeeds(required_skills=["design"]))
        assert matches[0].user_id == "agent_specialist_001"
        assert all(m.match_score > 60 for m in matches)
