"""Tests for SquadService."""

from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio

from aurasquad.core import keys
from aurasquad.core.errors import MessageNotFoundError, SquadNotFoundError, ValidationError
from aurasquad.core.models import ContributionType, MemberRole


@pytest_asyncio.fixture
async def squad(squad_service):
    return await squad_service.create_squad("Launch", "Ship the MVP", "alice", tags=["business"])


class TestCreateSquad:
    @pytest.mark.asyncio
    async def test_leader_is_sole_member(self, squad_service, fixed_now):
        squad = await squad_service.create_squad("Launch", "Ship the MVP", "alice")

        assert squad.leader == "alice"
        assert len(squad.members) == 1
        leader = squad.members[0]
        assert leader.role == MemberRole.LEADER
        assert leader.earnings_share == 40
        assert leader.contribution_score == 0
        assert squad.created_at == fixed_now.isoformat()

    @pytest.mark.asyncio
    async def test_persisted_and_indexed(self, squad_service, store):
        squad = await squad_service.create_squad("Launch", "Ship", "alice")

        assert await squad_service.get_squad(squad.id) == squad
        assert await store.get_json(keys.squad_list("alice")) == [squad.id]

    @pytest.mark.asyncio
    async def test_second_squad_appends_to_leader_index(self, squad_service, store):
        first = await squad_service.create_squad("One", "", "alice")
        second = await squad_service.create_squad("Two", "", "alice")

        assert await store.get_json(keys.squad_list("alice")) == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_tracks_leader_as_active_user(self, squad_service, analytics):
        await squad_service.create_squad("Launch", "", "alice")

        metrics = await analytics.get_metrics()
        assert metrics.total_users == 1


class TestGetSquad:
    @pytest.mark.asyncio
    async def test_missing(self, squad_service):
        assert await squad_service.get_squad("nope") is None
        with pytest.raises(SquadNotFoundError, match="Squad nope not found"):
            await squad_service.require_squad("nope")


class TestMembership:
    @pytest.mark.asyncio
    async def test_add_member_with_role_share(self, squad_service, squad, store):
        updated = await squad_service.add_member(squad.id, "bob", MemberRole.ASSISTANT)

        bob = updated.get_member("bob")
        assert bob.role == MemberRole.ASSISTANT
        assert bob.earnings_share == 30
        assert await store.get_json(keys.squad_member("bob")) == [squad.id]

    @pytest.mark.asyncio
    async def test_default_role_contributor(self, squad_service, squad):
        updated = await squad_service.add_member(squad.id, "bob")
        assert updated.get_member("bob").earnings_share == 20

    @pytest.mark.asyncio
    async def test_shares_rebalanced_past_100(self, squad_service, squad):
        for user in ("b", "c", "d"):
            await squad_service.add_member(squad.id, user)
        updated = await squad_service.add_member(squad.id, "e")

        assert [m.earnings_share for m in updated.members] == [32, 17, 17, 17, 17]
        assert updated.total_share == 100

    @pytest.mark.asyncio
    async def test_share_sum_bounded_over_sequences(self, squad_service, squad):
        for i in range(8):
            role = MemberRole.ASSISTANT if i % 3 == 0 else MemberRole.CONTRIBUTOR
            updated = await squad_service.add_member(squad.id, f"user{i}", role)
            assert updated.total_share <= 100
        for i in range(0, 8, 2):
            updated = await squad_service.remove_member(squad.id, f"user{i}")
            assert updated.total_share <= 100

    @pytest.mark.asyncio
    async def test_duplicate_add_rejected_without_mutation(self, squad_service, squad):
        await squad_service.add_member(squad.id, "bob")
        before = await squad_service.get_squad(squad.id)

        with pytest.raises(ValidationError, match="already a member"):
            await squad_service.add_member(squad.id, "bob", MemberRole.ASSISTANT)

        assert await squad_service.get_squad(squad.id) == before

    @pytest.mark.asyncio
    async def test_leader_role_rejected(self, squad_service, squad):
        with pytest.raises(ValidationError):
            await squad_service.add_member(squad.id, "bob", MemberRole.LEADER)

    @pytest.mark.asyncio
    async def test_unknown_role_rejected(self, squad_service, squad):
        with pytest.raises(ValidationError, match="Unknown role"):
            await squad_service.add_member(squad.id, "bob", "overlord")

    @pytest.mark.asyncio
    async def test_add_to_missing_squad(self, squad_service):
        with pytest.raises(SquadNotFoundError):
            await squad_service.add_member("nope", "bob")

    @pytest.mark.asyncio
    async def test_remove_member(self, squad_service, squad, store):
        await squad_service.add_member(squad.id, "bob")

        updated = await squad_service.remove_member(squad.id, "bob")

        assert updated.get_member("bob") is None
        assert await store.get_json(keys.squad_member("bob")) is None

    @pytest.mark.asyncio
    async def test_leader_cannot_be_removed(self, squad_service, squad):
        before = await squad_service.get_squad(squad.id)

        with pytest.raises(ValidationError, match="leader"):
            await squad_service.remove_member(squad.id, "alice")

        assert await squad_service.get_squad(squad.id) == before

    @pytest.mark.asyncio
    async def test_remove_non_member(self, squad_service, squad):
        with pytest.raises(ValidationError, match="not a member"):
            await squad_service.remove_member(squad.id, "ghost")

    @pytest.mark.asyncio
    async def test_concurrent_adds_all_land(self, squad_service, squad):
        await asyncio.gather(*(
            squad_service.add_member(squad.id, f"user{i}") for i in range(6)
        ))

        stored = await squad_service.get_squad(squad.id)
        assert len(stored.members) == 7
        assert stored.total_share <= 100


class TestListSquads:
    @pytest.mark.asyncio
    async def test_led_then_joined(self, squad_service):
        led = await squad_service.create_squad("Mine", "", "alice")
        other = await squad_service.create_squad("Theirs", "", "bob")
        await squad_service.add_member(other.id, "alice")

        squads = await squad_service.list_squads_for_user("alice")

        assert [s.id for s in squads] == [led.id, other.id]
        assert await squad_service.joined_squad_ids("alice") == [other.id]

    @pytest.mark.asyncio
    async def test_unknown_user(self, squad_service):
        assert await squad_service.list_squads_for_user("nobody") == []


class TestContributions:
    @pytest.mark.asyncio
    async def test_log_updates_score_and_history(self, squad_service, squad):
        entry = await squad_service.log_contribution(
            squad.id, "alice", ContributionType.SOLUTION, 10, "Fixed the bug",
        )

        assert entry.points == 10
        stored = await squad_service.get_squad(squad.id)
        assert stored.get_member("alice").contribution_score == 10
        assert await squad_service.get_contributions(squad.id, "alice") == [entry]

    @pytest.mark.asyncio
    async def test_score_equals_sum_of_entries(self, squad_service, squad):
        for points in (3, 0, 7):
            await squad_service.log_contribution(squad.id, "alice", "review", points)

        stored = await squad_service.get_squad(squad.id)
        entries = await squad_service.get_contributions(squad.id, "alice")
        assert stored.get_member("alice").contribution_score == sum(e.points for e in entries) == 10

    @pytest.mark.asyncio
    async def test_negative_points_rejected(self, squad_service, squad):
        with pytest.raises(ValidationError):
            await squad_service.log_contribution(squad.id, "alice", "solution", -1)

    @pytest.mark.asyncio
    async def test_non_member_rejected(self, squad_service, squad):
        with pytest.raises(ValidationError):
            await squad_service.log_contribution(squad.id, "ghost", "solution", 5)
        assert await squad_service.get_contributions(squad.id, "ghost") == []

    @pytest.mark.asyncio
    async def test_unknown_type_rejected(self, squad_service, squad):
        with pytest.raises(ValidationError, match="Unknown contribution type"):
            await squad_service.log_contribution(squad.id, "alice", "bribe", 5)

    @pytest.mark.asyncio
    async def test_squad_contributions_keyed_by_member(self, squad_service, squad):
        await squad_service.add_member(squad.id, "bob")
        await squad_service.log_contribution(squad.id, "bob", "edit", 2)

        stored = await squad_service.require_squad(squad.id)
        history = await squad_service.get_squad_contributions(stored)

        assert set(history) == {"alice", "bob"}
        assert history["alice"] == []
        assert len(history["bob"]) == 1


class TestCalculateRewards:
    @pytest.mark.asyncio
    async def test_weighted_by_contribution(self, squad_service, squad):
        await squad_service.add_member(squad.id, "bob")
        await squad_service.log_contribution(squad.id, "bob", "solution", 10)

        assert await squad_service.calculate_rewards(squad.id, 1000) == {"alice": 400, "bob": 300}

    @pytest.mark.asyncio
    async def test_missing_squad(self, squad_service):
        with pytest.raises(SquadNotFoundError):
            await squad_service.calculate_rewards("nope", 100)


class TestChat:
    @pytest.mark.asyncio
    async def test_message_logged_as_contribution(self, squad_service, squad):
        message = await squad_service.add_chat_message(
            squad.id, "alice", "Alice", "Let's start with market research today",
        )

        assert message.reactions == {}
        entries = await squad_service.get_contributions(squad.id, "alice")
        assert len(entries) == 1
        assert entries[0].type == ContributionType.MESSAGE
        assert entries[0].points == 1
        assert entries[0].description == "Message: Let's start with market resear"

    @pytest.mark.asyncio
    async def test_history_oldest_first_and_limited(self, squad_service, squad):
        for i in range(5):
            await squad_service.add_chat_message(squad.id, "alice", "Alice", f"msg {i}")

        recent = await squad_service.get_squad_chat(squad.id, limit=3)

        assert [m.content for m in recent] == ["msg 2", "msg 3", "msg 4"]
        assert await squad_service.get_squad_chat(squad.id, limit=0) == []
        assert len(await squad_service.get_squad_chat(squad.id)) == 5

    @pytest.mark.asyncio
    async def test_non_member_cannot_post(self, squad_service, squad):
        with pytest.raises(ValidationError):
            await squad_service.add_chat_message(squad.id, "ghost", "Ghost", "boo")
        assert await squad_service.get_squad_chat(squad.id) == []

    @pytest.mark.asyncio
    async def test_missing_squad(self, squad_service):
        with pytest.raises(SquadNotFoundError):
            await squad_service.add_chat_message("nope", "alice", "Alice", "hi")

    @pytest.mark.asyncio
    async def test_reaction_idempotent(self, squad_service, squad):
        message = await squad_service.add_chat_message(squad.id, "alice", "Alice", "hi")

        await squad_service.add_reaction(message.message_id, "👍", "bob")
        updated = await squad_service.add_reaction(message.message_id, "👍", "bob")

        assert updated.reactions == {"👍": ["bob"]}
        stored = await squad_service.get_squad_chat(squad.id)
        assert stored[0].reactions == {"👍": ["bob"]}

    @pytest.mark.asyncio
    async def test_reaction_on_missing_message(self, squad_service):
        with pytest.raises(MessageNotFoundError):
            await squad_service.add_reaction("nope", "👍", "bob")

    @pytest.mark.asyncio
    async def test_reaction_locks_do_not_accumulate(self, squad_service, squad):
        for i in range(50):
            message = await squad_service.add_chat_message(squad.id, "alice", "Alice", f"msg {i}")
            await squad_service.add_reaction(message.message_id, "🔥", "alice")

        assert len(squad_service._locks) <= 1

    @pytest.mark.asyncio
    async def test_post_and_removal_stay_consistent(self, squad_service, squad):
        await squad_service.add_member(squad.id, "bob")

        await asyncio.gather(
            squad_service.add_chat_message(squad.id, "bob", "Bob", "hello"),
            squad_service.remove_member(squad.id, "bob"),
            return_exceptions=True,
        )

        posted = [m for m in await squad_service.get_squad_chat(squad.id) if m.user_id == "bob"]
        logged = await squad_service.get_contributions(squad.id, "bob")
        assert len(posted) == len(logged)
