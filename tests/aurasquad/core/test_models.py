"""Tests for core data models."""

from __future__ import annotations

from datetime import timezone

from aurasquad.core.models import (
    ChatMessage,
    ContributionEntry,
    ContributionType,
    MemberRole,
    Squad,
    SquadMember,
    SquadStatus,
    generate_id,
    parse_timestamp,
)


class TestGenerateId:
    def test_unique(self):
        assert generate_id() != generate_id()

    def test_prefix(self):
        assert generate_id("squad").startswith("squad_")


class TestParseTimestamp:
    def test_zulu_suffix(self):
        parsed = parse_timestamp("2025-06-01T12:00:00Z")
        assert parsed.tzinfo is not None
        assert parsed.hour == 12

    def test_naive_assumed_utc(self):
        parsed = parse_timestamp("2025-06-01T12:00:00")
        assert parsed.tzinfo == timezone.utc


class TestSquad:
    def test_member_helpers(self, squad_factory):
        squad = squad_factory([
            ("alice", MemberRole.LEADER, 40, 10),
            ("bob", MemberRole.CONTRIBUTOR, 20, 5),
        ])
        assert squad.leader == "alice"
        assert squad.get_member("bob").role == MemberRole.CONTRIBUTOR
        assert squad.get_member("nobody") is None
        assert squad.total_share == 60
        assert squad.total_contribution_score == 15
        assert squad.role_counts() == {
            MemberRole.LEADER: 1,
            MemberRole.ASSISTANT: 0,
            MemberRole.CONTRIBUTOR: 1,
        }

    def test_dict_roundtrip(self, squad_factory):
        squad = squad_factory([("alice", MemberRole.LEADER, 40, 3)])
        squad.tags = ["fitness"]
        data = squad.to_dict()
        assert data["status"] == "active"
        assert data["members"][0]["role"] == "leader"
        assert Squad.from_dict(data) == squad

    def test_from_dict_defaults(self):
        squad = Squad.from_dict({
            "id": "s1",
            "name": "Minimal",
            "leader": "alice",
            "created_at": "2025-06-01T00:00:00+00:00",
            "updated_at": "2025-06-01T00:00:00+00:00",
        })
        assert squad.members == []
        assert squad.status == SquadStatus.ACTIVE
        assert squad.tags == []
        assert squad.rating == 0


class TestSquadMember:
    def test_contribution_score_defaults_to_zero(self):
        member = SquadMember(
            user_id="bob", role=MemberRole.ASSISTANT,
            joined_at="2025-06-01T00:00:00+00:00", earnings_share=30,
        )
        assert member.contribution_score == 0
        assert SquadMember.from_dict(member.to_dict()) == member


class TestContributionEntry:
    def test_type_serialized_as_value(self, entry_factory):
        entry = entry_factory("alice", ContributionType.REVIEW, points=7)
        data = entry.to_dict()
        assert data["type"] == "review"
        assert ContributionEntry.from_dict(data) == entry


class TestChatMessage:
    def _message(self) -> ChatMessage:
        return ChatMessage(
            message_id="m1", squad_id="s1", user_id="alice", user_name="Alice",
            content="hi", timestamp="2025-06-01T00:00:00+00:00",
        )

    def test_reaction_recorded_once_per_user(self):
        message = self._message()
        assert message.add_reaction("👍", "bob") is True
        assert message.add_reaction("👍", "bob") is False
        assert message.add_reaction("👍", "carol") is True
        assert message.reactions == {"👍": ["bob", "carol"]}

    def test_roundtrip_copies_reactions(self):
        message = self._message()
        message.add_reaction("🔥", "bob")
        restored = ChatMessage.from_dict(message.to_dict())
        assert restored == message
        restored.add_reaction("🔥", "carol")
        assert message.reactions == {"🔥": ["bob"]}
