"""
Core data models for squads, members, contributions and chat.

These are the entities persisted by the squad service. Each model maps to
and from the JSON stored in the key-value backend via to_dict()/from_dict().
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


# ============ ID / Time ============

def generate_id(prefix: str = "") -> str:
    """Generate a unique ID with optional prefix."""
    uid = uuid.uuid4().hex
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, assuming UTC when no offset is present."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ============ Enums ============

class SquadStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    COMPLETED = "completed"


class MemberRole(str, Enum):
    LEADER = "leader"
    ASSISTANT = "assistant"
    CONTRIBUTOR = "contributor"


class ContributionType(str, Enum):
    MESSAGE = "message"
    SOLUTION = "solution"
    REVIEW = "review"
    EDIT = "edit"


# Default earnings share (percent) by role at join time.
DEFAULT_EARNINGS_SHARE: dict[MemberRole, int] = {
    MemberRole.LEADER: 40,
    MemberRole.ASSISTANT: 30,
    MemberRole.CONTRIBUTOR: 20,
}


# ============ Squad ============

@dataclass
class SquadMember:
    """A user's seat in a squad."""
    user_id: str
    role: MemberRole
    joined_at: str
    earnings_share: int
    contribution_score: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "role": self.role.value,
            "joined_at": self.joined_at,
            "contribution_score": self.contribution_score,
            "earnings_share": self.earnings_share,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SquadMember:
        return cls(
            user_id=data["user_id"],
            role=MemberRole(data["role"]),
            joined_at=data["joined_at"],
            contribution_score=data.get("contribution_score", 0),
            earnings_share=data.get("earnings_share", 0),
        )


@dataclass
class Squad:
    """
    A team of users working toward a goal.

    The leader is always present in ``members`` with role LEADER and is
    never removed while the squad exists.
    """
    id: str
    name: str
    description: str
    leader: str
    created_at: str
    updated_at: str
    members: list[SquadMember] = field(default_factory=list)
    status: SquadStatus = SquadStatus.ACTIVE
    tags: list[str] = field(default_factory=list)
    avatar_url: Optional[str] = None
    total_earnings: float = 0
    task_count: int = 0
    rating: float = 0  # 0-5 stars

    def get_member(self, user_id: str) -> Optional[SquadMember]:
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    @property
    def total_share(self) -> int:
        return sum(m.earnings_share for m in self.members)

    @property
    def total_contribution_score(self) -> int:
        return sum(m.contribution_score for m in self.members)

    def role_counts(self) -> dict[MemberRole, int]:
        counts = {role: 0 for role in MemberRole}
        for member in self.members:
            counts[member.role] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "leader": self.leader,
            "members": [m.to_dict() for m in self.members],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "status": self.status.value,
            "tags": list(self.tags),
            "avatar_url": self.avatar_url,
            "total_earnings": self.total_earnings,
            "task_count": self.task_count,
            "rating": self.rating,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Squad:
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            leader=data["leader"],
            members=[SquadMember.from_dict(m) for m in data.get("members", [])],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            status=SquadStatus(data.get("status", SquadStatus.ACTIVE.value)),
            tags=list(data.get("tags", [])),
            avatar_url=data.get("avatar_url"),
            total_earnings=data.get("total_earnings", 0),
            task_count=data.get("task_count", 0),
            rating=data.get("rating", 0),
        )


# ============ Contributions ============

@dataclass
class ContributionEntry:
    """One logged unit of work. Append-only; never mutated once stored."""
    squad_id: str
    user_id: str
    type: ContributionType
    points: int
    timestamp: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "squad_id": self.squad_id,
            "user_id": self.user_id,
            "type": self.type.value,
            "points": self.points,
            "timestamp": self.timestamp,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContributionEntry:
        return cls(
            squad_id=data["squad_id"],
            user_id=data["user_id"],
            type=ContributionType(data["type"]),
            points=data["points"],
            timestamp=data["timestamp"],
            description=data.get("description", ""),
        )


# ============ Chat ============

@dataclass
class ChatMessage:
    """A message in a squad's chat. ``reactions`` maps emoji -> reacting user ids."""
    message_id: str
    squad_id: str
    user_id: str
    user_name: str
    content: str
    timestamp: str
    reactions: dict[str, list[str]] = field(default_factory=dict)
    edited: bool = False
    edited_at: Optional[str] = None

    def add_reaction(self, emoji: str, user_id: str) -> bool:
        """Record a reaction. Returns False if this user already reacted with this emoji."""
        users = self.reactions.setdefault(emoji, [])
        if user_id in users:
            return False
        users.append(user_id)
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "message_id": self.message_id,
            "squad_id": self.squad_id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "content": self.content,
            "reactions": {emoji: list(users) for emoji, users in self.reactions.items()},
            "timestamp": self.timestamp,
            "edited": self.edited,
            "edited_at": self.edited_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatMessage:
        return cls(
            message_id=data["message_id"],
            squad_id=data["squad_id"],
            user_id=data["user_id"],
            user_name=data.get("user_name", ""),
            content=data.get("content", ""),
            reactions={k: list(v) for k, v in data.get("reactions", {}).items()},
            timestamp=data["timestamp"],
            edited=data.get("edited", False),
            edited_at=data.get("edited_at"),
        )
