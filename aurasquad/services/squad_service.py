"""
SquadService — squad, membership, contribution and chat state.

The only writer of squad entities. Every precondition is checked before
the first write, so a failed call leaves stored state untouched. Mutations
of one squad record are serialized with a per-squad asyncio.Lock; this
covers one process only (see DESIGN.md).
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from datetime import datetime
from typing import Callable, Optional

from aurasquad.core import keys
from aurasquad.core.errors import MessageNotFoundError, SquadNotFoundError, ValidationError
from aurasquad.core.models import (
    DEFAULT_EARNINGS_SHARE,
    ChatMessage,
    ContributionEntry,
    ContributionType,
    MemberRole,
    Squad,
    SquadMember,
    SquadStatus,
    generate_id,
    utc_now,
)
from aurasquad.core.protocols import JSONStore
from aurasquad.scoring.rewards import compute_member_rewards, rebalanced_shares

from .analytics import AnalyticsService

logger = logging.getLogger(__name__)

MESSAGE_POINTS = 1
MESSAGE_PREVIEW_CHARS = 30


class SquadService:
    def __init__(
        self,
        store: JSONStore,
        analytics: Optional[AnalyticsService] = None,
        chat_history_limit: int = 50,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._analytics = analytics
        self._chat_history_limit = chat_history_limit
        self._clock = clock
        # entries live only while some coroutine holds or awaits the lock
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    def _lock(self, squad_id: str) -> asyncio.Lock:
        lock = self._locks.get(squad_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[squad_id] = lock
        return lock

    def _now(self) -> str:
        return self._clock().isoformat()

    async def _save(self, squad: Squad) -> None:
        await self._store.put_json(keys.squad(squad.id), squad.to_dict())

    async def _append_index(self, key: str, squad_id: str) -> None:
        ids = await self._store.get_json(key) or []
        if squad_id not in ids:
            ids.append(squad_id)
            await self._store.put_json(key, ids)

    async def _track(self, user_id: str) -> None:
        if self._analytics is not None:
            await self._analytics.track_user(user_id)

    # ============ Squads ============

    async def create_squad(
        self,
        name: str,
        description: str,
        leader_id: str,
        tags: Optional[list[str]] = None,
    ) -> Squad:
        now = self._now()
        squad = Squad(
            id=generate_id(),
            name=name,
            description=description,
            leader=leader_id,
            members=[
                SquadMember(
                    user_id=leader_id,
                    role=MemberRole.LEADER,
                    joined_at=now,
                    earnings_share=DEFAULT_EARNINGS_SHARE[MemberRole.LEADER],
                ),
            ],
            created_at=now,
            updated_at=now,
            status=SquadStatus.ACTIVE,
            tags=list(tags or []),
        )
        await self._save(squad)
        await self._append_index(keys.squad_list(leader_id), squad.id)
        await self._track(leader_id)
        logger.info("Squad created: %s (%r) leader=%s", squad.id, name, leader_id)
        return squad

    async def get_squad(self, squad_id: str) -> Optional[Squad]:
        data = await self._store.get_json(keys.squad(squad_id))
        return Squad.from_dict(data) if data else None

    async def require_squad(self, squad_id: str) -> Squad:
        squad = await self.get_squad(squad_id)
        if squad is None:
            raise SquadNotFoundError(squad_id)
        return squad

    async def joined_squad_ids(self, user_id: str) -> list[str]:
        return await self._store.get_json(keys.squad_member(user_id)) or []

    async def list_squads_for_user(self, user_id: str) -> list[Squad]:
        """Squads the user leads, then squads the user joined, without duplicates."""
        led = await self._store.get_json(keys.squad_list(user_id)) or []
        joined = await self._store.get_json(keys.squad_member(user_id)) or []
        squads: list[Squad] = []
        seen: set[str] = set()
        for squad_id in [*led, *joined]:
            if squad_id in seen:
                continue
            seen.add(squad_id)
            squad = await self.get_squad(squad_id)
            if squad is not None:
                squads.append(squad)
        return squads

    # ============ Membership ============

    @staticmethod
    def _rebalance(squad: Squad) -> None:
        shares = rebalanced_shares([m.earnings_share for m in squad.members])
        for member, share in zip(squad.members, shares):
            member.earnings_share = share

    async def add_member(
        self,
        squad_id: str,
        user_id: str,
        role: MemberRole | str = MemberRole.CONTRIBUTOR,
    ) -> Squad:
        try:
            role = MemberRole(role)
        except ValueError as e:
            raise ValidationError(f"Unknown role: {role}") from e
        if role == MemberRole.LEADER:
            raise ValidationError("A squad has exactly one leader; join as assistant or contributor")

        async with self._lock(squad_id):
            squad = await self.require_squad(squad_id)
            if squad.get_member(user_id) is not None:
                raise ValidationError(f"User {user_id} is already a member of this squad")

            now = self._now()
            squad.members.append(SquadMember(
                user_id=user_id,
                role=role,
                joined_at=now,
                earnings_share=DEFAULT_EARNINGS_SHARE[role],
            ))
            squad.updated_at = now
            self._rebalance(squad)
            await self._save(squad)

        await self._append_index(keys.squad_member(user_id), squad_id)
        await self._track(user_id)
        logger.info("Member %s joined squad %s as %s", user_id, squad_id, role.value)
        return squad

    async def remove_member(self, squad_id: str, user_id: str) -> Squad:
        async with self._lock(squad_id):
            squad = await self.require_squad(squad_id)
            if squad.leader == user_id:
                raise ValidationError("Cannot remove the squad leader")
            if squad.get_member(user_id) is None:
                raise ValidationError(f"User {user_id} is not a member of this squad")

            squad.members = [m for m in squad.members if m.user_id != user_id]
            squad.updated_at = self._now()
            self._rebalance(squad)
            await self._save(squad)

        index_key = keys.squad_member(user_id)
        remaining = [sid for sid in await self._store.get_json(index_key) or [] if sid != squad_id]
        if remaining:
            await self._store.put_json(index_key, remaining)
        else:
            await self._store.delete(index_key)
        logger.info("Member %s left squad %s", user_id, squad_id)
        return squad

    # ============ Contributions ============

    async def log_contribution(
        self,
        squad_id: str,
        user_id: str,
        contribution_type: ContributionType | str,
        points: int,
        description: str = "",
    ) -> ContributionEntry:
        try:
            contribution_type = ContributionType(contribution_type)
        except ValueError as e:
            raise ValidationError(f"Unknown contribution type: {contribution_type}") from e
        if points < 0:
            raise ValidationError("Contribution points cannot be negative")

        async with self._lock(squad_id):
            squad = await self.require_squad(squad_id)
            member = squad.get_member(user_id)
            if member is None:
                raise ValidationError(f"User {user_id} is not a member of this squad")
            entry = await self._append_contribution(
                squad, member, contribution_type, points, description,
            )

        logger.debug("Contribution %s +%d by %s in %s", contribution_type.value, points, user_id, squad_id)
        return entry

    async def _append_contribution(
        self,
        squad: Squad,
        member: SquadMember,
        contribution_type: ContributionType,
        points: int,
        description: str,
    ) -> ContributionEntry:
        """Write the log entry and the member's new score. Caller holds the squad lock."""
        now = self._now()
        entry = ContributionEntry(
            squad_id=squad.id,
            user_id=member.user_id,
            type=contribution_type,
            points=points,
            timestamp=now,
            description=description,
        )
        log_key = keys.contributions(squad.id, member.user_id)
        log = await self._store.get_json(log_key) or []
        log.append(entry.to_dict())
        await self._store.put_json(log_key, log)

        member.contribution_score += points
        squad.updated_at = now
        await self._save(squad)
        return entry

    async def get_contributions(self, squad_id: str, user_id: str) -> list[ContributionEntry]:
        log = await self._store.get_json(keys.contributions(squad_id, user_id)) or []
        return [ContributionEntry.from_dict(e) for e in log]

    async def get_squad_contributions(self, squad: Squad) -> dict[str, list[ContributionEntry]]:
        return {
            m.user_id: await self.get_contributions(squad.id, m.user_id)
            for m in squad.members
        }

    async def calculate_rewards(self, squad_id: str, total_amount: float) -> dict[str, int]:
        squad = await self.require_squad(squad_id)
        return compute_member_rewards(squad, total_amount)

    # ============ Chat ============

    async def add_chat_message(
        self,
        squad_id: str,
        user_id: str,
        user_name: str,
        content: str,
    ) -> ChatMessage:
        async with self._lock(squad_id):
            squad = await self.require_squad(squad_id)
            member = squad.get_member(user_id)
            if member is None:
                raise ValidationError(f"User {user_id} is not a member of this squad")

            message = ChatMessage(
                message_id=generate_id(),
                squad_id=squad_id,
                user_id=user_id,
                user_name=user_name,
                content=content,
                timestamp=self._now(),
            )
            await self._store.put_json(keys.chat_message(message.message_id), message.to_dict())

            index_key = keys.squad_chat(squad_id)
            message_ids = await self._store.get_json(index_key) or []
            message_ids.append(message.message_id)
            await self._store.put_json(index_key, message_ids)

            await self._append_contribution(
                squad, member, ContributionType.MESSAGE, MESSAGE_POINTS,
                f"Message: {content[:MESSAGE_PREVIEW_CHARS]}",
            )
        return message

    async def get_squad_chat(self, squad_id: str, limit: Optional[int] = None) -> list[ChatMessage]:
        """The most recent ``limit`` messages, oldest first."""
        limit = self._chat_history_limit if limit is None else limit
        if limit <= 0:
            return []
        message_ids = await self._store.get_json(keys.squad_chat(squad_id)) or []
        messages = []
        for message_id in message_ids[-limit:]:
            data = await self._store.get_json(keys.chat_message(message_id))
            if data:
                messages.append(ChatMessage.from_dict(data))
        return messages

    async def add_reaction(self, message_id: str, emoji: str, user_id: str) -> ChatMessage:
        key = keys.chat_message(message_id)
        data = await self._store.get_json(key)
        if not data:
            raise MessageNotFoundError(message_id)
        async with self._lock(data["squad_id"]):
            message = ChatMessage.from_dict(await self._store.get_json(key))
            if message.add_reaction(emoji, user_id):
                await self._store.put_json(key, message.to_dict())
        return message
