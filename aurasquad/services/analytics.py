"""
AnalyticsService — daily counter buckets and rolled-up metrics.

One query bucket and one token bucket per calendar day (UTC). Metrics are
aggregated on read over the trailing window (30 days by default); buckets
expire a day after they leave the window. Unique users come from a single
"last seen" map with no expiry.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from aurasquad.core import keys
from aurasquad.core.errors import ValidationError
from aurasquad.core.models import utc_now
from aurasquad.core.protocols import JSONStore
from aurasquad.scoring.rewards import round_half_up

logger = logging.getLogger(__name__)

TOP_CATEGORY_LIMIT = 5
RETURNING_USER_RATIO = 0.6
NEW_USER_RATIO = 0.25
SECONDS_PER_DAY = 86400


class TokenFlow(str, Enum):
    EARN = "earn"
    SPEND = "spend"


@dataclass
class CategoryCount:
    category: str
    count: int


@dataclass
class TrendPoint:
    day: str
    count: int


@dataclass
class UserEngagement:
    active_users: int = 0
    returning_users: int = 0
    new_users: int = 0


@dataclass
class AnalyticsMetrics:
    total_users: int = 0
    total_queries: int = 0
    total_tokens_earned: float = 0
    total_tokens_spent: float = 0
    avg_tokens_per_user: int = 0
    top_categories: list[CategoryCount] = field(default_factory=list)
    query_trend: list[TrendPoint] = field(default_factory=list)
    user_engagement: UserEngagement = field(default_factory=UserEngagement)


class AnalyticsService:
    def __init__(self, store: JSONStore, window_days: int = 30):
        self._store = store
        self._window_days = window_days
        self._bucket_ttl = (window_days + 1) * SECONDS_PER_DAY
        self._lock = asyncio.Lock()

    @staticmethod
    def _day(today: Optional[date]) -> str:
        return (today or utc_now().date()).isoformat()

    async def record_query(self, user_id: str, category: str, today: Optional[date] = None) -> None:
        key = keys.analytics_queries(self._day(today))
        async with self._lock:
            data = await self._store.get_json(key) or {"count": 0, "by_category": {}}
            data["count"] = data.get("count", 0) + 1
            by_category = data.setdefault("by_category", {})
            by_category[category] = by_category.get(category, 0) + 1
            await self._store.put_json(key, data, ttl_seconds=self._bucket_ttl)
        logger.debug("Query recorded: user=%s category=%s", user_id, category)

    async def record_token_transaction(
        self,
        amount: float,
        flow: TokenFlow | str,
        today: Optional[date] = None,
    ) -> None:
        try:
            flow = TokenFlow(flow)
        except ValueError as e:
            raise ValidationError(f"Unknown token flow: {flow}") from e
        if amount < 0:
            raise ValidationError("Token amount cannot be negative")

        key = keys.analytics_tokens(self._day(today))
        field_name = "earned" if flow == TokenFlow.EARN else "spent"
        async with self._lock:
            data = await self._store.get_json(key) or {"earned": 0, "spent": 0}
            data[field_name] = data.get(field_name, 0) + amount
            await self._store.put_json(key, data, ttl_seconds=self._bucket_ttl)

    async def track_user(self, user_id: str, now: Optional[datetime] = None) -> None:
        async with self._lock:
            users = await self._store.get_json(keys.ANALYTICS_ACTIVE_USERS) or {}
            users[user_id] = (now or utc_now()).isoformat()
            await self._store.put_json(keys.ANALYTICS_ACTIVE_USERS, users)

    async def get_metrics(self, today: Optional[date] = None) -> AnalyticsMetrics:
        today = today or utc_now().date()
        # Most recent day first; the trend is reversed at the end.
        days = [(today - timedelta(days=i)).isoformat() for i in range(self._window_days)]

        total_queries = 0
        earned: float = 0
        spent: float = 0
        categories: dict[str, int] = {}
        trend: list[TrendPoint] = []

        for day in days:
            queries = await self._store.get_json(keys.analytics_queries(day))
            if queries:
                count = queries.get("count", 0)
                total_queries += count
                trend.append(TrendPoint(day=day, count=count))
                for category, n in queries.get("by_category", {}).items():
                    categories[category] = categories.get(category, 0) + n

            tokens = await self._store.get_json(keys.analytics_tokens(day))
            if tokens:
                earned += tokens.get("earned", 0)
                spent += tokens.get("spent", 0)

        users = await self._store.get_json(keys.ANALYTICS_ACTIVE_USERS) or {}
        user_count = len(users)

        top = sorted(
            (CategoryCount(category=c, count=n) for c, n in categories.items()),
            key=lambda c: c.count,
            reverse=True,
        )[:TOP_CATEGORY_LIMIT]

        return AnalyticsMetrics(
            total_users=user_count,
            total_queries=total_queries,
            total_tokens_earned=earned,
            total_tokens_spent=spent,
            avg_tokens_per_user=round_half_up(earned / user_count) if user_count else 0,
            top_categories=top,
            query_trend=list(reversed(trend)),
            user_engagement=UserEngagement(
                active_users=user_count,
                returning_users=int(user_count * RETURNING_USER_RATIO),
                new_users=int(user_count * NEW_USER_RATIO),
            ),
        )
