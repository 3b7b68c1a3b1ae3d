"""
Reward arithmetic — earnings-share rebalancing, contribution-weighted
payouts and score-proportional pool redistribution.

Pure functions: inputs are entity snapshots, outputs are new values.
Nothing here reads the clock or touches storage.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from aurasquad.core.models import ContributionEntry, Squad

MAX_TOTAL_SHARE = 100
MAX_REWARD_MULTIPLIER = 2.0
CONSISTENCY_THRESHOLD = 5    # more contributions than this earn the bonus
CONSISTENCY_BONUS = 1.15


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves toward +infinity."""
    return int(math.floor(value + 0.5))


def rebalanced_shares(shares: Sequence[int]) -> list[int]:
    """
    Scale shares down proportionally when they sum past 100.

    Each scaled share is rounded; if rounding pushes the total back over
    100, the excess is trimmed one point at a time from the largest share.
    Totals at or under 100 are returned unchanged.
    """
    total = sum(shares)
    if total <= MAX_TOTAL_SHARE:
        return list(shares)

    scale = MAX_TOTAL_SHARE / total
    result = [round_half_up(s * scale) for s in shares]
    excess = sum(result) - MAX_TOTAL_SHARE
    while excess > 0:
        idx = max(range(len(result)), key=lambda i: result[i])
        result[idx] -= 1
        excess -= 1
    return result


def reward_multiplier(member_score: int, total_score: int) -> float:
    """1.0 plus up to 0.5 for the member's share of squad contribution, capped at 2."""
    if total_score <= 0:
        return 1.0
    return min(MAX_REWARD_MULTIPLIER, 1 + (member_score / total_score) * 0.5)


def compute_member_rewards(squad: Squad, total_amount: float) -> dict[str, int]:
    """Per-member payout: earnings-share base times contribution multiplier."""
    total_score = squad.total_contribution_score
    rewards: dict[str, int] = {}
    for member in squad.members:
        base = total_amount * member.earnings_share / 100
        multiplier = reward_multiplier(member.contribution_score, total_score)
        rewards[member.user_id] = round_half_up(base * multiplier)
    return rewards


@dataclass
class RewardOptimization:
    original_distribution: dict[str, float] = field(default_factory=dict)
    optimized_distribution: dict[str, int] = field(default_factory=dict)
    improvements: dict[str, float] = field(default_factory=dict)  # user -> percent
    reasoning: str = ""
    total_efficiency_gain: int = 0


def member_activity_score(entries: Sequence[ContributionEntry]) -> float:
    score = float(sum(e.points for e in entries))
    if len(entries) > CONSISTENCY_THRESHOLD:
        score *= CONSISTENCY_BONUS
    return score


def optimize_reward_distribution(
    squad: Squad,
    total_reward: int,
    contributions: Mapping[str, Sequence[ContributionEntry]],
) -> RewardOptimization:
    """
    Redistribute ``total_reward`` in proportion to logged contribution points.

    The optimized values always sum to exactly ``total_reward``: a positive
    rounding remainder goes to the top-scoring member, an overshoot is taken
    back one unit at a time from the largest allocation so no payout drops
    below zero. Improvements are relative to the earnings-share allocation;
    a member whose original allocation is zero reports 0.
    """
    original = {
        m.user_id: total_reward * m.earnings_share / 100 for m in squad.members
    }
    scores = {
        m.user_id: member_activity_score(contributions.get(m.user_id, []))
        for m in squad.members
    }
    total_score = sum(scores.values())

    optimized: dict[str, int] = {}
    improvements: dict[str, float] = {}
    gain = 0.0

    for member in squad.members:
        uid = member.user_id
        if total_score > 0:
            optimized[uid] = round_half_up(total_reward * scores[uid] / total_score)
            if original[uid]:
                improvement = (optimized[uid] - original[uid]) / original[uid] * 100
            else:
                improvement = 0.0
            improvements[uid] = improvement
            gain += abs(improvement)
        else:
            optimized[uid] = round_half_up(original[uid])

    diff = total_reward - sum(optimized.values())
    if diff > 0 and squad.members:
        top = max(squad.members, key=lambda m: scores[m.user_id]).user_id
        optimized[top] += diff
    while diff < 0:
        uid = max(optimized, key=lambda u: optimized[u])
        if optimized[uid] <= 0:
            break
        optimized[uid] -= 1
        diff += 1

    entry_count = sum(len(v) for v in contributions.values())
    return RewardOptimization(
        original_distribution=original,
        optimized_distribution=optimized,
        improvements=improvements,
        reasoning=f"Optimized based on {len(contributions)} members' {entry_count} contributions",
        total_efficiency_gain=round_half_up(gain / len(squad.members)) if squad.members else 0,
    )
