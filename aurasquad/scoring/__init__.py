"""
Scoring & heuristics engine.

Pure, deterministic functions over entity snapshots. Nothing in this
package performs I/O or reads the clock; callers pass "now" explicitly.
"""

from .contribution import ContributionAnalysis, Level, analyze_contribution
from .health import (
    SquadHealthReport,
    analyze_squad_health,
    estimate_productivity,
    predict_squad_success,
)
from .matching import (
    CANDIDATE_POOL,
    Candidate,
    ExperienceLevel,
    MemberMatch,
    SquadNeeds,
    find_member_matches,
)
from .profile import MemberProfile, score_member_profile
from .rewards import (
    RewardOptimization,
    compute_member_rewards,
    optimize_reward_distribution,
    rebalanced_shares,
    round_half_up,
)

__all__ = [
    "ContributionAnalysis", "Level", "analyze_contribution",
    "SquadHealthReport", "analyze_squad_health", "estimate_productivity",
    "predict_squad_success",
    "CANDIDATE_POOL", "Candidate", "ExperienceLevel", "MemberMatch",
    "SquadNeeds", "find_member_matches",
    "MemberProfile", "score_member_profile",
    "RewardOptimization", "compute_member_rewards",
    "optimize_reward_distribution", "rebalanced_shares", "round_half_up",
]
