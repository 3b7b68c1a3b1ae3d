"""Per-contribution effort/impact analysis and reward multiplier."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from aurasquad.core.models import ContributionEntry, ContributionType

MAX_ANALYSIS_SCORE = 100
MAX_CONTRIBUTION_MULTIPLIER = 2.5


class Level(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


LEVEL_WEIGHT: dict[Level, float] = {
    Level.LOW: 0.5,
    Level.MEDIUM: 0.75,
    Level.HIGH: 1.0,
}

IMPACT_BONUS: dict[Level, float] = {
    Level.LOW: 0.0,
    Level.MEDIUM: 0.15,
    Level.HIGH: 0.3,
}


@dataclass
class ContributionAnalysis:
    user_id: str
    squad_id: str
    analysis_score: float  # 0-100
    quality_assessment: str
    effort_level: Level
    impact: Level
    recommended_reward_multiplier: float
    feedback: str


def assess_effort(points: int) -> Level:
    if points >= 10:
        return Level.HIGH
    if points >= 5:
        return Level.MEDIUM
    return Level.LOW


def assess_impact(contribution_type: ContributionType) -> Level:
    if contribution_type == ContributionType.SOLUTION:
        return Level.HIGH
    if contribution_type == ContributionType.REVIEW:
        return Level.MEDIUM
    return Level.LOW


def contribution_multiplier(analysis_score: float, impact: Level) -> float:
    multiplier = 1.0 + (analysis_score / 100) * 0.5 + IMPACT_BONUS[impact]
    return min(MAX_CONTRIBUTION_MULTIPLIER, multiplier)


def _quality_assessment(score: float) -> str:
    if score > 85:
        return "Exceptional - among the best"
    if score > 70:
        return "Good - meets expectations"
    if score > 50:
        return "Fair - acceptable quality"
    return "Needs improvement"


def _feedback(contribution: ContributionEntry, score: float) -> str:
    feedback = f"Great {contribution.type.value}! "
    if score > 80:
        return feedback + "Excellent quality work - keep it up!"
    if score > 60:
        return feedback + "Good contribution - some room for improvement"
    return feedback + "Solid effort - consider taking on more challenging tasks"


def analyze_contribution(contribution: ContributionEntry) -> ContributionAnalysis:
    effort = assess_effort(contribution.points)
    impact = assess_impact(contribution.type)

    score = 50.0
    score += LEVEL_WEIGHT[effort] * 30
    score += LEVEL_WEIGHT[impact] * 40
    score += (contribution.points / 10) * 20
    score = min(MAX_ANALYSIS_SCORE, score)

    return ContributionAnalysis(
        user_id=contribution.user_id,
        squad_id=contribution.squad_id,
        analysis_score=score,
        quality_assessment=_quality_assessment(score),
        effort_level=effort,
        impact=impact,
        recommended_reward_multiplier=contribution_multiplier(score, impact),
        feedback=_feedback(contribution, score),
    )
