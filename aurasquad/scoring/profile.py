"""Member profile scoring from a user's contribution history."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from aurasquad.core.models import ContributionEntry, ContributionType, MemberRole

DEFAULT_RELIABILITY = 75
DEFAULT_AVERAGE_EARNINGS = 100
NO_HISTORY_AVAILABILITY = 50

SKILL_BY_TYPE: dict[ContributionType, str] = {
    ContributionType.SOLUTION: "problem-solving",
    ContributionType.REVIEW: "quality-assurance",
    ContributionType.MESSAGE: "communication",
    ContributionType.EDIT: "editing",
}


@dataclass
class MemberProfile:
    user_id: str
    total_contributions: int
    average_quality: float  # 0-100
    skill_tags: list[str] = field(default_factory=list)
    availability: float = NO_HISTORY_AVAILABILITY  # 0-100
    specialization: str = "generalist"
    reliability: float = DEFAULT_RELIABILITY
    joined_squads_count: int = 0
    average_earnings: float = DEFAULT_AVERAGE_EARNINGS
    recommended_role: MemberRole = MemberRole.CONTRIBUTOR


def average_quality(contributions: Sequence[ContributionEntry]) -> float:
    if not contributions:
        return 0.0
    avg_points = sum(c.points for c in contributions) / len(contributions)
    return min(100.0, avg_points * 5)


def detect_skills(contributions: Sequence[ContributionEntry]) -> list[str]:
    """Skill tags in first-seen order."""
    skills: list[str] = []
    for c in contributions:
        skill = SKILL_BY_TYPE.get(c.type)
        if skill and skill not in skills:
            skills.append(skill)
    return skills


def estimate_availability(contribution_count: int) -> float:
    if contribution_count == 0:
        return NO_HISTORY_AVAILABILITY
    return min(100.0, max(20.0, contribution_count / 100 * 100))


def determine_specialization(skills: Sequence[str]) -> str:
    return "specialist" if len(skills) == 1 else "generalist"


def recommend_role(reliability: float, total_contributions: int) -> MemberRole:
    if reliability > 85 and total_contributions > 10:
        return MemberRole.LEADER
    if reliability > 70 and total_contributions > 5:
        return MemberRole.ASSISTANT
    return MemberRole.CONTRIBUTOR


def score_member_profile(
    user_id: str,
    contributions: Sequence[ContributionEntry],
    joined_squads_count: int = 0,
    reliability: float = DEFAULT_RELIABILITY,
    average_earnings: float = DEFAULT_AVERAGE_EARNINGS,
) -> MemberProfile:
    skills = detect_skills(contributions)
    return MemberProfile(
        user_id=user_id,
        total_contributions=len(contributions),
        average_quality=average_quality(contributions),
        skill_tags=skills,
        availability=estimate_availability(len(contributions)),
        specialization=determine_specialization(skills),
        reliability=reliability,
        joined_squads_count=joined_squads_count,
        average_earnings=average_earnings,
        recommended_role=recommend_role(reliability, len(contributions)),
    )
