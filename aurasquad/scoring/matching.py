"""
Member matching against a candidate pool.

score = 50 + 30 * matched_skill_fraction + 20 * availability/100
           + 20 * experience_weight/100

Only candidates scoring above 60 are returned, best first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from aurasquad.core.models import MemberRole

MATCH_THRESHOLD = 60


class ExperienceLevel(str, Enum):
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"


EXPERIENCE_WEIGHT: dict[ExperienceLevel, int] = {
    ExperienceLevel.JUNIOR: 30,
    ExperienceLevel.MID: 70,
    ExperienceLevel.SENIOR: 100,
}


@dataclass
class Candidate:
    user_id: str
    skills: list[str]
    availability: float  # 0-100
    experience: ExperienceLevel


@dataclass
class SquadNeeds:
    required_skills: list[str]
    desired_roles: list[MemberRole] = field(default_factory=list)
    availability: float = 0
    experience_level: ExperienceLevel = ExperienceLevel.MID


@dataclass
class MemberMatch:
    user_id: str
    match_score: float  # 0-100
    reasoning: str
    estimated_productivity: float
    suggested_role: MemberRole
    complementary_skills: list[str]
    potential_earnings: float


CANDIDATE_POOL: tuple[Candidate, ...] = (
    Candidate(
        user_id="agent_ai_001",
        skills=["analysis", "problem-solving", "automation"],
        availability=95,
        experience=ExperienceLevel.SENIOR,
    ),
    Candidate(
        user_id="agent_specialist_001",
        skills=["design", "marketing", "content"],
        availability=85,
        experience=ExperienceLevel.MID,
    ),
    Candidate(
        user_id="agent_developer_001",
        skills=["coding", "architecture", "devops"],
        availability=90,
        experience=ExperienceLevel.SENIOR,
    ),
)


def match_score(candidate: Candidate, needs: SquadNeeds) -> float:
    score = 50.0
    if needs.required_skills:
        matched = sum(1 for s in candidate.skills if s in needs.required_skills)
        score += matched / len(needs.required_skills) * 30
    score += candidate.availability / 100 * 20
    score += EXPERIENCE_WEIGHT[candidate.experience] / 100 * 20
    return min(100.0, score)


def suggest_role(candidate: Candidate) -> MemberRole:
    if candidate.experience == ExperienceLevel.SENIOR:
        return MemberRole.LEADER
    if candidate.experience == ExperienceLevel.MID:
        return MemberRole.ASSISTANT
    return MemberRole.CONTRIBUTOR


def complementary_skills(candidate_skills: Sequence[str], required: Sequence[str]) -> list[str]:
    """Up to three skills the candidate brings beyond the requirement list."""
    return [s for s in candidate_skills if s not in required][:3]


def find_member_matches(
    needs: SquadNeeds,
    candidates: Sequence[Candidate] = CANDIDATE_POOL,
) -> list[MemberMatch]:
    matches = []
    for candidate in candidates:
        score = match_score(candidate, needs)
        if score <= MATCH_THRESHOLD:
            continue
        matches.append(MemberMatch(
            user_id=candidate.user_id,
            match_score=score,
            reasoning=f"Strong match: {score:g}% compatible with squad needs",
            estimated_productivity=score * 0.8,
            suggested_role=suggest_role(candidate),
            complementary_skills=complementary_skills(candidate.skills, needs.required_skills),
            potential_earnings=score * 50,
        ))
    matches.sort(key=lambda m: m.match_score, reverse=True)
    return matches
