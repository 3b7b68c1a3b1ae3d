"""
Squad health, productivity and success heuristics.

Health starts at 100 and loses 10 per detected issue plus 15 per member
who has not contributed yet, clamped to [0, 100].
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping

from aurasquad.core.models import MemberRole, Squad, SquadStatus, parse_timestamp

ISSUE_PENALTY = 10
IDLE_MEMBER_PENALTY = 15
MAX_SHARE_SPREAD = 30

NO_LEADER = "No leader assigned"
SINGLE_MEMBER = "Single member - need more hands"
UNBALANCED_EARNINGS = "Unbalanced earnings distribution - could reduce team morale"
ADD_ASSISTANT = "Add an assistant role to improve coordination"


@dataclass
class SquadHealthReport:
    squad_id: str
    recommendation: str
    health_score: int  # 0-100
    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    estimated_productivity: int = 0  # 0-100
    recommended_actions: list[str] = field(default_factory=list)


def estimate_productivity(role_counts: Mapping[MemberRole, int]) -> int:
    productivity = 50
    productivity += role_counts.get(MemberRole.LEADER, 0) * 10
    productivity += role_counts.get(MemberRole.ASSISTANT, 0) * 8
    productivity += role_counts.get(MemberRole.CONTRIBUTOR, 0) * 5
    return min(100, productivity)


def _recommendation(health_score: int) -> str:
    if health_score > 80:
        return "Squad is healthy and productive"
    if health_score > 60:
        return "Squad functioning well but could improve member engagement"
    if health_score > 40:
        return "Squad needs attention - consider onboarding members or restructuring"
    return "Squad at risk - urgent action needed to improve health"


def _actions(squad: Squad, issues: list[str], suggestions: list[str]) -> list[str]:
    actions = []
    if SINGLE_MEMBER in issues:
        actions.append("Recruit 2-3 more members for better productivity")
    if ADD_ASSISTANT in suggestions:
        actions.append("Promote a contributor to assistant role")
    if squad.status == SquadStatus.ACTIVE and squad.task_count == 0:
        actions.append("Post first task to get team engaged")
    return actions


def analyze_squad_health(squad: Squad) -> SquadHealthReport:
    issues: list[str] = []
    suggestions: list[str] = []
    role_counts = squad.role_counts()

    if role_counts[MemberRole.LEADER] == 0:
        issues.append(NO_LEADER)
    if len(squad.members) == 1:
        issues.append(SINGLE_MEMBER)

    idle = [m for m in squad.members if m.contribution_score == 0]
    for member in idle:
        issues.append(f"{member.user_id} has not contributed yet")
        suggestions.append(f"Onboard {member.user_id} with a small task")

    if role_counts[MemberRole.ASSISTANT] == 0 and len(squad.members) > 2:
        suggestions.append(ADD_ASSISTANT)

    shares = [m.earnings_share for m in squad.members]
    if shares and max(shares) - min(shares) > MAX_SHARE_SPREAD:
        issues.append(UNBALANCED_EARNINGS)
        suggestions.append("Consider rebalancing earnings shares to be more fair")

    score = 100 - len(issues) * ISSUE_PENALTY - len(idle) * IDLE_MEMBER_PENALTY
    score = max(0, min(100, score))

    return SquadHealthReport(
        squad_id=squad.id,
        recommendation=_recommendation(score),
        health_score=score,
        issues=issues,
        suggestions=suggestions,
        estimated_productivity=estimate_productivity(role_counts),
        recommended_actions=_actions(squad, issues, suggestions),
    )


def predict_squad_success(squad: Squad, now: datetime) -> float:
    """Heuristic 0-100 success estimate from size, role mix, activity and age."""
    score = 50.0
    size = len(squad.members)

    if 3 <= size <= 10:
        score += 15
    elif size < 3:
        score -= 10

    roles = {m.role for m in squad.members}
    if {MemberRole.LEADER, MemberRole.ASSISTANT, MemberRole.CONTRIBUTOR} <= roles:
        score += 15

    if size:
        active = sum(1 for m in squad.members if m.contribution_score > 0)
        score += active / size * 20

    days_old = (now - parse_timestamp(squad.created_at)).total_seconds() / 86400
    if days_old > 7:
        score += 10
    if days_old > 30:
        score += 15

    return min(100.0, score)
