"""
Static squad templates.

Squad-match results are looked up in an Enum-keyed table; an unknown or
missing squad type resolves to PROBLEM_SOLVING.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SquadType(str, Enum):
    ADVENTURE_PLANNING = "adventure_planning"
    FITNESS_WELLNESS = "fitness_wellness"
    BUSINESS_LAUNCH = "business_launch"
    CONTENT_CREATION = "content_creation"
    LEARNING_MASTERY = "learning_mastery"
    PROBLEM_SOLVING = "problem_solving"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> SquadType:
        try:
            return cls(tag)
        except ValueError:
            return cls.PROBLEM_SOLVING


@dataclass(frozen=True)
class SquadRole:
    title: str
    description: str
    expertise: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "description": self.description, "expertise": list(self.expertise)}


@dataclass(frozen=True)
class SquadTemplate:
    squad_name: str
    emoji: str
    description: str
    roles: tuple[SquadRole, ...] = field(default_factory=tuple)
    estimated_time: str = ""
    estimated_reward: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "squad_name": self.squad_name,
            "emoji": self.emoji,
            "description": self.description,
            "roles": [r.to_dict() for r in self.roles],
            "estimated_time": self.estimated_time,
            "estimated_reward": self.estimated_reward,
        }


def _role(title: str, description: str, *expertise: str) -> SquadRole:
    return SquadRole(title=title, description=description, expertise=expertise)


SQUAD_TEMPLATES: dict[SquadType, SquadTemplate] = {
    SquadType.ADVENTURE_PLANNING: SquadTemplate(
        squad_name="Adventure Planning Squad",
        emoji="🗺️",
        description=(
            "Plan the perfect trip with your squad. We handle routes, budget, accommodations, "
            "activities, and safety. Turn a boring plan into an epic adventure!"
        ),
        roles=(
            _role("Route Expert", "Maps out the best routes and logistics",
                  "navigation", "logistics", "planning"),
            _role("Budget Guru", "Finds the cheapest flights, hotels, and deals",
                  "budgeting", "pricing", "negotiation"),
            _role("Activity Planner", "Discovers amazing experiences and hidden gems",
                  "entertainment", "experiences", "local knowledge"),
            _role("Safety Advisor", "Checks travel warnings and keeps everyone safe",
                  "safety", "health", "regulations"),
        ),
        estimated_time="2-4 hours",
        estimated_reward=40,
    ),
    SquadType.FITNESS_WELLNESS: SquadTemplate(
        squad_name="Fitness & Wellness Squad",
        emoji="💪",
        description=(
            "Get fit with your dream squad! We create personalized workouts, meal plans, track "
            "progress, and keep you hyped. Achieve your fitness goals together!"
        ),
        roles=(
            _role("Fitness Coach", "Creates personalized workout programs",
                  "training", "exercise", "form"),
            _role("Nutritionist", "Plans meals and nutrition strategy",
                  "nutrition", "meal planning", "diet"),
            _role("Motivator", "Keeps the energy and hype high",
                  "motivation", "psychology", "accountability"),
            _role("Progress Tracker", "Logs results and celebrates wins",
                  "analytics", "tracking", "celebration"),
        ),
        estimated_time="1-2 hours",
        estimated_reward=30,
    ),
    SquadType.BUSINESS_LAUNCH: SquadTemplate(
        squad_name="Business Launch Squad",
        emoji="🚀",
        description=(
            "Turn your business idea into reality with expert co-founders! We handle market "
            "research, design, copywriting, marketing, and finances. Go from idea to launch in hours!"
        ),
        roles=(
            _role("Market Researcher", "Identifies hot niches and opportunities",
                  "market analysis", "trends", "validation"),
            _role("Product Designer", "Creates beautiful designs and visuals",
                  "design", "ui/ux", "branding"),
            _role("Copywriter", "Writes compelling sales and marketing copy",
                  "writing", "persuasion", "messaging"),
            _role("Growth Strategist", "Plans marketing channels and growth tactics",
                  "marketing", "growth", "sales"),
            _role("Financial Advisor", "Handles pricing, funding, and budgets",
                  "finance", "pricing", "investment"),
        ),
        estimated_time="4-8 hours",
        estimated_reward=60,
    ),
    SquadType.CONTENT_CREATION: SquadTemplate(
        squad_name="Content Creation Squad",
        emoji="🎬",
        description=(
            "Create viral content with your dream team! We handle filming, editing, music, "
            "captions, and strategy. Go from idea to viral hit faster than you think!"
        ),
        roles=(
            _role("Director", "Oversees creative vision and storytelling",
                  "direction", "storytelling", "cinematography"),
            _role("Video Editor", "Crafts smooth edits and visual effects",
                  "editing", "motion graphics", "color grading"),
            _role("Sound Designer", "Adds music, sound effects, and audio quality",
                  "audio", "music selection", "sound effects"),
            _role("Trend Analyst", "Keeps content fresh with latest trends",
                  "trends", "algorithms", "audience insights"),
        ),
        estimated_time="2-6 hours per piece",
        estimated_reward=35,
    ),
    SquadType.LEARNING_MASTERY: SquadTemplate(
        squad_name="Learning & Mastery Squad",
        emoji="📚",
        description=(
            "Master any skill with study partners! We find resources, explain concepts, practice "
            "together, and keep you accountable. Level up faster with your squad!"
        ),
        roles=(
            _role("Resource Curator", "Finds the best courses and materials",
                  "research", "curation", "learning"),
            _role("Expert Tutor", "Explains complex concepts clearly",
                  "teaching", "explanation", "clarity"),
            _role("Practice Partner", "Practices with you and gives feedback",
                  "practice", "feedback", "collaboration"),
            _role("Accountability Buddy", "Keeps you on track and motivated",
                  "motivation", "accountability", "consistency"),
        ),
        estimated_time="1-4 hours per week",
        estimated_reward=25,
    ),
    SquadType.PROBLEM_SOLVING: SquadTemplate(
        squad_name="Problem-Solving Squad",
        emoji="🎯",
        description=(
            "Form a powerful squad to tackle your challenge! We research, strategize, brainstorm "
            "solutions, and execute together. Let's solve this as a team!"
        ),
        roles=(
            _role("Strategist", "Plans the overall approach and strategy",
                  "strategy", "planning", "analysis"),
            _role("Researcher", "Gathers information and insights",
                  "research", "analysis", "validation"),
            _role("Implementer", "Executes the solution",
                  "execution", "building", "action"),
            _role("Quality Checker", "Validates and refines the solution",
                  "testing", "validation", "refinement"),
        ),
        estimated_time="2-6 hours",
        estimated_reward=40,
    ),
}


GREETING_TEMPLATE = SquadTemplate(
    squad_name="Welcome",
    emoji="👋",
    description="Tell me what you want to achieve and I'll form the perfect squad for you!",
    roles=(
        _role("Your Squad Guide", "Ready to help you form the perfect team",
              "guidance", "squad-assembly", "problem-solving"),
    ),
    estimated_time="Let's get started!",
    estimated_reward=0,
)

SUPPORT_TEMPLATE = SquadTemplate(
    squad_name="Support & Wellness",
    emoji="💙",
    description="Sometimes we all need someone to talk to. Want to form a support squad or keep chatting?",
    roles=(
        _role("Active Listener", "Someone who listens and understands",
              "empathy", "listening", "support"),
        _role("Advisor", "Offers perspective and guidance",
              "wisdom", "perspective", "mentoring"),
    ),
    estimated_time="Anytime you need",
    estimated_reward=0,
)

DEFAULT_GREETING = "👋 Hey! Welcome to Aura Squad! What would you like to accomplish?"
DEFAULT_CONVERSATIONAL_REPLY = "I hear you. Tell me more about what you're going through."


def get_template(squad_type: SquadType | str | None) -> SquadTemplate:
    return SQUAD_TEMPLATES[SquadType.from_tag(getattr(squad_type, "value", squad_type))]
