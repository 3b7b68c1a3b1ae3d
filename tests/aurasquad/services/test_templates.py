"""Tests for the static squad templates."""

from __future__ import annotations

import pytest

from aurasquad.services.templates import SQUAD_TEMPLATES, SquadType, get_template


class TestTemplates:
    def test_every_type_has_template(self):
        assert set(SQUAD_TEMPLATES) == set(SquadType)

    @pytest.mark.parametrize("squad_type,reward", [
        (SquadType.ADVENTURE_PLANNING, 40),
        (SquadType.FITNESS_WELLNESS, 30),
        (SquadType.BUSINESS_LAUNCH, 60),
        (SquadType.CONTENT_CREATION, 35),
        (SquadType.LEARNING_MASTERY, 25),
        (SquadType.PROBLEM_SOLVING, 40),
    ])
    def test_rewards(self, squad_type, reward):
        assert get_template(squad_type).estimated_reward == reward

    def test_lookup_by_tag(self):
        assert get_template("business_launch").squad_name == "Business Launch Squad"

    def test_unknown_or_missing_defaults_to_problem_solving(self):
        default = SQUAD_TEMPLATES[SquadType.PROBLEM_SOLVING]
        assert get_template("unknown") is default
        assert get_template(None) is default

    def test_to_dict(self):
        data = get_template(SquadType.FITNESS_WELLNESS).to_dict()
        assert data["roles"][0] == {
            "title": "Fitness Coach",
            "description": "Creates personalized workout programs",
            "expertise": ["training", "exercise", "form"],
        }
