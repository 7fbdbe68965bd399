"""Badge catalog and eligibility rules."""

from dataclasses import replace

import pytest

from moneyglow.gamification.badges import BADGE_CATALOG, BadgeInputs, evaluate_badges

EMPTY = BadgeInputs(income_entries=0, monthly_budgets=0, expenses=0, quiz_result=None, longest_streak=0, level=1)


def earned(inputs: BadgeInputs) -> set[str]:
    return {b.id for b in evaluate_badges(inputs) if b.earned}


class TestCatalog:
    def test_ten_badges_in_fixed_order(self):
        assert [b.id for b in BADGE_CATALOG] == [
            "first_peso",
            "hustler",
            "money_machine",
            "budget_boss",
            "self_aware",
            "week_warrior",
            "monthly_master",
            "rising_star",
            "money_master",
            "tracker",
        ]

    def test_evaluate_returns_whole_catalog(self):
        badges = evaluate_badges(EMPTY)
        assert len(badges) == 10
        assert not any(b.earned for b in badges)


class TestRules:
    @pytest.mark.parametrize(
        ("change", "badge"),
        [
            ({"income_entries": 1}, "first_peso"),
            ({"income_entries": 10}, "hustler"),
            ({"income_entries": 50}, "money_machine"),
            ({"monthly_budgets": 1}, "budget_boss"),
            ({"quiz_result": "PLAN"}, "self_aware"),
            ({"longest_streak": 7}, "week_warrior"),
            ({"longest_streak": 30}, "monthly_master"),
            ({"level": 2}, "rising_star"),
            ({"level": 4}, "money_master"),
            ({"expenses": 1}, "tracker"),
        ],
    )
    def test_threshold_earns(self, change, badge):
        assert badge in earned(replace(EMPTY, **change))

    def test_just_below_threshold(self):
        got = earned(replace(EMPTY, income_entries=9, longest_streak=6, level=3))
        assert "hustler" not in got
        assert "week_warrior" not in got
        assert "money_master" not in got
        assert {"first_peso", "rising_star"} <= got

    def test_first_peso_unearns_when_entries_drop_to_zero(self):
        assert "first_peso" in earned(replace(EMPTY, income_entries=1))
        assert "first_peso" not in earned(replace(EMPTY, income_entries=0))
