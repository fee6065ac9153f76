"""Tests for team aggregation."""
from __future__ import annotations

from collections.abc import Generator

import pytest

from fantasy_value.config import reset_settings
from fantasy_value.stats.categories import SEASON_CATEGORIES
from fantasy_value.stats.records import StatRecord
from fantasy_value.stats.zscore import ZScoredRecord, compute_z_scores
from fantasy_value.valuation.punting import apply_punt
from fantasy_value.valuation.team import (
    RateAggregation,
    aggregate_team,
    games_weighted_strength,
)


@pytest.fixture
def roster() -> list[StatRecord]:
    """Two-man roster; the bench player has no free throw attempts."""
    return [
        StatRecord(
            player_name="Starter",
            values={
                "points": 20.0,
                "blocks": 1.0,
                "field_goal_percentage": 0.5,
                "field_goals_attempted": 10.0,
                "free_throw_percentage": 0.8,
                "free_throws_attempted": 5.0,
                "turnovers": 2.0,
            },
        ),
        StatRecord(
            player_name="Bench",
            values={
                "points": 10.0,
                "blocks": 0.0,
                "field_goal_percentage": 0.6,
                "field_goals_attempted": 30.0,
                "free_throw_percentage": None,
                "free_throws_attempted": 0.0,
                "turnovers": 1.0,
            },
        ),
    ]


@pytest.fixture
def default_rate_setting(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Make sure the default team rate setting is in effect."""
    monkeypatch.delenv("TEAM_RATE_AGGREGATION", raising=False)
    reset_settings()
    yield
    reset_settings()


class TestAggregateTeam:
    """Tests for aggregate_team."""

    def test_counting_stats_summed(
        self, roster: list[StatRecord], default_rate_setting: None
    ) -> None:
        """Counting categories add up."""
        team = aggregate_team(roster, name="Team A")

        assert team.name == "Team A"
        assert team.player_count == 2
        assert team.values["points"] == pytest.approx(30.0)
        assert team.values["turnovers"] == pytest.approx(3.0)

    def test_percentages_simple_mean(
        self, roster: list[StatRecord], default_rate_setting: None
    ) -> None:
        """By default percentages average the members that have one."""
        team = aggregate_team(roster)

        assert team.values["field_goal_percentage"] == pytest.approx(0.55)
        assert team.values["free_throw_percentage"] == pytest.approx(0.8)

    def test_percentages_volume_weighted(self, roster: list[StatRecord]) -> None:
        """Volume weighting divides total makes by total attempts."""
        team = aggregate_team(roster, rate_aggregation=RateAggregation.VOLUME_WEIGHTED)

        assert team.values["field_goal_percentage"] == pytest.approx(23 / 40)

    def test_volume_weighted_falls_back_without_attempts(self) -> None:
        """Members without attempts fall back to the simple mean."""
        roster = [
            StatRecord(values={"field_goal_percentage": 0.4}),
            StatRecord(values={"field_goal_percentage": 0.6}),
        ]

        team = aggregate_team(roster, rate_aggregation=RateAggregation.VOLUME_WEIGHTED)

        assert team.values["field_goal_percentage"] == pytest.approx(0.5)

    def test_rate_aggregation_from_settings(
        self, roster: list[StatRecord], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The configured aggregation applies when none is passed."""
        monkeypatch.setenv("TEAM_RATE_AGGREGATION", "volume_weighted")
        reset_settings()
        try:
            team = aggregate_team(roster)
        finally:
            reset_settings()

        assert team.values["field_goal_percentage"] == pytest.approx(23 / 40)

    def test_contributions_in_roster_order(self, roster: list[StatRecord]) -> None:
        """Contributions list every member in roster order."""
        team = aggregate_team(roster, rate_aggregation=RateAggregation.MEAN)

        blocks = team.contributions["blocks"]
        assert [c.player_name for c in blocks] == ["Starter", "Bench"]
        assert [c.value for c in blocks] == [1.0, 0.0]
        assert team.contributions["free_throw_percentage"][1].value is None

    def test_contributions_sum_to_value(self, roster: list[StatRecord]) -> None:
        """Counting contributions add up to the team value."""
        team = aggregate_team(roster, rate_aggregation=RateAggregation.MEAN)

        for key in ("points", "blocks", "turnovers"):
            assert sum(c.value for c in team.contributions[key]) == pytest.approx(
                team.values[key]
            )

    def test_z_totals_from_scored_members(self, season_records: list[StatRecord]) -> None:
        """Team z totals sum member signed z-scores."""
        scored = compute_z_scores(season_records, SEASON_CATEGORIES)
        roster = scored[:3]

        team = aggregate_team(roster, rate_aggregation=RateAggregation.MEAN)

        for key in SEASON_CATEGORIES.keys:
            assert team.z_totals[key] == pytest.approx(sum(m.signed_z(key) for m in roster))
            assert sum(c.value for c in team.z_contributions[key]) == pytest.approx(
                team.z_totals[key]
            )
        assert team.total_value == pytest.approx(sum(m.total_value for m in roster))
        assert team.values["points"] == pytest.approx(
            sum(m.record.get("points") for m in roster)
        )

    def test_plain_records_add_no_z(self, roster: list[StatRecord]) -> None:
        """Unscored members contribute 0 to z totals."""
        team = aggregate_team(roster, rate_aggregation=RateAggregation.MEAN)

        assert team.total_value == 0.0
        assert all(v == 0.0 for v in team.z_totals.values())

    def test_empty_roster(self) -> None:
        """An empty roster aggregates to zeros."""
        team = aggregate_team([], rate_aggregation=RateAggregation.MEAN)

        assert team.player_count == 0
        assert team.total_value == 0.0
        assert all(v == 0.0 for v in team.values.values())
        assert team.contributions["points"] == ()

    def test_teams_can_be_punted(self) -> None:
        """TeamAggregates rank through apply_punt like players."""
        strong = ZScoredRecord.from_signed(
            StatRecord(player_name="A"), {"points": 2.0, "turnovers": -1.0}, SEASON_CATEGORIES
        )
        steady = ZScoredRecord.from_signed(
            StatRecord(player_name="B"), {"points": 0.5, "turnovers": 1.0}, SEASON_CATEGORIES
        )
        teams = [
            aggregate_team([steady], rate_aggregation=RateAggregation.MEAN, name="Steady"),
            aggregate_team([strong], rate_aggregation=RateAggregation.MEAN, name="Strong"),
        ]

        rows = apply_punt(teams, {"turnovers"}, SEASON_CATEGORIES)

        assert [r.item.name for r in rows] == ["Strong", "Steady"]


class TestGamesWeightedStrength:
    """Tests for games_weighted_strength."""

    def test_sum_of_products(self) -> None:
        """Strength is Σ games × value."""
        assert games_weighted_strength([(3, 1.5), (4, -0.5)]) == pytest.approx(2.5)

    def test_empty(self) -> None:
        """No players means no strength."""
        assert games_weighted_strength([]) == 0
