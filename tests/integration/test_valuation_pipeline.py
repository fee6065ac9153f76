"""Integration tests for the valuation pipeline.

Exercises the flow from raw data-layer rows to rankings, punts, team
aggregates and the matchup matrix, checking the invariants that tie the
stages together.
"""
from __future__ import annotations

import math
from typing import Any

import pytest

from fantasy_value.stats import (
    GAME_CATEGORIES,
    SEASON_CATEGORIES,
    SourceShape,
    ZScoredRecord,
    compute_z_scores,
    extract_stored_z_scores,
    normalize_many,
    qualifying,
    rank_by_total_value,
    season_averages,
    to_frame,
)
from fantasy_value.valuation import (
    MatchupMatrix,
    RateAggregation,
    aggregate_team,
    apply_punt,
    compare,
    rank_by_fantasy_points,
)


@pytest.fixture
def ranked(season_rows: list[dict[str, Any]]) -> list[ZScoredRecord]:
    """Season rows normalized, scored and ranked."""
    records = normalize_many(season_rows, SourceShape.SEASON_AVERAGE)
    return rank_by_total_value(compute_z_scores(records, SEASON_CATEGORIES))


class TestSeasonRankingPipeline:
    """Rows -> z-scores -> ranking -> punts."""

    def test_category_z_scores_center_on_zero(self, ranked: list[ZScoredRecord]) -> None:
        """Every category's z-scores sum to 0 across the cohort."""
        for key in SEASON_CATEGORIES.keys:
            assert sum(r.z(key) for r in ranked) == pytest.approx(0.0, abs=1e-9)

    def test_ranking_is_descending(self, ranked: list[ZScoredRecord]) -> None:
        """Totals never increase down the ranking."""
        totals = [r.total_value for r in ranked]
        assert totals == sorted(totals, reverse=True)

    def test_no_punt_is_identity(self, ranked: list[ZScoredRecord]) -> None:
        """An empty punt reproduces totals and ranks exactly."""
        rows = apply_punt(ranked, (), SEASON_CATEGORIES)

        assert [r.item for r in rows] == ranked
        assert [r.adjusted_value for r in rows] == [r.total_value for r in ranked]

    def test_punt_rank_changes_balance(self, ranked: list[ZScoredRecord]) -> None:
        """Rank changes are a permutation, so they sum to 0."""
        rows = apply_punt(
            ranked, {"turnovers", "free_throw_percentage"}, SEASON_CATEGORIES
        )

        assert sum(r.rank_change for r in rows) == 0
        assert sorted(r.adjusted_rank for r in rows) == list(range(1, len(rows) + 1))
        for row in rows:
            kept = [k for k in SEASON_CATEGORIES.keys
                    if k not in {"turnovers", "free_throw_percentage"}]
            expected = sum(row.item.signed_z(k) for k in kept) / math.sqrt(len(kept))
            assert row.adjusted_value == pytest.approx(expected)

    def test_stored_z_round_trip(self, ranked: list[ZScoredRecord]) -> None:
        """Exported z columns read back to the same totals."""
        frame = to_frame(ranked, SEASON_CATEGORIES)

        for scored, row in zip(ranked, frame.to_dict(orient="records")):
            stored = extract_stored_z_scores(row, SEASON_CATEGORIES)
            rebuilt = ZScoredRecord.from_signed(scored.record, stored, SEASON_CATEGORIES)
            assert rebuilt.total_value == pytest.approx(scored.total_value)
            assert rebuilt.signed_z_scores == pytest.approx(dict(scored.signed_z_scores))


class TestGameLogPipeline:
    """Game logs -> season averages and fantasy points."""

    def test_averages_then_rank(self, game_rows: list[dict[str, Any]]) -> None:
        """Averaged game logs score against the whole cohort when nobody qualifies."""
        games = normalize_many(game_rows, SourceShape.GAME_LOG)
        averages = season_averages(games)
        reference = qualifying(averages, 5) or averages

        scored = compute_z_scores(averages, SEASON_CATEGORIES, reference=reference)

        assert len(scored) == 2
        assert scored[0].total_value == pytest.approx(-scored[1].total_value)

    def test_fantasy_points(self, game_rows: list[dict[str, Any]]) -> None:
        """The best single game tops the points ranking."""
        games = normalize_many(game_rows, SourceShape.GAME_LOG, GAME_CATEGORIES)

        rows = rank_by_fantasy_points(games, {"free_throws"})

        assert rows[0].item.game_date == "2025-11-01"
        assert rows[0].item.player_name == "Guard One"


class TestTeamPipeline:
    """Players -> teams -> matchups."""

    def test_teams_compare_symmetrically(self, ranked: list[ZScoredRecord]) -> None:
        """Team comparisons mirror each other."""
        team_a = aggregate_team(ranked[:2], rate_aggregation=RateAggregation.MEAN, name="A")
        team_b = aggregate_team(ranked[2:], rate_aggregation=RateAggregation.MEAN, name="B")

        forward = compare(team_a.values, team_b.values, SEASON_CATEGORIES)
        backward = compare(team_b.values, team_a.values, SEASON_CATEGORIES)

        assert forward.wins == backward.losses
        assert forward.ties == backward.ties
        assert forward.wins + forward.losses + forward.ties == len(SEASON_CATEGORIES)

    def test_whole_league_team_totals_zero(self, ranked: list[ZScoredRecord]) -> None:
        """A team of everyone has a total value of 0."""
        team = aggregate_team(ranked, rate_aggregation=RateAggregation.MEAN)

        assert team.total_value == pytest.approx(0.0, abs=1e-9)

    def test_matrix_from_teams(self, ranked: list[ZScoredRecord]) -> None:
        """The matrix accepts team aggregate values."""
        teams = {
            f"Team {i}": aggregate_team(
                [member], rate_aggregation=RateAggregation.MEAN
            ).values
            for i, member in enumerate(ranked)
        }

        matrix = MatchupMatrix.build(teams, SEASON_CATEGORIES)

        standings = matrix.standings()
        assert len(standings) == len(ranked)
        total_wins = sum(s.matchup_wins for s in standings)
        total_losses = sum(s.matchup_losses for s in standings)
        assert total_wins == total_losses
