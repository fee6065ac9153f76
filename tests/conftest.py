"""Shared pytest fixtures for fantasy valuation tests.

This module contains fixtures used across multiple test modules:
- Configuration fixtures (test settings)
- Raw row fixtures (season averages, game logs, Yahoo payloads)
- Record fixtures (normalized StatRecords, z-scored cohorts)

Example:
    def test_something(season_records, scored_season):
        # season_records is a list of StatRecords
        # scored_season is the same cohort z-scored and ranked
        pass
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Generator

import pytest

from fantasy_value.config import Settings, reset_settings
from fantasy_value.stats import (
    SEASON_CATEGORIES,
    SourceShape,
    StatRecord,
    ZScoredRecord,
    compute_z_scores,
    normalize_many,
    rank_by_total_value,
)


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def test_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Settings, None, None]:
    """Provide test settings with a temporary log directory.

    Automatically resets settings singleton after test.
    """
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    reset_settings()
    from fantasy_value.config import get_settings

    settings = get_settings()
    settings.ensure_directories()

    yield settings

    reset_settings()


# =============================================================================
# Raw rows
# =============================================================================


@pytest.fixture
def season_rows() -> list[dict[str, Any]]:
    """Season-average rows as the data layer returns them."""
    return [
        {
            "player_id": 203999,
            "player_name": "Nikola Jokic",
            "team_abbreviation": "DEN",
            "season": "2023-24",
            "games_played": 79,
            "points_per_game": 26.4,
            "rebounds_per_game": 12.4,
            "assists_per_game": 9.0,
            "steals_per_game": 1.4,
            "blocks_per_game": 0.9,
            "three_pointers_per_game": 1.1,
            "field_goal_percentage": 0.583,
            "free_throw_percentage": 0.817,
            "turnovers_per_game": 3.0,
            "field_goals_per_game": 10.4,
            "field_goals_attempted_per_game": 17.9,
            "free_throws_per_game": 4.5,
            "free_throws_attempted_per_game": 5.5,
        },
        {
            "player_id": 1629029,
            "player_name": "Luka Doncic",
            "team_abbreviation": "DAL",
            "season": "2023-24",
            "games_played": 70,
            "points_per_game": 33.9,
            "rebounds_per_game": 9.2,
            "assists_per_game": 9.8,
            "steals_per_game": 1.4,
            "blocks_per_game": 0.5,
            "three_pointers_per_game": 4.1,
            "field_goal_percentage": 0.487,
            "free_throw_percentage": 0.786,
            "turnovers_per_game": 4.0,
            "field_goals_per_game": 11.5,
            "field_goals_attempted_per_game": 23.6,
            "free_throws_per_game": 6.8,
            "free_throws_attempted_per_game": 8.7,
        },
        {
            "player_id": 1641705,
            "player_name": "Victor Wembanyama",
            "team_abbreviation": "SAS",
            "season": "2023-24",
            "games_played": 71,
            "points_per_game": 21.4,
            "rebounds_per_game": 10.6,
            "assists_per_game": 3.9,
            "steals_per_game": 1.2,
            "blocks_per_game": 3.6,
            "three_pointers_per_game": 1.8,
            "field_goal_percentage": 0.465,
            "free_throw_percentage": 0.797,
            "turnovers_per_game": 3.7,
            "field_goals_per_game": 8.0,
            "field_goals_attempted_per_game": 17.2,
            "free_throws_per_game": 3.6,
            "free_throws_attempted_per_game": 4.5,
        },
        {
            "player_id": 1628983,
            "player_name": "Shai Gilgeous-Alexander",
            "team_abbreviation": "OKC",
            "season": "2023-24",
            "games_played": 75,
            "points_per_game": 30.1,
            "rebounds_per_game": 5.5,
            "assists_per_game": 6.2,
            "steals_per_game": 2.0,
            "blocks_per_game": 0.9,
            "three_pointers_per_game": 1.3,
            "field_goal_percentage": 0.535,
            "free_throw_percentage": 0.874,
            "turnovers_per_game": 2.2,
            "field_goals_per_game": 10.6,
            "field_goals_attempted_per_game": 19.8,
            "free_throws_per_game": 7.6,
            "free_throws_attempted_per_game": 8.7,
        },
        {
            "player_id": 1630178,
            "player_name": "Tyrese Maxey",
            "team_abbreviation": "PHI",
            "season": "2023-24",
            "games_played": 70,
            "points_per_game": 25.9,
            "rebounds_per_game": 3.7,
            "assists_per_game": 6.2,
            "steals_per_game": 1.0,
            "blocks_per_game": 0.5,
            "three_pointers_per_game": 3.0,
            "field_goal_percentage": 0.450,
            "free_throw_percentage": 0.868,
            "turnovers_per_game": 1.7,
            "field_goals_per_game": 9.2,
            "field_goals_attempted_per_game": 20.5,
            "free_throws_per_game": 4.4,
            "free_throws_attempted_per_game": 5.0,
        },
    ]


@pytest.fixture
def game_rows() -> list[dict[str, Any]]:
    """Game-log rows for two players."""
    return [
        {
            "player_id": 1,
            "player_name": "Guard One",
            "team_abbreviation": "BOS",
            "season": "2025-26",
            "game_date": "2025-11-01",
            "points": 30,
            "rebounds": 10,
            "assists": 5,
            "steals": 2,
            "blocks": 1,
            "three_pointers_made": 3,
            "field_goals_made": 12,
            "field_goals_attempted": 20,
            "free_throws_made": 5,
            "free_throws_attempted": 6,
            "turnovers": 4,
        },
        {
            "player_id": 2,
            "player_name": "Center Two",
            "team_abbreviation": "NYK",
            "season": "2025-26",
            "game_date": "2025-11-01",
            "points": 12,
            "rebounds": 15,
            "assists": 2,
            "steals": 0,
            "blocks": 4,
            "three_pointers_made": 0,
            "field_goals_made": 6,
            "field_goals_attempted": 9,
            "free_throws_made": 0,
            "free_throws_attempted": 0,
            "turnovers": 1,
        },
        {
            "player_id": 1,
            "player_name": "Guard One",
            "team_abbreviation": "LAL",
            "season": "2025-26",
            "game_date": "2025-11-03",
            "points": 20,
            "rebounds": 4,
            "assists": 9,
            "steals": 1,
            "blocks": 0,
            "three_pointers_made": 2,
            "field_goals_made": 8,
            "field_goals_attempted": 20,
            "free_throws_made": 2,
            "free_throws_attempted": 4,
            "turnovers": 2,
        },
    ]


@pytest.fixture
def yahoo_team_stats() -> dict[str, dict[str, Any]]:
    """Yahoo-style weekly team stats keyed by Yahoo stat id."""
    return {
        "Alpha": {
            "12": "520", "15": "210", "16": "130", "17": "40", "18": "25",
            "19": "60", "10": "70", "5": "0.480", "8": "0.790",
        },
        "Bravo": {
            "12": "480", "15": "230", "16": "110", "17": "35", "18": "30",
            "19": "55", "10": "60", "5": "0.470", "8": "0.800",
        },
        "Charlie": {
            "12": "400", "15": "180", "16": "90", "17": "30", "18": "20",
            "19": "70", "10": "50", "5": "0.440", "8": "0.750",
        },
    }


# =============================================================================
# Records
# =============================================================================


@pytest.fixture
def season_records(season_rows: list[dict[str, Any]]) -> list[StatRecord]:
    """Normalized season-average records."""
    return normalize_many(season_rows, SourceShape.SEASON_AVERAGE)


@pytest.fixture
def scored_season(season_records: list[StatRecord]) -> list[ZScoredRecord]:
    """Season records z-scored against themselves and ranked."""
    return rank_by_total_value(compute_z_scores(season_records, SEASON_CATEGORIES))

