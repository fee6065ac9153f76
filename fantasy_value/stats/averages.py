"""Per-game season averages from game-log records.

Game logs are grouped by player, counting stats are averaged over games
played and shooting percentages are recomputed from total makes over total
attempts (never by averaging per-game percentages).

Example:
    >>> averages = season_averages(game_records)
    >>> cohort = qualifying(averages, min_games=5)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from fantasy_value.logging import get_logger
from fantasy_value.stats.normalizer import GAME_LOG_FIELDS, SHOOTING_SPLITS
from fantasy_value.stats.records import StatRecord
from fantasy_value.types import CategoryKey

logger = get_logger(__name__)


def _most_recent(games: Sequence[StatRecord]) -> StatRecord:
    # max() keeps the first of equal dates, so ties resolve to log order
    return max(games, key=lambda g: g.game_date or "")


def average_games(games: Sequence[StatRecord]) -> StatRecord:
    """Average one player's game logs into a season-average record.

    Args:
        games: Game-log records for a single player (non-empty).

    Returns:
        StatRecord with per-game counting stats, makes/attempts per game,
        FG%/FT% from totals, and games_played set.
    """
    if not games:
        raise ValueError("Cannot average an empty list of games")

    games_played = len(games)
    totals: dict[CategoryKey, float] = {
        key: sum(game.get(key) for game in games) for key in GAME_LOG_FIELDS
    }
    values: dict[CategoryKey, float | None] = {
        key: total / games_played for key, total in totals.items()
    }
    for pct_key, (made_key, attempts_key) in SHOOTING_SPLITS.items():
        attempts = totals[attempts_key]
        values[pct_key] = totals[made_key] / attempts if attempts > 0 else 0.0

    latest = _most_recent(games)
    return StatRecord(
        values=values,
        player_id=latest.player_id,
        player_name=latest.player_name,
        season=latest.season,
        team=latest.team,
        games_played=games_played,
    )


def season_averages(game_records: Iterable[StatRecord]) -> list[StatRecord]:
    """Group game logs by player and average each group.

    Players appear in the order they are first seen in game_records.
    Records without a player_id are grouped by player name.
    """
    grouped: dict[object, list[StatRecord]] = {}
    for game in game_records:
        key = game.player_id if game.player_id is not None else game.player_name
        grouped.setdefault(key, []).append(game)

    averages = [average_games(games) for games in grouped.values()]
    logger.debug("Averaged game logs for {} players", len(averages))
    return averages


def qualifying(records: Iterable[StatRecord], min_games: int) -> list[StatRecord]:
    """Keep records with at least min_games games played."""
    return [r for r in records if r.games_played >= min_games]


__all__ = ["average_games", "qualifying", "season_averages"]
