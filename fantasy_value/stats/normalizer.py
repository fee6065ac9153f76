"""Normalizer from heterogeneous data-layer rows to StatRecords.

This is the only module that knows the shapes the data layer hands back:

- season-average rows (``points_per_game``, ``field_goal_percentage``, ...)
- per-game rows (``points``, ``three_pointers_made``, makes/attempts, ...)
- Yahoo Fantasy stat payloads keyed by Yahoo stat id, where a value may be
  a scalar, ``{"value": ...}``, ``{"stat": {"value": ...}}`` or a literal
  ``"made/attempted"`` fraction string.

Raw values are first classified into a small tagged variant
(Scalar | Fraction | Nested | Missing) and then resolved, so every shape
is handled by one exhaustive match rather than ad-hoc probing.

Parsing never raises and never produces NaN: anything unreadable becomes
0. The one exception is a fraction with a zero denominator, which becomes
None so a player with no attempts is not scored as a 0% shooter.

Example:
    >>> from fantasy_value.stats.normalizer import SourceShape, normalize
    >>> record = normalize({"player_name": "A", "points_per_game": "27.1"},
    ...                    SourceShape.SEASON_AVERAGE)
    >>> record.get("points")
    27.1
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from fantasy_value.logging import get_logger
from fantasy_value.stats.categories import SEASON_CATEGORIES, CategorySet
from fantasy_value.stats.records import StatRecord
from fantasy_value.types import CategoryKey, UnsupportedSourceShapeError

logger = get_logger(__name__)


class SourceShape(Enum):
    """Known raw row shapes."""

    SEASON_AVERAGE = "season_average"
    GAME_LOG = "game_log"
    YAHOO = "yahoo"


# =============================================================================
# Raw stat values
# =============================================================================


@dataclass(frozen=True)
class Scalar:
    """A plain number."""

    value: float


@dataclass(frozen=True)
class Fraction:
    """A ``"num/den"`` string; either side may be NaN if unreadable."""

    numerator: float
    denominator: float


@dataclass(frozen=True)
class Nested:
    """A value wrapped in an object (``{"value": ...}`` and friends)."""

    inner: RawStatValue


@dataclass(frozen=True)
class Missing:
    """No usable value. ``raw`` keeps the input when it failed to parse."""

    raw: Any = None

    @property
    def unparseable(self) -> bool:
        return self.raw is not None


RawStatValue = Union[Scalar, Fraction, Nested, Missing]


def _parse_number(text: str) -> float | None:
    try:
        number = float(text.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def classify_raw(raw: Any) -> RawStatValue:
    """Classify a raw JSON-ish value into a RawStatValue variant."""
    if raw is None:
        return Missing()
    if isinstance(raw, bool):
        return Missing(raw)
    if isinstance(raw, numbers.Real):
        number = float(raw)
        return Scalar(number) if math.isfinite(number) else Missing(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if not text or text == "-":
            return Missing()
        if "/" in text:
            num_text, _, den_text = text.partition("/")
            numerator = _parse_number(num_text)
            denominator = _parse_number(den_text)
            return Fraction(
                math.nan if numerator is None else numerator,
                math.nan if denominator is None else denominator,
            )
        number = _parse_number(text)
        return Missing(raw) if number is None else Scalar(number)
    if isinstance(raw, Mapping):
        if "stat" in raw:
            stat = raw["stat"]
            if not isinstance(stat, Mapping):
                return Missing() if stat is None else Nested(classify_raw(stat))
            raw = stat
        # An explicit null value is missing, never a reason to scan siblings
        if "value" in raw:
            value = raw["value"]
            return Missing() if value is None else Nested(classify_raw(value))
        for name, member in raw.items():
            if name == "stat_id":
                continue
            if isinstance(member, (str, numbers.Real)) and not isinstance(member, bool):
                return Nested(classify_raw(member))
        return Missing()
    return Missing(raw)


def resolve(value: RawStatValue, is_percentage: bool = False) -> float | None:
    """Resolve a classified value to a number.

    Returns None only for a fraction that cannot be divided (zero or
    unreadable denominator); every other failure resolves to 0.0.
    Percentages are clamped to [0, 1].
    """
    if isinstance(value, Nested):
        return resolve(value.inner, is_percentage)
    if isinstance(value, Fraction):
        if not value.denominator > 0 or not math.isfinite(value.numerator):
            return None
        return value.numerator / value.denominator
    if isinstance(value, Scalar):
        if is_percentage:
            return min(1.0, max(0.0, value.value))
        return value.value
    if isinstance(value, Missing):
        return 0.0
    raise TypeError(f"Unknown raw stat value: {value!r}")


def parse_stat_value(raw: Any, is_percentage: bool = False) -> float | None:
    """Classify and resolve in one step."""
    return resolve(classify_raw(raw), is_percentage)


# =============================================================================
# Field maps
# =============================================================================

# Category key -> source field names, first present wins
SEASON_AVERAGE_FIELDS: dict[CategoryKey, tuple[str, ...]] = {
    "points": ("points_per_game", "points"),
    "rebounds": ("rebounds_per_game", "rebounds"),
    "assists": ("assists_per_game", "assists"),
    "steals": ("steals_per_game", "steals"),
    "blocks": ("blocks_per_game", "blocks"),
    "three_pointers": ("three_pointers_per_game", "three_pointers"),
    "field_goal_percentage": ("field_goal_percentage", "fg_percentage"),
    "free_throw_percentage": ("free_throw_percentage", "ft_percentage"),
    "turnovers": ("turnovers_per_game", "turnovers"),
}

# Attempt volume is only recorded when the row actually carries it
SEASON_AVERAGE_VOLUME_FIELDS: dict[CategoryKey, tuple[str, ...]] = {
    "field_goals_made": ("field_goals_per_game", "field_goals_made_per_game"),
    "field_goals_attempted": ("field_goals_attempted_per_game",),
    "free_throws_made": ("free_throws_per_game", "free_throws_made_per_game"),
    "free_throws_attempted": ("free_throws_attempted_per_game",),
}

GAME_LOG_FIELDS: dict[CategoryKey, tuple[str, ...]] = {
    "points": ("points",),
    "rebounds": ("rebounds",),
    "assists": ("assists",),
    "steals": ("steals",),
    "blocks": ("blocks",),
    "three_pointers": ("three_pointers_made", "three_pointers"),
    "field_goals_made": ("field_goals_made",),
    "field_goals_attempted": ("field_goals_attempted",),
    "free_throws_made": ("free_throws_made",),
    "free_throws_attempted": ("free_throws_attempted",),
    "turnovers": ("turnovers",),
}

PERCENTAGE_KEYS: frozenset[CategoryKey] = frozenset(
    {"field_goal_percentage", "free_throw_percentage"}
)

# Percentage key -> (makes key, attempts key)
SHOOTING_SPLITS: dict[CategoryKey, tuple[CategoryKey, CategoryKey]] = {
    "field_goal_percentage": ("field_goals_made", "field_goals_attempted"),
    "free_throw_percentage": ("free_throws_made", "free_throws_attempted"),
}


def _first_present(row: Mapping[str, Any], names: Iterable[str]) -> tuple[bool, Any]:
    for name in names:
        if name in row:
            return True, row[name]
    return False, None


def _to_int(raw: Any, default: int = 0) -> int:
    value = classify_raw(raw)
    if isinstance(value, Missing) and value.unparseable:
        return default
    number = resolve(value)
    return int(number) if number is not None else default


def _identity(row: Mapping[str, Any], games_default: int) -> dict[str, Any]:
    _, player_id = _first_present(row, ("player_id", "nba_player_id", "nbaPlayerId"))
    _, name = _first_present(row, ("player_name", "playerName", "name"))
    _, team = _first_present(row, ("team_abbreviation", "team", "team_abbr"))
    found_games, games = _first_present(row, ("games_played", "gp"))
    season = row.get("season")
    game_date = row.get("game_date")
    return {
        "player_id": _to_int(player_id) if player_id is not None else None,
        "player_name": str(name) if name is not None else "",
        "season": str(season) if season is not None else None,
        "game_date": str(game_date) if game_date is not None else None,
        "team": str(team) if team is not None else None,
        "games_played": _to_int(games, games_default) if found_games else games_default,
    }


class _ParseTally:
    """Counts fields that were present but unreadable, for debug logging."""

    def __init__(self) -> None:
        self.failed: list[str] = []

    def parse(self, field_name: str, raw: Any, is_percentage: bool) -> float | None:
        value = classify_raw(raw)
        if isinstance(value, Missing) and value.unparseable:
            self.failed.append(field_name)
        return resolve(value, is_percentage)


def _normalize_fields(
    row: Mapping[str, Any],
    fields: Mapping[CategoryKey, tuple[str, ...]],
    tally: _ParseTally,
    optional: bool = False,
) -> dict[CategoryKey, float | None]:
    values: dict[CategoryKey, float | None] = {}
    for key, names in fields.items():
        found, raw = _first_present(row, names)
        if optional and not found:
            continue
        values[key] = tally.parse(key, raw, key in PERCENTAGE_KEYS)
    return values


def _normalize_season(row: Mapping[str, Any], tally: _ParseTally) -> StatRecord:
    values = _normalize_fields(row, SEASON_AVERAGE_FIELDS, tally)
    values.update(
        _normalize_fields(row, SEASON_AVERAGE_VOLUME_FIELDS, tally, optional=True)
    )
    return StatRecord(values=values, **_identity(row, games_default=0))


def _normalize_game(row: Mapping[str, Any], tally: _ParseTally) -> StatRecord:
    values = _normalize_fields(row, GAME_LOG_FIELDS, tally)
    for pct_key, (made_key, attempts_key) in SHOOTING_SPLITS.items():
        pct = classify_raw(row.get(pct_key))
        if not isinstance(pct, Missing):
            values[pct_key] = resolve(pct, is_percentage=True)
            continue
        if pct.unparseable:
            tally.failed.append(pct_key)
        attempts = values[attempts_key] or 0.0
        values[pct_key] = (values[made_key] or 0.0) / attempts if attempts > 0 else None
    return StatRecord(values=values, **_identity(row, games_default=1))


def _yahoo_stats(row: Mapping[str, Any]) -> dict[str, Any]:
    stats = row.get("stats", row)
    if isinstance(stats, Mapping):
        return {str(k): v for k, v in stats.items()}
    by_id: dict[str, Any] = {}
    if isinstance(stats, list):
        # Yahoo API list form: [{"stat": {"stat_id": "12", "value": "30"}}, ...]
        for entry in stats:
            stat = entry.get("stat", entry) if isinstance(entry, Mapping) else None
            if isinstance(stat, Mapping) and stat.get("stat_id") is not None:
                by_id[str(stat["stat_id"])] = entry
    return by_id


def _normalize_yahoo(
    row: Mapping[str, Any], tally: _ParseTally, categories: CategorySet
) -> StatRecord:
    stats = _yahoo_stats(row)
    values: dict[CategoryKey, float | None] = {}
    for stat_id, category in categories.by_yahoo_id().items():
        values[category.key] = tally.parse(
            category.key, stats.get(stat_id), category.is_percentage
        )
    return StatRecord(values=values, **_identity(row, games_default=0))


def normalize(
    raw_row: Mapping[str, Any],
    source_shape: SourceShape,
    categories: CategorySet = SEASON_CATEGORIES,
) -> StatRecord:
    """Convert one raw row into a StatRecord.

    Args:
        raw_row: Row or payload from the data layer.
        source_shape: Which known shape the row has.
        categories: Category set used to map Yahoo stat ids.

    Returns:
        Immutable StatRecord.

    Raises:
        UnsupportedSourceShapeError: If source_shape is not a SourceShape.
    """
    tally = _ParseTally()
    if source_shape is SourceShape.SEASON_AVERAGE:
        record = _normalize_season(raw_row, tally)
    elif source_shape is SourceShape.GAME_LOG:
        record = _normalize_game(raw_row, tally)
    elif source_shape is SourceShape.YAHOO:
        record = _normalize_yahoo(raw_row, tally, categories)
    else:
        raise UnsupportedSourceShapeError(f"Unsupported source shape: {source_shape!r}")

    if tally.failed:
        logger.debug(
            "{} unparseable field(s) for '{}' defaulted to 0: {}",
            len(tally.failed),
            record.player_name,
            ", ".join(tally.failed),
        )
    return record


def normalize_many(
    rows: Iterable[Mapping[str, Any]],
    source_shape: SourceShape,
    categories: CategorySet = SEASON_CATEGORIES,
) -> list[StatRecord]:
    """Normalize rows, preserving order."""
    return [normalize(row, source_shape, categories) for row in rows]


def extract_stored_z_scores(
    row: Mapping[str, Any],
    categories: CategorySet = SEASON_CATEGORIES,
) -> dict[CategoryKey, float]:
    """Read pre-computed z-score columns from a row.

    Stored z-scores already have the turnover sign inverted, so the result
    is a mapping of sign-corrected z-scores. Missing columns read as 0.
    """
    return {
        category.key: parse_stat_value(row.get(category.z_column)) or 0.0
        for category in categories
    }


__all__ = [
    "GAME_LOG_FIELDS",
    "SEASON_AVERAGE_FIELDS",
    "SEASON_AVERAGE_VOLUME_FIELDS",
    "SHOOTING_SPLITS",
    "Fraction",
    "Missing",
    "Nested",
    "RawStatValue",
    "Scalar",
    "SourceShape",
    "classify_raw",
    "extract_stored_z_scores",
    "normalize",
    "normalize_many",
    "parse_stat_value",
    "resolve",
]
