"""Team aggregation.

A roster (the active players the caller chose) is folded into team-level
category values, z-score totals and per-player contributions:

- counting stats are summed
- FG%/FT% are the simple mean of member percentages by default; members
  with no percentage (no attempts) are left out of the mean
- z-scores are the sum of each member's sign-corrected z-scores (no
  re-scoring at the team level)

The simple percentage mean ignores attempt volume: a bench player with one
attempt counts as much as a starter with five hundred. It is kept as the
default for compatibility; RateAggregation.VOLUME_WEIGHTED switches to
total makes / total attempts when every member carries attempts.

Example:
    >>> team = aggregate_team(scored_roster, SEASON_CATEGORIES, name="Team A")
    >>> team.values["points"], team.total_value
    (112.4, 3.81)
    >>> [c.player_name for c in team.contributions["blocks"]]
    ['Player 1', 'Player 2']
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from fantasy_value.config import get_settings
from fantasy_value.logging import get_logger
from fantasy_value.stats.categories import SEASON_CATEGORIES, CategorySet, StatCategory
from fantasy_value.stats.records import StatRecord
from fantasy_value.stats.zscore import ZScoredRecord
from fantasy_value.types import CategoryKey

logger = get_logger(__name__)


class RateAggregation(Enum):
    """How member shooting percentages combine into a team percentage."""

    MEAN = "mean"
    VOLUME_WEIGHTED = "volume_weighted"


@dataclass(frozen=True)
class Contribution:
    """One roster member's share of a category."""

    player_name: str
    value: float | None


@dataclass(frozen=True)
class TeamAggregate:
    """Team-level category values built from a roster.

    Attributes:
        name: Team name.
        values: Category key -> team value (sum, or mean for percentages).
        z_totals: Category key -> summed sign-corrected z-score.
        contributions: Category key -> per-member raw values, roster order.
        z_contributions: Category key -> per-member signed z, roster order.
        total_value: Sum of z_totals.
        player_count: Roster size.
    """

    name: str
    values: Mapping[CategoryKey, float]
    z_totals: Mapping[CategoryKey, float]
    contributions: Mapping[CategoryKey, tuple[Contribution, ...]]
    z_contributions: Mapping[CategoryKey, tuple[Contribution, ...]]
    total_value: float
    player_count: int

    @property
    def signed_z_scores(self) -> Mapping[CategoryKey, float]:
        """Alias of z_totals so teams can be punted like players."""
        return self.z_totals


def _split(member: StatRecord | ZScoredRecord) -> tuple[StatRecord, ZScoredRecord | None]:
    if isinstance(member, ZScoredRecord):
        return member.record, member
    return member, None


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _rate_value(
    category: StatCategory,
    records: Sequence[StatRecord],
    rate_aggregation: RateAggregation,
) -> float:
    members = [r for r in records if r.has(category.key)]
    rates = [r.get(category.key) for r in members]

    if rate_aggregation is RateAggregation.VOLUME_WEIGHTED and category.is_volume_weighted:
        attempts_key = category.attempts_key
        if members and all(r.has(attempts_key) for r in members):
            attempts = [r.get(attempts_key) for r in members]
            total_attempts = sum(attempts)
            if total_attempts > 0:
                return sum(a * p for a, p in zip(attempts, rates)) / total_attempts
        logger.debug(
            "No attempt volume for '{}', falling back to simple mean", category.key
        )
    return _mean(rates)


def aggregate_team(
    roster: Sequence[StatRecord | ZScoredRecord],
    categories: CategorySet = SEASON_CATEGORIES,
    rate_aggregation: RateAggregation | None = None,
    name: str = "",
) -> TeamAggregate:
    """Aggregate a roster into a TeamAggregate.

    Args:
        roster: Active members in roster order. ZScoredRecords contribute
            z-scores; plain StatRecords contribute 0 to z totals.
        categories: Category set to aggregate.
        rate_aggregation: Percentage aggregation mode. Defaults to the
            team_rate_aggregation setting (simple mean unless configured).
        name: Team name carried on the result.

    Returns:
        TeamAggregate. An empty roster yields all-zero values.
    """
    if rate_aggregation is None:
        rate_aggregation = RateAggregation(get_settings().team_rate_aggregation)

    split = [_split(member) for member in roster]
    records = [record for record, _ in split]

    values: dict[CategoryKey, float] = {}
    z_totals: dict[CategoryKey, float] = {}
    contributions: dict[CategoryKey, tuple[Contribution, ...]] = {}
    z_contributions: dict[CategoryKey, tuple[Contribution, ...]] = {}

    for category in categories:
        key = category.key
        if category.is_percentage:
            contributions[key] = tuple(
                Contribution(r.player_name, r.value(key)) for r in records
            )
            values[key] = _rate_value(category, records, rate_aggregation)
        else:
            contributions[key] = tuple(
                Contribution(r.player_name, r.get(key)) for r in records
            )
            values[key] = sum(c.value for c in contributions[key])

        z_contributions[key] = tuple(
            Contribution(r.player_name, scored.signed_z(key) if scored else 0.0)
            for r, scored in split
        )
        z_totals[key] = sum(c.value for c in z_contributions[key])

    return TeamAggregate(
        name=name,
        values=MappingProxyType(values),
        z_totals=MappingProxyType(z_totals),
        contributions=MappingProxyType(contributions),
        z_contributions=MappingProxyType(z_contributions),
        total_value=sum(z_totals.values()),
        player_count=len(records),
    )


def games_weighted_strength(entries: Iterable[tuple[float, float]]) -> float:
    """Schedule strength: Σ games × total value.

    Args:
        entries: (games in the window, player total value) pairs for the
            active roster. Game counts come from the caller's schedule.
    """
    return sum(games * value for games, value in entries)


__all__ = [
    "Contribution",
    "RateAggregation",
    "TeamAggregate",
    "aggregate_team",
    "games_weighted_strength",
]
