"""Fantasy point scoring.

Points-league scoring is a fixed linear combination of counting stats. The
weights are a product rule and are not configurable.

Example:
    >>> score_fantasy_points(record)
    60.0
    >>> score_fantasy_points(record, {"field_goals"})  # drops FGM and FGA
    58.0
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from fantasy_value.stats.categories import CATEGORY_GROUPS, expand_groups
from fantasy_value.stats.records import StatRecord
from fantasy_value.types import CategoryKey
from fantasy_value.valuation.punting import RankedEntity, rerank

FANTASY_POINT_WEIGHTS: Mapping[CategoryKey, float] = MappingProxyType(
    {
        "points": 1.0,
        "rebounds": 1.2,
        "assists": 1.5,
        "steals": 3.0,
        "blocks": 3.0,
        "three_pointers": 0.5,
        "field_goals_made": 1.0,
        "field_goals_attempted": -0.5,
        "free_throws_made": 1.0,
        "free_throws_attempted": -0.5,
        "turnovers": -1.0,
    }
)


def score_fantasy_points(
    record: StatRecord | Mapping[CategoryKey, float | None],
    excluded_keys: Iterable[str] = frozenset(),
) -> float:
    """Fantasy points for one record.

    Umbrella keys ("field_goals", "free_throws") are expanded before the
    weights are applied. Absent or None stats contribute 0. The result is
    not rounded.

    Args:
        record: StatRecord or plain mapping of stat values.
        excluded_keys: Stats (or umbrella keys) to leave out.

    Returns:
        Fantasy point total.
    """
    values = record.values if isinstance(record, StatRecord) else record
    excluded = expand_groups(excluded_keys, CATEGORY_GROUPS)

    total = 0.0
    for key, weight in FANTASY_POINT_WEIGHTS.items():
        if key in excluded:
            continue
        value = values.get(key)
        if value is not None:
            total += value * weight
    return total


def rank_by_fantasy_points(
    records: Sequence[StatRecord],
    excluded_keys: Iterable[str] = frozenset(),
) -> list[RankedEntity[StatRecord]]:
    """Rank records by fantasy points, with and without exclusions.

    Original rank comes from full scoring, adjusted rank from scoring with
    excluded_keys removed. Rows are returned in adjusted-rank order.
    """
    excluded = frozenset(excluded_keys)
    full = [score_fantasy_points(r) for r in records]
    order = sorted(range(len(records)), key=lambda i: full[i], reverse=True)

    ranked = [records[i] for i in order]
    originals = [full[i] for i in order]
    adjusted = (
        [score_fantasy_points(r, excluded) for r in ranked] if excluded else originals
    )
    return rerank(ranked, originals, adjusted)


__all__ = ["FANTASY_POINT_WEIGHTS", "rank_by_fantasy_points", "score_fantasy_points"]
