"""Category punting and re-ranking.

Punting drops categories from the ranking. The remaining sign-corrected
z-scores are re-summed and divided by √n, where n is the number of
categories left: a sum of n independent unit-variance z-scores has
variance n, so the divisor keeps totals from different-sized category
subsets on one scale.

    adjusted = Σ signed_z(c for c in included) / √n

The input is never mutated. Results are new RankedEntity rows ordered by
adjusted rank, each carrying the original rank for rank-delta display.

Example:
    >>> ranked = rank_by_total_value(compute_z_scores(cohort, SEASON_CATEGORIES))
    >>> rows = apply_punt(ranked, {"turnovers", "free_throw_percentage"})
    >>> [(r.original_rank, r.adjusted_rank) for r in rows[:3]]
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from fantasy_value.logging import get_logger
from fantasy_value.stats.categories import CATEGORY_GROUPS, CategorySet, expand_groups
from fantasy_value.types import CategoryKey, ValueScored

logger = get_logger(__name__)

T = TypeVar("T")
V = TypeVar("V", bound=ValueScored)


@dataclass(frozen=True)
class RankedEntity(Generic[T]):
    """One entity's position before and after an adjustment.

    Attributes:
        item: The ranked entity (player, team, game log...).
        original_rank: 1-based rank before adjustment.
        original_value: Value the original rank was based on.
        adjusted_value: Value after adjustment.
        adjusted_rank: 1-based rank by adjusted_value.
    """

    item: T
    original_rank: int
    original_value: float
    adjusted_value: float
    adjusted_rank: int

    @property
    def rank_change(self) -> int:
        """Positive when the entity moved up after adjustment."""
        return self.original_rank - self.adjusted_rank

    @property
    def value_change(self) -> float:
        return self.adjusted_value - self.original_value

    @property
    def adjusted_total_value(self) -> float:
        return self.adjusted_value


def rerank(
    items: Sequence[T],
    original_values: Sequence[float],
    adjusted_values: Sequence[float],
) -> list[RankedEntity[T]]:
    """Rank items by adjusted value, keeping their input position as original rank.

    Items must already be in original-rank order. Equal adjusted values
    keep that order.
    """
    order = sorted(range(len(items)), key=lambda i: adjusted_values[i], reverse=True)
    return [
        RankedEntity(
            item=items[i],
            original_rank=i + 1,
            original_value=original_values[i],
            adjusted_value=adjusted_values[i],
            adjusted_rank=position + 1,
        )
        for position, i in enumerate(order)
    ]


def included_categories(
    category_keys: Sequence[CategoryKey],
    punted_keys: Iterable[str],
    categories: CategorySet | None = None,
) -> tuple[CategoryKey, ...]:
    """Active category keys left after expanding and removing punted keys."""
    groups = categories.groups if categories is not None else CATEGORY_GROUPS
    excluded = expand_groups(punted_keys, groups)
    return tuple(k for k in category_keys if k not in excluded)


def adjusted_total_value(entity: ValueScored, included: Sequence[CategoryKey]) -> float:
    """Re-sum the included signed z-scores and scale by 1/√n (0 when n is 0)."""
    if not included:
        return 0.0
    total = sum(entity.signed_z_scores.get(key, 0.0) for key in included)
    return total / math.sqrt(len(included))


def apply_punt(
    ranked: Sequence[V],
    punted_keys: Iterable[str] = (),
    categories: CategorySet | None = None,
) -> list[RankedEntity[V]]:
    """Re-rank entities with some categories punted.

    Args:
        ranked: Entities ordered by total_value descending; original rank is
            the input position + 1.
        punted_keys: Category keys (or umbrella keys such as "field_goals")
            to exclude.
        categories: Full category set. Defaults to the categories scored on
            the first entity.

    Returns:
        RankedEntity rows in adjusted-rank order. When the punt removes no
        active category, adjusted values equal total_value and every rank
        is unchanged.
    """
    if not ranked:
        return []

    punted = tuple(punted_keys)
    all_keys = categories.keys if categories is not None else tuple(ranked[0].signed_z_scores)
    included = included_categories(all_keys, punted, categories)
    originals = [entity.total_value for entity in ranked]

    if len(included) == len(all_keys):
        return [
            RankedEntity(entity, i + 1, value, value, i + 1)
            for i, (entity, value) in enumerate(zip(ranked, originals))
        ]

    logger.debug(
        "Punting {} of {} categories for {} entities",
        len(all_keys) - len(included),
        len(all_keys),
        len(ranked),
    )
    adjusted = [adjusted_total_value(entity, included) for entity in ranked]
    return rerank(ranked, originals, adjusted)


__all__ = [
    "RankedEntity",
    "adjusted_total_value",
    "apply_punt",
    "included_categories",
    "rerank",
]
