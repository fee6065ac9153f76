"""Cohort z-score engine.

Every category of every record is scored against the cohort it belongs to
(or against a separate reference cohort, such as qualified players only):

    z = (x - μ_cohort) / σ_cohort      (population σ)

Lower-is-better categories (turnovers) are sign-inverted before they enter
``total_value``, the canonical ranking metric, so a higher total is always
better.

Shooting percentages are weighted by attempt volume when every scored
member carries attempts. Each member's scored quantity is then its volume
impact rather than its raw rate:

    impact = attempts × (rate − league_rate),  league_rate = Σ(a·p) / Σa

so a 1-for-1 free-throw shooter barely moves the needle while a 90% shooter
on 500 attempts does. Without attempts the raw rate is z-scored.

Degenerate categories (no members, or identical values) score z = 0.

Example:
    >>> from fantasy_value.stats.categories import SEASON_CATEGORIES
    >>> scored = compute_z_scores(Cohort(records), SEASON_CATEGORIES)
    >>> ranked = rank_by_total_value(scored)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np
import pandas as pd

from fantasy_value.logging import get_logger
from fantasy_value.stats.categories import CategorySet, StatCategory
from fantasy_value.stats.records import StatRecord
from fantasy_value.types import CategoryKey

logger = get_logger(__name__)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class CategoryStats:
    """Cohort statistics for a single category.

    Attributes:
        key: Category key.
        mean: Mean of the scored quantity (raw value or volume impact).
        std: Population standard deviation of the scored quantity.
        count: Members that contributed (non-null values).
        weighted: Whether the quantity is a volume impact.
        league_rate: Attempt-weighted rate used for impacts.
    """

    key: CategoryKey
    mean: float
    std: float
    count: int
    weighted: bool = False
    league_rate: float | None = None

    @property
    def is_degenerate(self) -> bool:
        """True when z-scores cannot be formed (no spread or no members)."""
        return self.count == 0 or self.std == 0.0

    def z(self, quantity: float | None) -> float:
        """Z-score of a scored quantity; 0 for None or degenerate stats."""
        if quantity is None or self.is_degenerate:
            return 0.0
        return (quantity - self.mean) / self.std


class Cohort:
    """Ordered, immutable population of StatRecords.

    Statistics are derived on demand, never cached on the records, so a
    cohort with different members always yields fresh statistics.
    """

    def __init__(self, records: Iterable[StatRecord]) -> None:
        self._records: tuple[StatRecord, ...] = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StatRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> StatRecord:
        return self._records[index]

    @property
    def records(self) -> tuple[StatRecord, ...]:
        return self._records

    def has_volume(self, category: StatCategory) -> bool:
        """Whether every member with a rate also carries attempts (> 0 total)."""
        if not category.is_volume_weighted:
            return False
        attempts_key = category.attempts_key
        total = 0.0
        for record in self._records:
            if not record.has(category.key):
                continue
            if not record.has(attempts_key):
                return False
            total += record.get(attempts_key)
        return total > 0

    def category_stats(
        self, category: StatCategory, weight_by_volume: bool = True
    ) -> CategoryStats:
        """Compute mean/std for one category over this cohort."""
        if weight_by_volume and self.has_volume(category):
            return self._weighted_stats(category)

        values = [_raw_quantity(r, category) for r in self._records]
        present = np.array([v for v in values if v is not None], dtype=float)
        return _stats_from(category.key, present)

    def _weighted_stats(self, category: StatCategory) -> CategoryStats:
        members = [r for r in self._records if r.has(category.key)]
        rates = np.array([r.get(category.key) for r in members], dtype=float)
        attempts = np.array([r.get(category.attempts_key) for r in members], dtype=float)

        league_rate = float(np.sum(attempts * rates) / np.sum(attempts))
        impacts = attempts * (rates - league_rate)
        stats = _stats_from(category.key, impacts)
        return CategoryStats(
            key=stats.key,
            mean=stats.mean,
            std=stats.std,
            count=stats.count,
            weighted=True,
            league_rate=league_rate,
        )

    def statistics(
        self, categories: CategorySet, weight_by_volume: bool = True
    ) -> dict[CategoryKey, CategoryStats]:
        """Category statistics for every category in the set."""
        return {c.key: self.category_stats(c, weight_by_volume) for c in categories}


@dataclass(frozen=True)
class ZScoredRecord:
    """A StatRecord with per-category z-scores and its total value.

    Attributes:
        record: Source record.
        z_scores: Raw z-score per category, in category-set order.
        signed_z_scores: Z-scores with lower-is-better categories inverted.
        total_value: Sum of signed_z_scores.
    """

    record: StatRecord
    z_scores: Mapping[CategoryKey, float]
    signed_z_scores: Mapping[CategoryKey, float]
    total_value: float

    @property
    def category_keys(self) -> tuple[CategoryKey, ...]:
        return tuple(self.signed_z_scores)

    @property
    def player_name(self) -> str:
        return self.record.player_name

    def z(self, key: CategoryKey) -> float:
        return self.z_scores.get(key, 0.0)

    def signed_z(self, key: CategoryKey) -> float:
        return self.signed_z_scores.get(key, 0.0)

    @classmethod
    def from_signed(
        cls,
        record: StatRecord,
        signed_z: Mapping[CategoryKey, float],
        categories: CategorySet,
    ) -> ZScoredRecord:
        """Build from sign-corrected z-scores, e.g. ones stored by the data layer."""
        signed = {c.key: float(signed_z.get(c.key, 0.0)) for c in categories}
        raw = {c.key: c.sign * signed[c.key] for c in categories}
        return cls(
            record=record,
            z_scores=MappingProxyType(raw),
            signed_z_scores=MappingProxyType(signed),
            total_value=sum(signed.values()),
        )


# =============================================================================
# Helpers
# =============================================================================


def _raw_quantity(record: StatRecord, category: StatCategory) -> float | None:
    # Null rates are excluded; absent counting stats count as 0
    if category.is_percentage:
        return record.value(category.key)
    return record.get(category.key)


def _scored_quantity(
    record: StatRecord, category: StatCategory, stats: CategoryStats
) -> float | None:
    if not stats.weighted:
        return _raw_quantity(record, category)
    if not record.has(category.key) or not record.has(category.attempts_key):
        return None
    return record.get(category.attempts_key) * (
        record.get(category.key) - stats.league_rate
    )


def _stats_from(key: CategoryKey, values: np.ndarray) -> CategoryStats:
    if values.size == 0:
        return CategoryStats(key=key, mean=0.0, std=0.0, count=0)

    mean = float(np.mean(values))
    # Identical values give std 0 even where rounding would leave a residue
    std = 0.0 if np.ptp(values) == 0 else float(np.std(values, ddof=0))
    return CategoryStats(key=key, mean=mean, std=std, count=int(values.size))


# =============================================================================
# Public API
# =============================================================================


def compute_z_scores(
    cohort: Cohort | Sequence[StatRecord],
    categories: CategorySet,
    reference: Cohort | Sequence[StatRecord] | None = None,
    weight_by_volume: bool = True,
) -> list[ZScoredRecord]:
    """Z-score every record of a cohort.

    Args:
        cohort: Records to score, in order.
        categories: Active category set; totals sum in this order.
        reference: Population for mean/std. Defaults to the cohort itself.
        weight_by_volume: Weight percentage categories by attempts when
            attempts are available.

    Returns:
        One ZScoredRecord per cohort member, in cohort order.
    """
    cohort = cohort if isinstance(cohort, Cohort) else Cohort(cohort)
    if reference is None:
        reference = cohort
    elif not isinstance(reference, Cohort):
        reference = Cohort(reference)

    stats = reference.statistics(categories, weight_by_volume)
    for key, category_stats in stats.items():
        if category_stats.is_degenerate:
            logger.debug("Category '{}' is degenerate, scoring z = 0", key)

    logger.debug(
        "Scoring {} records against reference of {} ({} categories)",
        len(cohort),
        len(reference),
        len(categories),
    )

    scored: list[ZScoredRecord] = []
    for record in cohort:
        raw: dict[CategoryKey, float] = {}
        signed: dict[CategoryKey, float] = {}
        for category in categories:
            category_stats = stats[category.key]
            z = category_stats.z(_scored_quantity(record, category, category_stats))
            raw[category.key] = z
            signed[category.key] = category.sign * z
        scored.append(
            ZScoredRecord(
                record=record,
                z_scores=MappingProxyType(raw),
                signed_z_scores=MappingProxyType(signed),
                total_value=sum(signed.values()),
            )
        )
    return scored


def rank_by_total_value(records: Iterable[ZScoredRecord]) -> list[ZScoredRecord]:
    """Sort by total_value descending; ties keep input order."""
    return sorted(records, key=lambda r: r.total_value, reverse=True)


def to_frame(
    records: Iterable[ZScoredRecord], categories: CategorySet | None = None
) -> pd.DataFrame:
    """Tabulate z-scored records, one row each.

    Columns: identity metadata, raw values, sign-corrected z-scores under
    each category's stored z column (``points_z``, ``fg_percentage_z``...)
    so the frame reads back through extract_stored_z_scores, and
    ``total_value``. Keys outside categories get a ``<key>_z`` column.
    """
    rows = []
    for scored in records:
        row = scored.record.identity()
        for key in scored.category_keys:
            row[key] = scored.record.value(key)
        for key, z in scored.signed_z_scores.items():
            if categories is not None and key in categories:
                column = categories.get(key).z_column
            else:
                column = f"{key}_z"
            row[column] = z
        row["total_value"] = scored.total_value
        rows.append(row)
    return pd.DataFrame(rows)


__all__ = [
    "CategoryStats",
    "Cohort",
    "ZScoredRecord",
    "compute_z_scores",
    "rank_by_total_value",
    "to_frame",
]
