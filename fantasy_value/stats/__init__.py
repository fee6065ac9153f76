"""Stat records, normalization, and cohort z-scores.

This module turns raw data-layer rows into canonical stat records and
scores them against their cohort.

Submodules:
    categories: Category descriptors and the season/game category sets
    records: Immutable StatRecord
    normalizer: Season, game-log and Yahoo row parsing
    averages: Per-game season averages from game logs
    zscore: Cohort statistics and z-score engine

Example:
    >>> from fantasy_value.stats import SEASON_CATEGORIES, SourceShape
    >>> from fantasy_value.stats import compute_z_scores, normalize_many
    >>> records = normalize_many(rows, SourceShape.SEASON_AVERAGE)
    >>> scored = compute_z_scores(records, SEASON_CATEGORIES)
"""

from __future__ import annotations

# Season averages
from fantasy_value.stats.averages import (
    average_games,
    qualifying,
    season_averages,
)

# Categories
from fantasy_value.stats.categories import (
    CATEGORY_GROUPS,
    GAME_CATEGORIES,
    SEASON_CATEGORIES,
    CategoryGroup,
    CategorySet,
    StatCategory,
    expand_groups,
)

# Normalizer
from fantasy_value.stats.normalizer import (
    Fraction,
    Missing,
    Nested,
    RawStatValue,
    Scalar,
    SourceShape,
    classify_raw,
    extract_stored_z_scores,
    normalize,
    normalize_many,
    parse_stat_value,
)
from fantasy_value.stats.records import StatRecord

# Z-score engine
from fantasy_value.stats.zscore import (
    CategoryStats,
    Cohort,
    ZScoredRecord,
    compute_z_scores,
    rank_by_total_value,
    to_frame,
)

__all__ = [
    "CATEGORY_GROUPS",
    "GAME_CATEGORIES",
    "SEASON_CATEGORIES",
    "CategoryGroup",
    "CategorySet",
    "CategoryStats",
    "Cohort",
    "Fraction",
    "Missing",
    "Nested",
    "RawStatValue",
    "Scalar",
    "SourceShape",
    "StatCategory",
    "StatRecord",
    "ZScoredRecord",
    "average_games",
    "classify_raw",
    "compute_z_scores",
    "expand_groups",
    "extract_stored_z_scores",
    "normalize",
    "normalize_many",
    "parse_stat_value",
    "qualifying",
    "rank_by_total_value",
    "season_averages",
    "to_frame",
]
