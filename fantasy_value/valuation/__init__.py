"""Valuation engines built on z-scored records.

Submodules:
    punting: Category punting and re-ranking
    scoring: Fantasy point scoring
    team: Roster aggregation and schedule strength
    matchup: Head-to-head comparison and matchup matrix

Key concepts:
    - Total value is the sum of sign-corrected z-scores
    - Punted totals are rescaled by 1/√n so different category subsets
      stay comparable
    - Matchups skip categories either side has no value for

Example:
    >>> from fantasy_value.valuation import aggregate_team, apply_punt, compare
    >>> rows = apply_punt(ranked_players, {"turnovers"})
    >>> team = aggregate_team(roster)
    >>> result = compare(team.values, other.values, SEASON_CATEGORIES)
"""

from __future__ import annotations

# Head-to-head
from fantasy_value.valuation.matchup import (
    STRENGTH_CATEGORY,
    CategoryResult,
    MatchupMatrix,
    MatchupResult,
    Outcome,
    Standing,
    compare,
    compare_strength,
)

# Punting
from fantasy_value.valuation.punting import (
    RankedEntity,
    adjusted_total_value,
    apply_punt,
    included_categories,
    rerank,
)

# Fantasy points
from fantasy_value.valuation.scoring import (
    FANTASY_POINT_WEIGHTS,
    rank_by_fantasy_points,
    score_fantasy_points,
)

# Team aggregation
from fantasy_value.valuation.team import (
    Contribution,
    RateAggregation,
    TeamAggregate,
    aggregate_team,
    games_weighted_strength,
)

__all__ = [
    "FANTASY_POINT_WEIGHTS",
    "STRENGTH_CATEGORY",
    "CategoryResult",
    "Contribution",
    "MatchupMatrix",
    "MatchupResult",
    "Outcome",
    "RankedEntity",
    "RateAggregation",
    "Standing",
    "TeamAggregate",
    "adjusted_total_value",
    "aggregate_team",
    "apply_punt",
    "compare",
    "compare_strength",
    "games_weighted_strength",
    "included_categories",
    "rank_by_fantasy_points",
    "rerank",
    "score_fantasy_points",
]
