"""Fantasy basketball valuation.

A library for turning raw NBA box-score rows into comparable fantasy
values: cohort z-scores with volume-weighted shooting percentages,
category punting, points-league scoring, team aggregation and
head-to-head matchup comparison.

Example:
    >>> from fantasy_value.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.min_games_played)
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Fantasy Value Team"

# Public API exports
from fantasy_value.config import Settings, get_settings

__all__ = [
    "Settings",
    "__author__",
    "__version__",
    "get_settings",
]
