"""Type definitions and protocols for fantasy valuation.

This module defines common types, protocols, and type aliases used throughout
the application. Using protocols lets players and team aggregates flow
through the same ranking code without sharing a base class.

Example:
    >>> from fantasy_value.types import ValueScored
    >>> def best(entities: list[ValueScored]) -> ValueScored:
    ...     return max(entities, key=lambda e: e.total_value)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

# =============================================================================
# Type Aliases
# =============================================================================

PlayerId = int
CategoryKey = str
SeasonId = str
TeamAbbreviation = str

# Category key -> value; None marks a category with no data (e.g. no attempts)
CategoryValues = Mapping[CategoryKey, "float | None"]


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class ValueScored(Protocol):
    """Protocol for anything ranked by sign-corrected z-scores.

    Satisfied by ZScoredRecord (players) and TeamAggregate (teams).
    """

    @property
    def signed_z_scores(self) -> Mapping[CategoryKey, float]:
        """Per-category z-scores with lower-is-better categories inverted."""
        ...

    @property
    def total_value(self) -> float:
        """Sum of the sign-corrected z-scores."""
        ...


# =============================================================================
# Exceptions
# =============================================================================


class FantasyValueError(Exception):
    """Base exception for fantasy valuation errors."""


class UnknownCategoryError(FantasyValueError, KeyError):
    """Requested category key is not part of the category set."""


class UnsupportedSourceShapeError(FantasyValueError, ValueError):
    """Raw row shape is not one the normalizer understands."""
