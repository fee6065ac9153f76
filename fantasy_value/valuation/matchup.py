"""Head-to-head category comparison and all-pairs matchup matrix.

Each category is won by the strictly greater value, or the strictly smaller
one for lower-is-better categories (turnovers). Equal values tie. When
either side has no value for a category, the category is skipped and
counts toward nothing.

Example:
    >>> result = compare(team_a.values, team_b.values, SEASON_CATEGORIES)
    >>> result.wins, result.losses, result.ties
    (5, 3, 1)
    >>> matrix = MatchupMatrix.build({"A": a_stats, "B": b_stats}, SEASON_CATEGORIES)
    >>> matrix.standing("A").is_undefeated
    True
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

from fantasy_value.logging import get_logger
from fantasy_value.stats.categories import CategorySet, StatCategory
from fantasy_value.types import CategoryKey, CategoryValues

logger = get_logger(__name__)


class Outcome(Enum):
    """Category result from the first side's perspective."""

    WIN = "win"
    LOSS = "loss"
    TIE = "tie"

    def reversed(self) -> Outcome:
        if self is Outcome.WIN:
            return Outcome.LOSS
        if self is Outcome.LOSS:
            return Outcome.WIN
        return Outcome.TIE


@dataclass(frozen=True)
class CategoryResult:
    """Values and winner for one compared category."""

    key: CategoryKey
    value1: float
    value2: float
    outcome: Outcome

    def reversed(self) -> CategoryResult:
        return CategoryResult(self.key, self.value2, self.value1, self.outcome.reversed())


@dataclass(frozen=True)
class MatchupResult:
    """Per-category results plus win/loss/tie counts for side one."""

    details: tuple[CategoryResult, ...]
    skipped: tuple[CategoryKey, ...] = ()

    @property
    def wins(self) -> int:
        return sum(1 for d in self.details if d.outcome is Outcome.WIN)

    @property
    def losses(self) -> int:
        return sum(1 for d in self.details if d.outcome is Outcome.LOSS)

    @property
    def ties(self) -> int:
        return sum(1 for d in self.details if d.outcome is Outcome.TIE)

    @property
    def is_win(self) -> bool:
        """More categories won than lost."""
        return self.wins > self.losses

    @property
    def is_loss(self) -> bool:
        return self.losses > self.wins

    def result(self, key: CategoryKey) -> CategoryResult | None:
        for detail in self.details:
            if detail.key == key:
                return detail
        return None

    def reversed(self) -> MatchupResult:
        """The same matchup seen from the other side."""
        return MatchupResult(
            details=tuple(d.reversed() for d in self.details),
            skipped=self.skipped,
        )


def _comparable(value: float | None) -> float | None:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _outcome(category: StatCategory, value1: float, value2: float) -> Outcome:
    if value1 == value2:
        return Outcome.TIE
    first_greater = value1 > value2
    if first_greater == category.higher_is_better:
        return Outcome.WIN
    return Outcome.LOSS


def compare(
    entity_a: CategoryValues,
    entity_b: CategoryValues,
    categories: CategorySet | Sequence[StatCategory],
) -> MatchupResult:
    """Compare two entities category by category.

    Args:
        entity_a: Category values for side one (the perspective side).
        entity_b: Category values for side two.
        categories: Categories to compare, in order.

    Returns:
        MatchupResult from entity_a's perspective. Categories where either
        value is missing, None or NaN are listed in ``skipped``.
    """
    details: list[CategoryResult] = []
    skipped: list[CategoryKey] = []
    for category in categories:
        value1 = _comparable(entity_a.get(category.key))
        value2 = _comparable(entity_b.get(category.key))
        if value1 is None or value2 is None:
            skipped.append(category.key)
            continue
        details.append(
            CategoryResult(category.key, value1, value2, _outcome(category, value1, value2))
        )
    return MatchupResult(details=tuple(details), skipped=tuple(skipped))


STRENGTH_CATEGORY = StatCategory("strength", "STR", "Schedule Strength")


def compare_strength(strength_a: float | None, strength_b: float | None) -> MatchupResult:
    """One-category comparison of pre-multiplied strength values."""
    return compare(
        {STRENGTH_CATEGORY.key: strength_a},
        {STRENGTH_CATEGORY.key: strength_b},
        (STRENGTH_CATEGORY,),
    )


# =============================================================================
# Matchup matrix
# =============================================================================


@dataclass(frozen=True)
class Standing:
    """A team's record against every other team in the matrix.

    Attributes:
        key: Team key.
        matchup_wins: Opponents beaten (more categories won than lost).
        matchup_losses: Opponents lost to.
        matchup_ties: Opponents split with.
        category_wins: Categories won across all matchups.
        category_losses: Categories lost across all matchups.
        category_ties: Categories tied across all matchups.
    """

    key: str
    matchup_wins: int
    matchup_losses: int
    matchup_ties: int
    category_wins: int
    category_losses: int
    category_ties: int

    @property
    def opponents(self) -> int:
        return self.matchup_wins + self.matchup_losses + self.matchup_ties

    @property
    def is_undefeated(self) -> bool:
        """Beat every other team."""
        return self.opponents > 0 and self.matchup_wins == self.opponents

    @property
    def is_winless(self) -> bool:
        """Lost to every other team."""
        return self.opponents > 0 and self.matchup_losses == self.opponents


@dataclass(frozen=True)
class MatchupMatrix:
    """All-pairs matchup results among N teams.

    Each unordered pair is compared once; the reverse direction is the
    mirrored result, so result(a, b).wins == result(b, a).losses always.
    """

    teams: tuple[str, ...]
    results: Mapping[tuple[str, str], MatchupResult] = field(repr=False)

    @classmethod
    def build(
        cls,
        teams: Mapping[str, CategoryValues],
        categories: CategorySet | Sequence[StatCategory],
    ) -> MatchupMatrix:
        """Compare every pair of teams.

        Args:
            teams: Team key -> category values. Teams keep mapping order.
            categories: Categories to compare.
        """
        keys = tuple(teams)
        results: dict[tuple[str, str], MatchupResult] = {}
        for i, home in enumerate(keys):
            for away in keys[i + 1 :]:
                result = compare(teams[home], teams[away], categories)
                results[(home, away)] = result
                results[(away, home)] = result.reversed()

        logger.debug("Built matchup matrix for {} teams", len(keys))
        return cls(teams=keys, results=results)

    def result(self, home: str, away: str) -> MatchupResult | None:
        """Result for home vs away; None for a team against itself or unknown keys."""
        return self.results.get((home, away))

    def standing(self, key: str) -> Standing:
        """Aggregate record of one team against the rest of the field."""
        if key not in self.teams:
            raise KeyError(key)
        opponents = [self.results[(key, other)] for other in self.teams if other != key]
        return Standing(
            key=key,
            matchup_wins=sum(1 for r in opponents if r.is_win),
            matchup_losses=sum(1 for r in opponents if r.is_loss),
            matchup_ties=sum(1 for r in opponents if not r.is_win and not r.is_loss),
            category_wins=sum(r.wins for r in opponents),
            category_losses=sum(r.losses for r in opponents),
            category_ties=sum(r.ties for r in opponents),
        )

    def standings(self) -> list[Standing]:
        """Standings for every team, best matchup record first."""
        return sorted(
            (self.standing(key) for key in self.teams),
            key=lambda s: (s.matchup_wins, s.category_wins),
            reverse=True,
        )


__all__ = [
    "STRENGTH_CATEGORY",
    "CategoryResult",
    "MatchupMatrix",
    "MatchupResult",
    "Outcome",
    "Standing",
    "compare",
    "compare_strength",
]
