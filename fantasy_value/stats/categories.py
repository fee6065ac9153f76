"""Statistical category descriptors.

A category set is passed explicitly to every engine so that season
rankings (nine categories) and game-log scoring (eleven stats with grouped
field goal / free throw umbrella keys) run through the same code.

Example:
    >>> from fantasy_value.stats.categories import GAME_CATEGORIES
    >>> sorted(GAME_CATEGORIES.expand({"field_goals"}))
    ['field_goals', 'field_goals_attempted', 'field_goals_made']
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from fantasy_value.types import CategoryKey, UnknownCategoryError


@dataclass(frozen=True)
class StatCategory:
    """Static descriptor for one statistical category.

    Attributes:
        key: Unique identifier, e.g. "points".
        label: Short display label, e.g. "PTS".
        full_name: Long display name.
        higher_is_better: False only for turnovers.
        is_percentage: True for FG% and FT%.
        made_key: Makes stat backing a percentage category.
        attempts_key: Attempts stat used to weight a percentage category.
        z_key: Column holding a stored z-score for this category.
        yahoo_stat_id: Yahoo Fantasy stat id for the category.
    """

    key: CategoryKey
    label: str
    full_name: str
    higher_is_better: bool = True
    is_percentage: bool = False
    made_key: CategoryKey | None = None
    attempts_key: CategoryKey | None = None
    z_key: str | None = None
    yahoo_stat_id: str | None = None

    @property
    def is_volume_weighted(self) -> bool:
        """Whether attempts are known for this percentage category."""
        return self.is_percentage and self.attempts_key is not None

    @property
    def sign(self) -> float:
        """Multiplier applied to z-scores before summing into total value."""
        return 1.0 if self.higher_is_better else -1.0

    @property
    def z_column(self) -> str:
        """Column name for this category's stored z-score."""
        return self.z_key or f"{self.key}_z"


@dataclass(frozen=True)
class CategoryGroup:
    """Umbrella key that stands for several member categories."""

    key: str
    label: str
    full_name: str
    members: tuple[CategoryKey, ...]


def expand_groups(
    keys: Iterable[str], groups: Iterable[CategoryGroup]
) -> frozenset[str]:
    """Add the members of every umbrella key present in keys."""
    expanded = set(keys)
    for group in groups:
        if group.key in expanded:
            expanded.update(group.members)
    return frozenset(expanded)


@dataclass(frozen=True)
class CategorySet:
    """Immutable, ordered set of categories for one context.

    Order matters: z-score totals are summed in this order so results are
    reproducible for the same inputs.
    """

    name: str
    categories: tuple[StatCategory, ...]
    groups: tuple[CategoryGroup, ...] = field(default=())

    def __post_init__(self) -> None:
        keys = [c.key for c in self.categories]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Duplicate category keys in set '{self.name}'")

    def __iter__(self) -> Iterator[StatCategory]:
        return iter(self.categories)

    def __len__(self) -> int:
        return len(self.categories)

    def __contains__(self, key: object) -> bool:
        return any(c.key == key for c in self.categories)

    @property
    def keys(self) -> tuple[CategoryKey, ...]:
        """Category keys in set order."""
        return tuple(c.key for c in self.categories)

    def get(self, key: CategoryKey) -> StatCategory:
        """Look up a category by key.

        Raises:
            UnknownCategoryError: If the key is not part of this set.
        """
        for category in self.categories:
            if category.key == key:
                return category
        raise UnknownCategoryError(key)

    def expand(self, keys: Iterable[str]) -> frozenset[str]:
        """Expand umbrella keys into their member keys.

        Unknown keys are kept so callers can still see what was asked for.
        """
        return expand_groups(keys, self.groups)

    def included(self, punted: Iterable[str]) -> tuple[CategoryKey, ...]:
        """Category keys left after removing the (expanded) punted keys."""
        excluded = self.expand(punted)
        return tuple(k for k in self.keys if k not in excluded)

    def by_yahoo_id(self) -> dict[str, StatCategory]:
        """Map Yahoo stat ids to categories."""
        return {c.yahoo_stat_id: c for c in self.categories if c.yahoo_stat_id}


# =============================================================================
# Predefined categories
# =============================================================================

POINTS = StatCategory("points", "PTS", "Points", z_key="points_z", yahoo_stat_id="12")
REBOUNDS = StatCategory(
    "rebounds", "REB", "Rebounds", z_key="rebounds_z", yahoo_stat_id="15"
)
ASSISTS = StatCategory("assists", "AST", "Assists", z_key="assists_z", yahoo_stat_id="16")
STEALS = StatCategory("steals", "STL", "Steals", z_key="steals_z", yahoo_stat_id="17")
BLOCKS = StatCategory("blocks", "BLK", "Blocks", z_key="blocks_z", yahoo_stat_id="18")
THREE_POINTERS = StatCategory(
    "three_pointers",
    "3PM",
    "Three Pointers",
    z_key="three_pointers_z",
    yahoo_stat_id="10",
)
FIELD_GOAL_PERCENTAGE = StatCategory(
    "field_goal_percentage",
    "FG%",
    "Field Goal %",
    is_percentage=True,
    made_key="field_goals_made",
    attempts_key="field_goals_attempted",
    z_key="fg_percentage_z",
    yahoo_stat_id="5",
)
FREE_THROW_PERCENTAGE = StatCategory(
    "free_throw_percentage",
    "FT%",
    "Free Throw %",
    is_percentage=True,
    made_key="free_throws_made",
    attempts_key="free_throws_attempted",
    z_key="ft_percentage_z",
    yahoo_stat_id="8",
)
TURNOVERS = StatCategory(
    "turnovers",
    "TO",
    "Turnovers",
    higher_is_better=False,
    z_key="turnovers_z",
    yahoo_stat_id="19",
)
FIELD_GOALS_MADE = StatCategory("field_goals_made", "FGM", "Field Goals Made")
FIELD_GOALS_ATTEMPTED = StatCategory(
    "field_goals_attempted", "FGA", "Field Goals Attempted", higher_is_better=False
)
FREE_THROWS_MADE = StatCategory("free_throws_made", "FTM", "Free Throws Made")
FREE_THROWS_ATTEMPTED = StatCategory(
    "free_throws_attempted", "FTA", "Free Throws Attempted", higher_is_better=False
)

FIELD_GOALS_GROUP = CategoryGroup(
    "field_goals", "FG", "Field Goals", ("field_goals_made", "field_goals_attempted")
)
FREE_THROWS_GROUP = CategoryGroup(
    "free_throws", "FT", "Free Throws", ("free_throws_made", "free_throws_attempted")
)

SEASON_CATEGORIES = CategorySet(
    name="season",
    categories=(
        POINTS,
        REBOUNDS,
        ASSISTS,
        STEALS,
        BLOCKS,
        THREE_POINTERS,
        FIELD_GOAL_PERCENTAGE,
        FREE_THROW_PERCENTAGE,
        TURNOVERS,
    ),
)

CATEGORY_GROUPS: tuple[CategoryGroup, ...] = (FIELD_GOALS_GROUP, FREE_THROWS_GROUP)

GAME_CATEGORIES = CategorySet(
    name="game",
    categories=(
        POINTS,
        REBOUNDS,
        ASSISTS,
        STEALS,
        BLOCKS,
        THREE_POINTERS,
        FIELD_GOALS_MADE,
        FIELD_GOALS_ATTEMPTED,
        FREE_THROWS_MADE,
        FREE_THROWS_ATTEMPTED,
        TURNOVERS,
    ),
    groups=CATEGORY_GROUPS,
)


__all__ = [
    "ASSISTS",
    "BLOCKS",
    "CATEGORY_GROUPS",
    "FIELD_GOALS_ATTEMPTED",
    "FIELD_GOALS_GROUP",
    "FIELD_GOALS_MADE",
    "FIELD_GOAL_PERCENTAGE",
    "FREE_THROWS_ATTEMPTED",
    "FREE_THROWS_GROUP",
    "FREE_THROWS_MADE",
    "FREE_THROW_PERCENTAGE",
    "GAME_CATEGORIES",
    "POINTS",
    "REBOUNDS",
    "SEASON_CATEGORIES",
    "STEALS",
    "THREE_POINTERS",
    "TURNOVERS",
    "CategoryGroup",
    "CategorySet",
    "StatCategory",
    "expand_groups",
]
