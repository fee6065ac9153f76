"""Canonical stat record shared by every engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from fantasy_value.types import CategoryKey, PlayerId, SeasonId, TeamAbbreviation


def _freeze(values: Mapping[CategoryKey, float | None]) -> Mapping[CategoryKey, float | None]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class StatRecord:
    """One entity's stat values plus identity metadata.

    Produced by the normalizer from raw rows. A value of None means the
    category has no data for this record (for example a shooting percentage
    with zero attempts) and is distinct from 0.

    Attributes:
        values: Category key -> value (read-only mapping).
        player_id: NBA player id, when known.
        player_name: Display name.
        season: Season label, e.g. "2023-24".
        game_date: ISO date of a single game (game-log records only).
        team: Team abbreviation.
        games_played: Games behind a season average (1 for a game log).
    """

    values: Mapping[CategoryKey, float | None] = field(default_factory=dict)
    player_id: PlayerId | None = None
    player_name: str = ""
    season: SeasonId | None = None
    game_date: str | None = None
    team: TeamAbbreviation | None = None
    games_played: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.values, MappingProxyType):
            object.__setattr__(self, "values", _freeze(self.values))

    def value(self, key: CategoryKey) -> float | None:
        """Return the stored value, or None when absent."""
        return self.values.get(key)

    def get(self, key: CategoryKey, default: float = 0.0) -> float:
        """Return the stored value, substituting default for absent/None."""
        value = self.values.get(key)
        return default if value is None else value

    def has(self, key: CategoryKey) -> bool:
        """Whether the record carries a non-None value for key."""
        return self.values.get(key) is not None

    def with_values(self, **updates: float | None) -> StatRecord:
        """Return a copy with some values replaced."""
        merged = dict(self.values)
        merged.update(updates)
        return replace(self, values=_freeze(merged))

    def identity(self) -> dict[str, Any]:
        """Identity metadata as a plain dict (for tables and exports)."""
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "season": self.season,
            "game_date": self.game_date,
            "team": self.team,
            "games_played": self.games_played,
        }


__all__ = ["StatRecord"]
