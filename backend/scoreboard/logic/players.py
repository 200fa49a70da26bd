"""
Ordered player roster with per-round field editing and seat rotation.

Position 0 bids first; the last position deals. Rotating once per round
cycles both roles through every player over a set.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scoreboard.logic.enums import PlayerField
from scoreboard.logic.exceptions import BelowMinimumError, CapacityExceededError, NotFoundError
from scoreboard.logic.types import Player

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = structlog.get_logger()


def rotate_players(players: list[Player]) -> list[Player]:
    """Move the first player to the end, keeping the others in order."""
    if not players:
        return []
    return [*players[1:], players[0]]


class PlayerRegistry:
    """Mutable roster owned by the active game session."""

    def __init__(self, players: Iterable[Player] = (), *, min_players: int = 2, max_players: int = 7) -> None:
        self._players: list[Player] = list(players)
        self._min_players = min_players
        self._max_players = max_players

    @classmethod
    def from_names(cls, names: Iterable[str], *, min_players: int = 2, max_players: int = 7) -> PlayerRegistry:
        return cls((Player(name=name) for name in names), min_players=min_players, max_players=max_players)

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)

    def __getitem__(self, index: int) -> Player:
        return self._players[index]

    @property
    def players(self) -> list[Player]:
        """The live roster in bidding order."""
        return list(self._players)

    @property
    def first_bidder(self) -> Player | None:
        return self._players[0] if self._players else None

    @property
    def dealer(self) -> Player | None:
        return self._players[-1] if self._players else None

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._players):
            raise NotFoundError(f"no player at index {index}")

    def add(self, name: str | None = None) -> Player:
        """Append a player, defaulting the name to "Player {n}"."""
        if len(self._players) >= self._max_players:
            raise CapacityExceededError(f"maximum number of players ({self._max_players}) reached")
        player = Player(name=name if name is not None else f"Player {len(self._players) + 1}")
        self._players.append(player)
        logger.info("player added", player_name=player.name, roster_size=len(self._players))
        return player

    def remove(self, index: int) -> Player:
        if len(self._players) <= self._min_players:
            raise BelowMinimumError(f"minimum of {self._min_players} players required")
        self._check_index(index)
        player = self._players.pop(index)
        logger.info("player removed", player_name=player.name, roster_size=len(self._players))
        return player

    def rename(self, index: int, name: str) -> None:
        self._check_index(index)
        self._players[index].name = name

    def set_field(self, index: int, field: PlayerField | str, value: int) -> int:
        """Set a player's bid or tricks, clamped at zero. Returns the stored value."""
        self._check_index(index)
        field = PlayerField(field)
        clamped = max(0, value)
        setattr(self._players[index], field.value, clamped)
        return clamped

    def reset_round_fields(self) -> None:
        for player in self._players:
            player.bid = 0
            player.tricks = 0

    def rotate(self) -> None:
        self._players = rotate_players(self._players)

    def total_tricks(self) -> int:
        return sum(player.tricks for player in self._players)
