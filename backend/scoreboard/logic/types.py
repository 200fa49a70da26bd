"""
Pydantic models for scoreboard data structures.

Live players are mutable and owned by the active session. Everything that
crosses into history, the points ledger, or the archive is a frozen
snapshot. Field aliases are the camelCase names used by the persisted blob.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scoreboard.logic.enums import CardCountDirection, SessionPhase, Suit


class Player(BaseModel):
    """A participant in the active game. bid/tricks reset every round."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    score: int = 0
    bid: int = Field(default=0, ge=0)
    tricks: int = Field(default=0, ge=0)

    def snapshot(self) -> PlayerSnapshot:
        return PlayerSnapshot(name=self.name, score=self.score, bid=self.bid, tricks=self.tricks)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class PlayerSnapshot(_Record):
    """Immutable copy of a player taken when a round or game is recorded."""

    name: str
    score: int
    bid: int = 0
    tricks: int = 0


class RoundSchedule(_Record):
    """Set/round counters plus the card count and trump they imply."""

    set_number: int = Field(default=1, ge=1, alias="set")
    round_number: int = Field(default=1, ge=1, alias="round")
    card_count: int = Field(default=8, ge=1)
    trump_suit: Suit = Suit.SPADES
    direction: CardCountDirection = Field(default=CardCountDirection.DESCENDING, alias="cardCountDirection")


class HistoryEntry(_Record):
    """Full snapshot of a completed round."""

    set_number: int = Field(ge=1, alias="set")
    round_number: int = Field(ge=1, alias="round")
    card_count: int
    trump_suit: Suit
    players: tuple[PlayerSnapshot, ...]

    def leading_names(self) -> list[str]:
        """Names of the players holding the top score after this round."""
        if not self.players:
            return []
        top = max(p.score for p in self.players)
        return [p.name for p in self.players if p.score == top]

    def losing_names(self) -> list[str]:
        """Names of the players holding the bottom score after this round."""
        if not self.players:
            return []
        bottom = min(p.score for p in self.players)
        return [p.name for p in self.players if p.score == bottom]


class PlayerPoints(_Record):
    """Points a single player earned in one round (0 or 10 + bid)."""

    name: str
    round_score: int


class PointsLedgerEntry(_Record):
    """Compact per-round points row for the live and archived points tables."""

    id: str
    set_number: int = Field(ge=1, alias="set")
    round_number: int = Field(ge=1, alias="round")
    players: tuple[PlayerPoints, ...]


class GameRecord(_Record):
    """A finished game, frozen into the archive."""

    id: str
    date: datetime
    players: tuple[PlayerSnapshot, ...]
    rounds: tuple[HistoryEntry, ...] = ()
    points_table: tuple[PointsLedgerEntry, ...] = ()


class PlayerStanding(_Record):
    """Final placement of a player. Tied players share a rank."""

    rank: int
    name: str
    score: int


class GameEndResult(_Record):
    """Outcome of ending a game."""

    winners: tuple[str, ...]
    standings: tuple[PlayerStanding, ...]
    record: GameRecord


class GameSessionState(_Record):
    """Everything needed to resume a session, in persisted-blob shape."""

    players: tuple[Player, ...] = ()
    round_number: int = Field(default=1, ge=1, alias="round")
    set_number: int = Field(default=1, ge=1, alias="set")
    card_count: int = Field(default=8, ge=1)
    trump_suit: Suit = Suit.SPADES
    game_active: bool = False
    phase: SessionPhase = SessionPhase.NOT_STARTED
    direction: CardCountDirection = Field(default=CardCountDirection.DESCENDING, alias="cardCountDirection")
    direction_pending: bool = False
    game_history: tuple[HistoryEntry, ...] = ()
    past_games: tuple[GameRecord, ...] = ()
    points_table: tuple[PointsLedgerEntry, ...] = ()
    is_dark_mode: bool = False

    @property
    def schedule(self) -> RoundSchedule:
        return RoundSchedule(
            set_number=self.set_number,
            round_number=self.round_number,
            card_count=self.card_count,
            trump_suit=self.trump_suit,
            direction=self.direction,
        )
