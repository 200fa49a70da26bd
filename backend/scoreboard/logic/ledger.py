"""
Append-only round history and points ledger for the active game.

History keeps a full snapshot of every scored round. The points ledger
keeps only what each player earned that round and backs the live points
table, including its derived "Total" and "Current round" rows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from scoreboard.logic.scoring import score
from scoreboard.logic.types import HistoryEntry, PlayerPoints, PointsLedgerEntry

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scoreboard.logic.types import Player, RoundSchedule


def totals_row(players: Sequence[Player]) -> list[PlayerPoints]:
    """Cumulative score per player, for the "Total" row."""
    return [PlayerPoints(name=p.name, round_score=p.score) for p in players]


def current_round_row(players: Sequence[Player]) -> list[PlayerPoints]:
    """Points each player would earn if the round were scored now."""
    return [PlayerPoints(name=p.name, round_score=score(p.bid, p.tricks, 0).round_score) for p in players]


class GameLedger:
    """History entries and points rows for one game, in completion order."""

    def __init__(
        self,
        history: Iterable[HistoryEntry] = (),
        points: Iterable[PointsLedgerEntry] = (),
    ) -> None:
        self._history: list[HistoryEntry] = list(history)
        self._points: list[PointsLedgerEntry] = list(points)

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def points_table(self) -> tuple[PointsLedgerEntry, ...]:
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._history)

    def append(self, entry: HistoryEntry) -> None:
        self._history.append(entry)

    def append_points(self, entry: PointsLedgerEntry) -> None:
        self._points.append(entry)

    def record_round(
        self,
        schedule: RoundSchedule,
        players: Sequence[Player],
        round_scores: Sequence[int],
    ) -> tuple[HistoryEntry, PointsLedgerEntry]:
        """Record a scored round in both history and the points ledger.

        ``players`` must already carry their new scores; ``round_scores``
        holds what each of them earned, in the same order.
        """
        entry = HistoryEntry(
            set_number=schedule.set_number,
            round_number=schedule.round_number,
            card_count=schedule.card_count,
            trump_suit=schedule.trump_suit,
            players=tuple(p.snapshot() for p in players),
        )
        points = PointsLedgerEntry(
            id=str(uuid4()),
            set_number=schedule.set_number,
            round_number=schedule.round_number,
            players=tuple(
                PlayerPoints(name=p.name, round_score=earned) for p, earned in zip(players, round_scores, strict=True)
            ),
        )
        self.append(entry)
        self.append_points(points)
        return entry, points
