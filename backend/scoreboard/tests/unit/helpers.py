"""Builders for scoreboard test data."""

from datetime import UTC, datetime

from scoreboard.logic.enums import Suit
from scoreboard.logic.types import GameRecord, HistoryEntry, PlayerPoints, PlayerSnapshot, PointsLedgerEntry


def make_record(
    game_id: str = "game-1",
    names: tuple[str, ...] = ("Asha", "Ben", "Cara"),
    num_rounds: int = 2,
) -> GameRecord:
    """An archived game where the first player made every bid of 1."""
    rounds = []
    points = []
    for i in range(num_rounds):
        round_number = i + 1
        snapshots = tuple(
            PlayerSnapshot(name=name, score=11 * round_number if seat == 0 else 0, bid=1, tricks=1 if seat == 0 else 0)
            for seat, name in enumerate(names)
        )
        rounds.append(
            HistoryEntry(
                set_number=1,
                round_number=round_number,
                card_count=9 - round_number,
                trump_suit=Suit.SPADES,
                players=snapshots,
            ),
        )
        points.append(
            PointsLedgerEntry(
                id=f"{game_id}-r{round_number}",
                set_number=1,
                round_number=round_number,
                players=tuple(
                    PlayerPoints(name=name, round_score=11 if seat == 0 else 0) for seat, name in enumerate(names)
                ),
            ),
        )
    final = rounds[-1].players if rounds else tuple(PlayerSnapshot(name=n, score=0) for n in names)
    return GameRecord(
        id=game_id,
        date=datetime(2026, 10, 1, 20, 0, tzinfo=UTC),
        players=final,
        rounds=tuple(rounds),
        points_table=tuple(points),
    )
