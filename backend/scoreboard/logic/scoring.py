"""
Exact-bid scoring, rankings, and display queries.

A player who takes exactly the number of tricks they bid earns 10 + bid.
Any miss earns nothing; there is no partial credit and no penalty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from scoreboard.logic.types import PlayerStanding

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scoreboard.logic.types import Player, PlayerSnapshot

EXACT_BID_BONUS = 10


class RoundScore(NamedTuple):
    new_score: int
    round_score: int


def score(bid: int, tricks: int, prior_score: int) -> RoundScore:
    """Score one player's round."""
    if bid == tricks:
        earned = EXACT_BID_BONUS + bid
        return RoundScore(prior_score + earned, earned)
    return RoundScore(prior_score, 0)


def leading_score(players: Sequence[Player | PlayerSnapshot]) -> int:
    """Highest score on the roster, 0 when empty."""
    return max((p.score for p in players), default=0)


def losing_score(players: Sequence[Player | PlayerSnapshot]) -> int:
    """Lowest score on the roster, 0 when empty."""
    return min((p.score for p in players), default=0)


def determine_winners(players: Sequence[Player | PlayerSnapshot]) -> list[str]:
    """All players tied at the top score."""
    if not players:
        return []
    top = leading_score(players)
    return [p.name for p in players if p.score == top]


def rank_players(players: Sequence[Player | PlayerSnapshot]) -> list[PlayerStanding]:
    """
    Order players by score, highest first, with competition ranking.

    Tied players share a rank and the next rank skips over them
    (50, 50, 40 -> 1, 1, 3). Ties keep roster order.
    """
    ordered = sorted(players, key=lambda p: p.score, reverse=True)
    standings: list[PlayerStanding] = []
    for position, player in enumerate(ordered, start=1):
        if standings and standings[-1].score == player.score:
            rank = standings[-1].rank
        else:
            rank = position
        standings.append(PlayerStanding(rank=rank, name=player.name, score=player.score))
    return standings


def summary_text(players: Sequence[Player | PlayerSnapshot]) -> str:
    """Plain-text scores for sharing, one "Name: score" per line."""
    return "\n".join(f"{p.name}: {p.score}" for p in players)
