"""
String enum definitions for Kachuful scoreboard concepts.
"""

from enum import Enum


class Suit(str, Enum):
    """Trump suit, valued by its display symbol."""

    SPADES = "♠"
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"


# Trump rotation order
SUIT_ORDER: tuple[Suit, ...] = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)


class CardCountDirection(str, Enum):
    """Whether the dealt card count rises or falls across a set."""

    ASCENDING = "ascending"  # 1 -> 8
    DESCENDING = "descending"  # 8 -> 1


class SessionPhase(str, Enum):
    """Lifecycle phase of a game session."""

    NOT_STARTED = "not_started"
    BIDDING = "bidding"  # bids and tricks are being entered
    LOCKED = "locked"  # round scored, waiting for next_round()
    ENDED = "ended"


class PlayerField(str, Enum):
    """Per-round player fields editable during a round."""

    BID = "bid"
    TRICKS = "tricks"
