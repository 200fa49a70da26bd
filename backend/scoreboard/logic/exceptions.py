"""Typed domain exceptions for scoreboard rule violations.

All rejected operations raise a subclass of ScoreboardError and leave the
session untouched, so the caller can surface the message and carry on.
"""


class ScoreboardError(Exception):
    """Base exception for scoreboard rule violations."""


class CapacityExceededError(ScoreboardError):
    """Roster is already at the maximum number of players."""


class BelowMinimumError(ScoreboardError):
    """Roster is already at the minimum number of players."""


class InvalidTrickTotalError(ScoreboardError):
    """Recorded tricks do not add up to the cards dealt this round.

    Attributes:
        expected: Card count of the current round.
        actual: Sum of all players' tricks.

    """

    def __init__(self, *, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"tricks total {actual} does not match card count {expected}")


class InvalidStateError(ScoreboardError):
    """Operation is not valid in the current session phase."""


class RosterLockedError(InvalidStateError):
    """Players can no longer be added or removed in this part of the set."""


class NotFoundError(ScoreboardError):
    """Referenced archived game, round, or player does not exist."""


class UnsupportedSettingsError(ScoreboardError):
    """Game settings contain values the engine cannot honour."""


class StateDecodeError(ScoreboardError):
    """Persisted state blob could not be decoded."""
