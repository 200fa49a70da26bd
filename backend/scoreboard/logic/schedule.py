"""
Round scheduling: card count, trump suit, and set/round counters.

A set is always ``rounds_per_set`` rounds long and sweeps the card count
one step per round between 1 and ``max_cards`` in the chosen direction.
"""

from __future__ import annotations

from scoreboard.logic.enums import SUIT_ORDER, CardCountDirection, Suit
from scoreboard.logic.settings import GameSettings
from scoreboard.logic.types import RoundSchedule


def starting_card_count(direction: CardCountDirection, max_cards: int = 8) -> int:
    """Card count for round 1 of a set."""
    return max_cards if direction == CardCountDirection.DESCENDING else 1


def card_count_for_round(round_number: int, direction: CardCountDirection, max_cards: int = 8) -> int:
    """Derive the card count from the round counter alone.

    Used to normalize persisted state, where the stored card count is not
    trusted.
    """
    if direction == CardCountDirection.DESCENDING:
        return max_cards + 1 - (round_number % max_cards or max_cards)
    return (round_number - 1) % max_cards + 1


def trump_after(round_number: int) -> Suit:
    """Trump for the round that follows ``round_number``.

    Indexed by the round number *before* advancing, so round 1 -> 2 gives
    hearts and a set rollover from round 8 gives spades.
    """
    return SUIT_ORDER[round_number % len(SUIT_ORDER)]


def initial_schedule(
    direction: CardCountDirection | None = None,
    settings: GameSettings | None = None,
) -> RoundSchedule:
    """Schedule for round 1 of set 1."""
    game_settings = settings or GameSettings()
    chosen = direction or game_settings.default_direction
    return RoundSchedule(
        set_number=1,
        round_number=1,
        card_count=starting_card_count(chosen, game_settings.max_cards),
        trump_suit=SUIT_ORDER[0],
        direction=chosen,
    )


def advance_schedule(schedule: RoundSchedule, settings: GameSettings | None = None) -> RoundSchedule:
    """Move to the next round, rolling into a new set after the last round."""
    game_settings = settings or GameSettings()
    trump = trump_after(schedule.round_number)

    if schedule.round_number >= game_settings.rounds_per_set:
        return schedule.model_copy(
            update={
                "set_number": schedule.set_number + 1,
                "round_number": 1,
                "card_count": starting_card_count(schedule.direction, game_settings.max_cards),
                "trump_suit": trump,
            },
        )

    step = -1 if schedule.direction == CardCountDirection.DESCENDING else 1
    return schedule.model_copy(
        update={
            "round_number": schedule.round_number + 1,
            "card_count": schedule.card_count + step,
            "trump_suit": trump,
        },
    )


def with_direction(
    schedule: RoundSchedule,
    direction: CardCountDirection,
    settings: GameSettings | None = None,
) -> RoundSchedule:
    """Re-affirm the direction at the start of a set and reset the card count to match."""
    game_settings = settings or GameSettings()
    return schedule.model_copy(
        update={
            "direction": direction,
            "card_count": starting_card_count(direction, game_settings.max_cards),
        },
    )
