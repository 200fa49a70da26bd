"""Centralized game settings for the Kachuful scoreboard."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from scoreboard.logic.enums import CardCountDirection
from scoreboard.logic.exceptions import UnsupportedSettingsError

DEFAULT_PLAYER_NAMES: tuple[str, ...] = ("Player 1", "Player 2", "Player 3", "Player 4", "Player 5")


class GameSettings(BaseModel):
    """
    Configuration for roster limits, set structure, and session policies.

    Defaults reproduce the classic 2-7 player, 8-round-set game.
    """

    model_config = ConfigDict(frozen=True)

    # --- Roster ---
    min_players: int = 2
    max_players: int = 7
    default_player_names: tuple[str, ...] = DEFAULT_PLAYER_NAMES

    # --- Set Structure ---
    rounds_per_set: int = 8
    max_cards: int = 8
    default_direction: CardCountDirection = CardCountDirection.DESCENDING

    # --- Session Policies ---
    roster_change_round_limit: int = 2  # add/remove allowed while round <= this
    archive_abandoned_games: bool = False  # archive an unfinished game on start_new_game()


def validate_settings(settings: GameSettings) -> None:
    """Validate that the settings describe a playable game.

    Raises UnsupportedSettingsError listing every problem found.
    """
    errors: list[str] = []

    if settings.min_players < 2:  # noqa: PLR2004
        errors.append(f"min_players={settings.min_players} is not supported (at least 2 players)")

    if settings.max_players < settings.min_players:
        errors.append(f"max_players={settings.max_players} is below min_players={settings.min_players}")

    roster_size = len(settings.default_player_names)
    if not settings.min_players <= roster_size <= settings.max_players:
        errors.append(
            f"default roster of {roster_size} players is outside "
            f"[{settings.min_players}, {settings.max_players}]",
        )

    if settings.max_cards != settings.rounds_per_set:
        errors.append(
            f"max_cards={settings.max_cards} must equal rounds_per_set={settings.rounds_per_set} "
            "(one card step per round)",
        )

    if settings.roster_change_round_limit < 1:
        errors.append(f"roster_change_round_limit={settings.roster_change_round_limit} must be at least 1")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))
