"""Scoreboard configuration via environment variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from scoreboard.logic.enums import CardCountDirection
from scoreboard.logic.settings import DEFAULT_PLAYER_NAMES, GameSettings
from shared.validators import NameListEnvSettingsSource, parse_name_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class ScoreboardSettings(BaseSettings):
    model_config = {"env_prefix": "SCOREBOARD_"}

    state_file: str = Field(default="backend/data/kachuful_state.json", min_length=1)
    log_dir: str | None = None
    default_players: list[str] = list(DEFAULT_PLAYER_NAMES)
    default_direction: CardCountDirection = CardCountDirection.DESCENDING
    archive_abandoned_games: bool = False

    @field_validator("default_players", mode="before")
    @classmethod
    def validate_default_players(cls, v: str | list[str]) -> list[str]:
        return parse_name_list(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        env_source = NameListEnvSettingsSource(settings_cls, ("default_players",))
        return init_settings, env_source, dotenv_settings, file_secret_settings

    def to_game_settings(self) -> GameSettings:
        return GameSettings(
            default_player_names=tuple(self.default_players),
            default_direction=self.default_direction,
            archive_abandoned_games=self.archive_abandoned_games,
        )
