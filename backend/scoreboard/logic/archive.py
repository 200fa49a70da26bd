"""Collection of finished games, independent of the active session."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import structlog

from scoreboard.logic.exceptions import NotFoundError
from scoreboard.logic.types import GameRecord, PlayerPoints, PlayerSnapshot

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


logger = structlog.get_logger()

_Named = TypeVar("_Named", PlayerSnapshot, PlayerPoints)


class GameArchive:
    """Archived game records in the order they finished.

    Records are frozen. Renames replace a record with an updated copy
    rather than mutating it.
    """

    def __init__(self, records: Iterable[GameRecord] = ()) -> None:
        self._records: list[GameRecord] = list(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[GameRecord]:
        return iter(self._records)

    @property
    def records(self) -> tuple[GameRecord, ...]:
        return tuple(self._records)

    def get(self, game_id: str) -> GameRecord | None:
        return next((r for r in self._records if r.id == game_id), None)

    def archive(self, record: GameRecord) -> None:
        self._records.append(record)
        logger.info("game archived", game_id=record.id, rounds=len(record.rounds))

    def delete(self, game_id: str) -> bool:
        """Remove a record by id. Unknown ids are ignored; returns whether anything was removed."""
        for i, record in enumerate(self._records):
            if record.id == game_id:
                del self._records[i]
                logger.info("archived game deleted", game_id=game_id)
                return True
        logger.info("archived game not found, nothing deleted", game_id=game_id)
        return False

    def _index_of(self, game_id: str) -> int:
        for i, record in enumerate(self._records):
            if record.id == game_id:
                return i
        raise NotFoundError(f"no archived game with id '{game_id}'")

    def rename_snapshot(self, game_id: str, round_index: int, player_index: int, name: str) -> GameRecord:
        """Rename one player in a single round snapshot of an archived game.

        Nothing else in the record changes.
        """
        index = self._index_of(game_id)
        record = self._records[index]
        if not 0 <= round_index < len(record.rounds):
            raise NotFoundError(f"game '{game_id}' has no round at index {round_index}")
        entry = record.rounds[round_index]
        if not 0 <= player_index < len(entry.players):
            raise NotFoundError(f"round {round_index} of game '{game_id}' has no player at index {player_index}")

        players = list(entry.players)
        players[player_index] = players[player_index].model_copy(update={"name": name})
        rounds = list(record.rounds)
        rounds[round_index] = entry.model_copy(update={"players": tuple(players)})
        updated = record.model_copy(update={"rounds": tuple(rounds)})
        self._records[index] = updated
        return updated

    def rename_across_archive(self, game_id: str, old_name: str, new_name: str) -> GameRecord:
        """Rename a player everywhere in one archived game.

        Covers the final standings, every round snapshot, and every points row.
        """
        index = self._index_of(game_id)
        record = self._records[index]

        def _renamed(items: Iterable[_Named]) -> tuple[_Named, ...]:
            return tuple(item.model_copy(update={"name": new_name}) if item.name == old_name else item for item in items)

        updated = record.model_copy(
            update={
                "players": _renamed(record.players),
                "rounds": tuple(r.model_copy(update={"players": _renamed(r.players)}) for r in record.rounds),
                "points_table": tuple(
                    row.model_copy(update={"players": _renamed(row.players)}) for row in record.points_table
                ),
            },
        )
        self._records[index] = updated
        logger.info("renamed player across archived game", game_id=game_id, old_name=old_name, new_name=new_name)
        return updated
