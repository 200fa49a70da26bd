"""
Game session: the round lifecycle state machine.

NOT_STARTED -> BIDDING -> LOCKED -> BIDDING ... -> ENDED

Every command validates first and mutates only once all checks pass, so a
rejected command leaves the session exactly as it was. When a persistence
gateway is injected, the full session state is saved after each
state-changing command.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from scoreboard.logic.archive import GameArchive
from scoreboard.logic.enums import CardCountDirection, PlayerField, SessionPhase
from scoreboard.logic.exceptions import (
    BelowMinimumError,
    CapacityExceededError,
    InvalidStateError,
    InvalidTrickTotalError,
    RosterLockedError,
)
from scoreboard.logic.ledger import GameLedger, current_round_row, totals_row
from scoreboard.logic.players import PlayerRegistry
from scoreboard.logic.schedule import advance_schedule, initial_schedule, with_direction
from scoreboard.logic.scoring import (
    determine_winners,
    leading_score,
    losing_score,
    rank_players,
    score,
    summary_text,
)
from scoreboard.logic.settings import GameSettings, validate_settings
from scoreboard.logic.types import GameEndResult, GameRecord, GameSessionState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scoreboard.logic.types import (
        HistoryEntry,
        PlayerPoints,
        PlayerSnapshot,
        PlayerStanding,
        PointsLedgerEntry,
        RoundSchedule,
    )
    from scoreboard.persistence import PersistenceGateway

logger = structlog.get_logger()

_ACTIVE_PHASES = frozenset({SessionPhase.BIDDING, SessionPhase.LOCKED})


class GameSession:
    """The single active game plus the archive of finished ones."""

    def __init__(
        self,
        settings: GameSettings | None = None,
        *,
        gateway: PersistenceGateway | None = None,
        archive: GameArchive | None = None,
    ) -> None:
        self._settings = settings or GameSettings()
        validate_settings(self._settings)
        self._gateway = gateway
        self._archive = archive if archive is not None else GameArchive()
        self._registry = self._new_registry(())
        self._schedule = initial_schedule(settings=self._settings)
        self._ledger = GameLedger()
        self._phase = SessionPhase.NOT_STARTED
        self._direction_pending = False
        self._dark_mode = False

    # --- Queries ---

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_active(self) -> bool:
        return self._phase in _ACTIVE_PHASES

    @property
    def players(self) -> tuple[PlayerSnapshot, ...]:
        """Current roster in bidding order (first bidder first, dealer last)."""
        return tuple(p.snapshot() for p in self._registry)

    @property
    def schedule(self) -> RoundSchedule:
        return self._schedule

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return self._ledger.history

    @property
    def points_table(self) -> tuple[PointsLedgerEntry, ...]:
        return self._ledger.points_table

    @property
    def archive(self) -> GameArchive:
        return self._archive

    @property
    def direction_pending(self) -> bool:
        """True at the start of a new set until a direction is chosen or the round is scored."""
        return self._direction_pending

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    @property
    def roster_locked(self) -> bool:
        return self._schedule.round_number > self._settings.roster_change_round_limit

    def leading_score(self) -> int:
        return leading_score(self._registry.players)

    def losing_score(self) -> int:
        return losing_score(self._registry.players)

    def summary_text(self) -> str:
        return summary_text(self._registry.players)

    def standings(self) -> list[PlayerStanding]:
        return rank_players(self._registry.players)

    def totals_row(self) -> list[PlayerPoints]:
        return totals_row(self._registry.players)

    def current_round_row(self) -> list[PlayerPoints]:
        """Uncommitted points for the round being bid; empty outside bidding."""
        if self._phase != SessionPhase.BIDDING:
            return []
        return current_round_row(self._registry.players)

    def history_highlights(self) -> list[tuple[list[str], list[str]]]:
        """(leading, losing) names per history entry.

        The opening round of the game has no meaningful leader, so it is
        left unhighlighted.
        """
        highlights: list[tuple[list[str], list[str]]] = []
        for entry in self._ledger.history:
            if entry.set_number == 1 and entry.round_number == 1:
                highlights.append(([], []))
            else:
                highlights.append((entry.leading_names(), entry.losing_names()))
        return highlights

    # --- Lifecycle ---

    def start_new_game(
        self,
        player_names: Sequence[str] | None = None,
        direction: CardCountDirection | None = None,
    ) -> None:
        """Begin a brand-new game, replacing any game in progress.

        An unfinished game is discarded unless ``archive_abandoned_games``
        is enabled, in which case it is archived as it stands.
        """
        names = tuple(player_names) if player_names is not None else self._settings.default_player_names
        if len(names) > self._settings.max_players:
            raise CapacityExceededError(f"maximum number of players ({self._settings.max_players}) exceeded")
        if len(names) < self._settings.min_players:
            raise BelowMinimumError(f"minimum of {self._settings.min_players} players required")

        if self.is_active:
            if self._settings.archive_abandoned_games:
                self._archive.archive(self._freeze_record())
            else:
                logger.info("discarding unfinished game", rounds_played=len(self._ledger))

        self._registry = self._new_registry(names)
        self._schedule = initial_schedule(direction, self._settings)
        self._ledger = GameLedger()
        self._phase = SessionPhase.BIDDING
        self._direction_pending = False
        logger.info("game started", num_players=len(names), direction=self._schedule.direction)
        self._persist()

    start = start_new_game

    def lock_and_score(self) -> HistoryEntry:
        """Score the current round and record it.

        Requires the tricks taken to add up to the cards dealt.
        """
        self._require_phase(SessionPhase.BIDDING, "score the round")
        self._check_trick_total()

        entry = self._score_current_round()
        self._phase = SessionPhase.LOCKED
        self._direction_pending = False
        self._persist()
        return entry

    calculate_score = lock_and_score

    def next_round(self) -> RoundSchedule:
        """Clear bids and tricks, rotate seats, and move to the next round."""
        self._require_phase(SessionPhase.LOCKED, "advance to the next round")

        self._registry.reset_round_fields()
        self._registry.rotate()
        self._schedule = advance_schedule(self._schedule, self._settings)
        self._phase = SessionPhase.BIDDING
        self._direction_pending = self._schedule.round_number == 1
        logger.info(
            "round advanced",
            set_number=self._schedule.set_number,
            round_number=self._schedule.round_number,
            card_count=self._schedule.card_count,
            trump_suit=self._schedule.trump_suit,
        )
        self._persist()
        return self._schedule

    def end_game(self) -> GameEndResult:
        """Finish the game, archive it, and report winners and standings.

        A round still open for bidding is scored as it stands. A round that
        has already been locked is not scored again.
        """
        if not self.is_active:
            raise InvalidStateError(f"cannot end game while {self._phase.value}")

        if self._phase == SessionPhase.BIDDING:
            self._score_current_round()

        players = self._registry.players
        record = self._freeze_record()
        self._archive.archive(record)
        self._phase = SessionPhase.ENDED
        self._direction_pending = False

        result = GameEndResult(
            winners=tuple(determine_winners(players)),
            standings=tuple(rank_players(players)),
            record=record,
        )
        logger.info("game ended", game_id=record.id, winners=list(result.winners))
        self._persist()
        return result

    end = end_game

    # --- Roster and round input ---

    def add_player(self, name: str | None = None) -> PlayerSnapshot:
        self._require_active("add a player")
        self._check_roster_unlocked()
        player = self._registry.add(name)
        self._persist()
        return player.snapshot()

    def remove_player(self, index: int) -> PlayerSnapshot:
        self._require_active("remove a player")
        self._check_roster_unlocked()
        player = self._registry.remove(index)
        self._persist()
        return player.snapshot()

    def rename_player(self, index: int, name: str) -> None:
        """Rename a live player. Recorded history keeps the old name."""
        self._registry.rename(index, name)
        self._persist()

    def set_bid(self, index: int, value: int) -> int:
        self._require_phase(SessionPhase.BIDDING, "change a bid")
        stored = self._registry.set_field(index, PlayerField.BID, value)
        self._persist()
        return stored

    def set_tricks(self, index: int, value: int) -> int:
        self._require_phase(SessionPhase.BIDDING, "change tricks")
        stored = self._registry.set_field(index, PlayerField.TRICKS, value)
        self._persist()
        return stored

    def choose_card_count_direction(self, direction: CardCountDirection | str) -> RoundSchedule:
        """Pick whether this set's card count rises or falls.

        Only possible before the first round of a set is scored.
        """
        chosen = CardCountDirection(direction)
        self._require_phase(SessionPhase.BIDDING, "choose the card count direction")
        if self._schedule.round_number != 1:
            raise InvalidStateError("card count direction can only be chosen in the first round of a set")

        self._schedule = with_direction(self._schedule, chosen, self._settings)
        self._direction_pending = False
        logger.info("card count direction chosen", direction=chosen, set_number=self._schedule.set_number)
        self._persist()
        return self._schedule

    # --- Archive and preferences ---

    def delete_archived_game(self, game_id: str) -> bool:
        removed = self._archive.delete(game_id)
        if removed:
            self._persist()
        return removed

    def rename_archived_player(self, game_id: str, round_index: int, player_index: int, name: str) -> GameRecord:
        record = self._archive.rename_snapshot(game_id, round_index, player_index, name)
        self._persist()
        return record

    def rename_across_archive(self, game_id: str, old_name: str, new_name: str) -> GameRecord:
        record = self._archive.rename_across_archive(game_id, old_name, new_name)
        self._persist()
        return record

    def set_dark_mode(self, enabled: bool) -> None:  # noqa: FBT001
        self._dark_mode = enabled
        self._persist()

    def toggle_dark_mode(self) -> bool:
        self.set_dark_mode(not self._dark_mode)
        return self._dark_mode

    # --- Persistence ---

    def snapshot(self) -> GameSessionState:
        """Capture the full session state for persistence."""
        return GameSessionState(
            players=tuple(p.model_copy() for p in self._registry),
            round_number=self._schedule.round_number,
            set_number=self._schedule.set_number,
            card_count=self._schedule.card_count,
            trump_suit=self._schedule.trump_suit,
            game_active=self.is_active,
            phase=self._phase,
            direction=self._schedule.direction,
            direction_pending=self._direction_pending,
            game_history=self._ledger.history,
            past_games=self._archive.records,
            points_table=self._ledger.points_table,
            is_dark_mode=self._dark_mode,
        )

    @classmethod
    def from_state(
        cls,
        state: GameSessionState,
        settings: GameSettings | None = None,
        *,
        gateway: PersistenceGateway | None = None,
    ) -> GameSession:
        session = cls(settings, gateway=gateway, archive=GameArchive(state.past_games))
        session._registry = PlayerRegistry(
            (p.model_copy() for p in state.players),
            min_players=session._settings.min_players,
            max_players=session._settings.max_players,
        )
        session._schedule = state.schedule
        session._ledger = GameLedger(state.game_history, state.points_table)
        session._phase = state.phase
        session._direction_pending = state.direction_pending
        session._dark_mode = state.is_dark_mode
        return session

    @classmethod
    def restore(cls, gateway: PersistenceGateway, settings: GameSettings | None = None) -> GameSession:
        """Resume from the gateway, or start a fresh game when nothing is stored."""
        state = gateway.load()
        if state is None:
            session = cls(settings, gateway=gateway)
            session.start_new_game()
            return session
        logger.info("session restored", phase=state.phase, set_number=state.set_number, round_number=state.round_number)
        return cls.from_state(state, settings, gateway=gateway)

    # --- Internals ---

    def _new_registry(self, names: Sequence[str]) -> PlayerRegistry:
        return PlayerRegistry.from_names(
            names,
            min_players=self._settings.min_players,
            max_players=self._settings.max_players,
        )

    def _persist(self) -> None:
        if self._gateway is not None:
            self._gateway.save(self.snapshot())

    def _require_active(self, action: str) -> None:
        if not self.is_active:
            logger.warning("rejected command", action=action, phase=self._phase)
            raise InvalidStateError(f"cannot {action} while {self._phase.value}")

    def _require_phase(self, phase: SessionPhase, action: str) -> None:
        if self._phase != phase:
            logger.warning("rejected command", action=action, phase=self._phase)
            raise InvalidStateError(f"cannot {action} while {self._phase.value}")

    def _check_roster_unlocked(self) -> None:
        if self.roster_locked:
            raise RosterLockedError(
                f"players can only be added or removed in the first "
                f"{self._settings.roster_change_round_limit} rounds of a set",
            )

    def _check_trick_total(self) -> None:
        total = self._registry.total_tricks()
        if total != self._schedule.card_count:
            logger.warning("trick total mismatch", expected=self._schedule.card_count, actual=total)
            raise InvalidTrickTotalError(expected=self._schedule.card_count, actual=total)

    def _score_current_round(self) -> HistoryEntry:
        players = self._registry.players
        results = [score(p.bid, p.tricks, p.score) for p in players]
        for player, result in zip(players, results, strict=True):
            player.score = result.new_score

        entry, _ = self._ledger.record_round(self._schedule, players, [r.round_score for r in results])
        logger.info(
            "round scored",
            set_number=self._schedule.set_number,
            round_number=self._schedule.round_number,
            scores={p.name: p.score for p in players},
        )
        return entry

    def _freeze_record(self) -> GameRecord:
        return GameRecord(
            id=str(uuid4()),
            date=datetime.now(tz=UTC),
            players=tuple(p.snapshot() for p in self._registry),
            rounds=self._ledger.history,
            points_table=self._ledger.points_table,
        )
