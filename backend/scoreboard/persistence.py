"""
Persistence of the full session state as a JSON blob.

The blob keeps the camelCase top-level fields of the browser-era save
format (players, round, set, cardCount, trumpSuit, gameActive,
gameHistory, pastGames, isDarkMode, cardCountDirection, pointsTable).
``cardCount`` is not trusted on load: it is recomputed from the round and
direction once, in ``load_state``.
"""

from __future__ import annotations

import contextlib
import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from pydantic import ValidationError

from scoreboard.logic.enums import CardCountDirection, SessionPhase
from scoreboard.logic.exceptions import StateDecodeError
from scoreboard.logic.schedule import card_count_for_round
from scoreboard.logic.types import GameSessionState

if TYPE_CHECKING:
    from shared.storage import StateStorage

logger = structlog.get_logger()


def dump_state(state: GameSessionState) -> str:
    """Serialize session state to the persisted blob."""
    return json.dumps(state.model_dump(mode="json", by_alias=True), ensure_ascii=False)


def _infer_phase(data: dict[str, Any]) -> str:
    """Phase for blobs written before the phase was stored."""
    if data.get("gameActive"):
        return SessionPhase.BIDDING.value
    if data.get("players"):
        return SessionPhase.ENDED.value
    return SessionPhase.NOT_STARTED.value


_LOCALE_DATE_FORMATS = ("%m/%d/%Y", "%d/%m/%Y", "%d.%m.%Y", "%Y/%m/%d")


def _upgrade_history_entry(entry: Any, max_cards: int) -> Any:  # noqa: ANN401
    """Fill the set and card count that early saves did not record per round."""
    if not isinstance(entry, dict):
        return entry
    entry = dict(entry)
    entry.setdefault("set", 1)
    if "cardCount" not in entry and isinstance(entry.get("round"), int):
        entry["cardCount"] = card_count_for_round(entry["round"], CardCountDirection.DESCENDING, max_cards)
    return entry


def _archived_date(value: Any, game_id: Any) -> Any:  # noqa: ANN401
    """Date of an archived game, accepting the locale strings of early saves.

    Those saves also used a millisecond timestamp as the id, which is
    preferred over the ambiguous locale date when present.
    """
    if not isinstance(value, str):
        return value
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        pass
    else:
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    if isinstance(game_id, int | float) and not isinstance(game_id, bool):
        with contextlib.suppress(OverflowError, OSError, ValueError):
            return datetime.fromtimestamp(game_id / 1000, tz=UTC)
    for fmt in _LOCALE_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    return value


def _upgrade_past_game(game: Any, max_cards: int) -> Any:  # noqa: ANN401
    """Bring an archived game from an early save up to the current record shape."""
    if not isinstance(game, dict):
        return game
    game = dict(game)
    raw_id = game.get("id")
    game["date"] = _archived_date(game.get("date"), raw_id)
    if isinstance(raw_id, int | float) and not isinstance(raw_id, bool):
        game["id"] = str(int(raw_id))
    game["rounds"] = [_upgrade_history_entry(r, max_cards) for r in game.get("rounds") or []]
    return game


def normalize_card_count(state: GameSessionState, max_cards: int = 8) -> GameSessionState:
    """Replace the stored card count with the one implied by round and direction."""
    expected = card_count_for_round(state.round_number, state.direction, max_cards)
    if expected != state.card_count:
        logger.info("normalized stored card count", stored=state.card_count, card_count=expected)
    return state.model_copy(update={"card_count": expected})


def load_state(blob: str | None, max_cards: int = 8) -> GameSessionState | None:
    """Decode a persisted blob. Returns None when nothing was stored.

    Raises StateDecodeError for blobs that are not a valid session state.
    """
    if blob is None or not blob.strip():
        return None

    try:
        data = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise StateDecodeError(f"state blob is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise StateDecodeError("state blob must be a JSON object")

    data.setdefault("phase", _infer_phase(data))
    for key in ("gameHistory", "pastGames", "pointsTable"):
        if data.get(key) is None:
            data[key] = []
    if isinstance(data["gameHistory"], list):
        data["gameHistory"] = [_upgrade_history_entry(e, max_cards) for e in data["gameHistory"]]
    if isinstance(data["pastGames"], list):
        data["pastGames"] = [_upgrade_past_game(g, max_cards) for g in data["pastGames"]]

    try:
        state = GameSessionState.model_validate(data)
    except ValidationError as exc:
        raise StateDecodeError(f"state blob has invalid fields: {exc}") from exc

    return normalize_card_count(state, max_cards)


class PersistenceGateway(Protocol):
    """Where the session saves itself after each state-changing command."""

    def save(self, state: GameSessionState) -> None: ...

    def load(self) -> GameSessionState | None: ...

    def clear(self) -> None: ...


class StoragePersistenceGateway:
    """Persists session state as a JSON blob in a StateStorage."""

    def __init__(self, storage: StateStorage, max_cards: int = 8) -> None:
        self._storage = storage
        self._max_cards = max_cards

    def save(self, state: GameSessionState) -> None:
        self._storage.write(dump_state(state))

    def load(self) -> GameSessionState | None:
        return load_state(self._storage.read(), self._max_cards)

    def clear(self) -> None:
        self._storage.clear()
