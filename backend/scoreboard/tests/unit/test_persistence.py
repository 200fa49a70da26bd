"""Tests for the persisted state blob and the storage-backed gateway."""

import json
from datetime import UTC, datetime

import pytest

from scoreboard.logic.enums import CardCountDirection, SessionPhase, Suit
from scoreboard.logic.exceptions import StateDecodeError
from scoreboard.logic.session import GameSession
from scoreboard.logic.types import GameSessionState, Player
from scoreboard.persistence import StoragePersistenceGateway, dump_state, load_state, normalize_card_count
from scoreboard.tests.unit.helpers import make_record
from shared.storage import LocalStateStorage, MemoryStateStorage


def _mid_game_state() -> GameSessionState:
    session = GameSession()
    session.start_new_game(["Asha", "Ben", "Cara"])
    for bids, tricks in (([3, 2, 4], [3, 5, 0]), ([0, 0, 0], [7, 0, 0])):
        for i, (bid, taken) in enumerate(zip(bids, tricks, strict=True)):
            session.set_bid(i, bid)
            session.set_tricks(i, taken)
        session.lock_and_score()
        session.next_round()
    session.set_bid(0, 2)
    session.set_dark_mode(True)
    return session.snapshot()


class TestBlobFormat:
    def test_top_level_fields(self):
        data = json.loads(dump_state(_mid_game_state()))
        for key in (
            "players",
            "round",
            "set",
            "cardCount",
            "trumpSuit",
            "gameActive",
            "gameHistory",
            "pastGames",
            "isDarkMode",
            "cardCountDirection",
            "pointsTable",
        ):
            assert key in data

    def test_values_use_display_forms(self):
        data = json.loads(dump_state(_mid_game_state()))
        assert data["trumpSuit"] == "♦"
        assert data["cardCountDirection"] == "descending"
        assert data["gameActive"] is True
        assert data["isDarkMode"] is True
        assert data["players"][0] == {"name": "Cara", "score": 10, "bid": 2, "tricks": 0}
        assert data["gameHistory"][0]["set"] == 1
        assert data["gameHistory"][0]["cardCount"] == 8
        assert data["pointsTable"][0]["players"][0] == {"name": "Asha", "roundScore": 13}


class TestRoundTrip:
    def test_mid_game_state_round_trips(self):
        state = _mid_game_state()
        assert load_state(dump_state(state)) == state

    def test_archive_round_trips(self):
        state = GameSessionState(past_games=(make_record("g1"), make_record("g2")))
        assert load_state(dump_state(state)) == state

    def test_card_count_recomputed_on_load(self):
        state = _mid_game_state().model_copy(update={"card_count": 2})

        loaded = load_state(dump_state(state))

        assert loaded.card_count == 6  # round 3 of a descending set
        assert loaded == state.model_copy(update={"card_count": 6})

    @pytest.mark.parametrize(
        ("round_number", "direction", "expected"),
        [
            (1, CardCountDirection.DESCENDING, 8),
            (8, CardCountDirection.DESCENDING, 1),
            (1, CardCountDirection.ASCENDING, 1),
            (8, CardCountDirection.ASCENDING, 8),
            (5, CardCountDirection.ASCENDING, 5),
        ],
    )
    def test_normalize_card_count(self, round_number, direction, expected):
        state = GameSessionState(round_number=round_number, direction=direction, card_count=3)
        assert normalize_card_count(state).card_count == expected


class TestLoadState:
    @pytest.mark.parametrize("blob", [None, "", "   "])
    def test_absent_state(self, blob):
        assert load_state(blob) is None

    def test_minimal_legacy_blob(self):
        blob = json.dumps(
            {
                "players": [{"name": "Asha", "score": 11, "bid": 0, "tricks": 0}],
                "round": 2,
                "trumpSuit": "♥",
                "gameActive": True,
                "gameHistory": None,
            },
        )

        state = load_state(blob)

        assert state.players == (Player(name="Asha", score=11),)
        assert state.phase == SessionPhase.BIDDING
        assert state.set_number == 1
        assert state.direction == CardCountDirection.DESCENDING
        assert state.card_count == 7
        assert state.trump_suit == Suit.HEARTS
        assert state.game_history == ()
        assert state.past_games == ()
        assert state.is_dark_mode is False

    def test_inactive_blob_with_players_is_ended(self):
        blob = json.dumps({"players": [{"name": "A", "score": 0, "bid": 0, "tricks": 0}], "gameActive": False})
        assert load_state(blob).phase == SessionPhase.ENDED

    def test_invalid_json(self):
        with pytest.raises(StateDecodeError, match="not valid JSON"):
            load_state("{not json")

    def test_non_object(self):
        with pytest.raises(StateDecodeError, match="JSON object"):
            load_state("[1, 2]")

    def test_invalid_fields(self):
        with pytest.raises(StateDecodeError, match="invalid fields"):
            load_state(json.dumps({"trumpSuit": "X"}))

    def test_negative_bid_rejected(self):
        blob = json.dumps({"players": [{"name": "A", "score": 0, "bid": -1, "tricks": 0}]})
        with pytest.raises(StateDecodeError):
            load_state(blob)


class TestEarlySaveFormat:
    """Saves whose archive uses timestamp ids, locale dates and set-less rounds."""

    @staticmethod
    def _blob(**past_game) -> str:
        game = {
            "id": 1760870400000,
            "date": "10/19/2025",
            "players": [{"name": "Asha", "score": 11}, {"name": "Ben", "score": 0}],
            "rounds": [
                {
                    "round": 1,
                    "trumpSuit": "♠",
                    "players": [
                        {"name": "Asha", "score": 11, "bid": 1, "tricks": 1},
                        {"name": "Ben", "score": 0, "bid": 1, "tricks": 7},
                    ],
                },
            ],
        }
        game.update(past_game)
        return json.dumps(
            {
                "players": [{"name": "Asha", "score": 11, "bid": 0, "tricks": 0}],
                "round": 2,
                "trumpSuit": "♥",
                "gameActive": True,
                "gameHistory": [
                    {"round": 1, "trumpSuit": "♠", "players": [{"name": "Asha", "score": 11, "bid": 0, "tricks": 0}]},
                ],
                "pastGames": [game],
                "isDarkMode": True,
            },
            ensure_ascii=False,
        )

    def test_archived_game_loads(self):
        state = load_state(self._blob())

        (record,) = state.past_games
        assert record.id == "1760870400000"
        assert record.date == datetime(2025, 10, 19, 10, 40, tzinfo=UTC)
        assert [(p.name, p.score) for p in record.players] == [("Asha", 11), ("Ben", 0)]
        assert record.rounds[0].set_number == 1
        assert record.rounds[0].card_count == 8
        assert record.points_table == ()

    def test_live_history_gets_set_and_card_count(self):
        state = load_state(self._blob())

        (entry,) = state.game_history
        assert entry.set_number == 1
        assert entry.round_number == 1
        assert entry.card_count == 8

    def test_locale_date_used_without_timestamp_id(self):
        state = load_state(self._blob(id="g-1", date="19.10.2025"))
        assert state.past_games[0].date == datetime(2025, 10, 19, tzinfo=UTC)

    def test_naive_iso_date_treated_as_utc(self):
        state = load_state(self._blob(id="g-1", date="2025-10-19T08:00:00"))
        assert state.past_games[0].date == datetime(2025, 10, 19, 8, tzinfo=UTC)

    def test_loaded_archive_saves_in_current_format(self):
        state = load_state(self._blob())

        saved = json.loads(dump_state(state))

        assert saved["pastGames"][0]["id"] == "1760870400000"
        assert saved["pastGames"][0]["rounds"][0]["set"] == 1
        assert load_state(dump_state(state)) == state

    def test_unrecognised_date_still_rejected(self):
        with pytest.raises(StateDecodeError, match="invalid fields"):
            load_state(self._blob(id="g-1", date="sometime last week"))


class TestStoragePersistenceGateway:
    def test_save_and_load_through_memory(self):
        storage = MemoryStateStorage()
        gateway = StoragePersistenceGateway(storage)
        state = _mid_game_state()

        gateway.save(state)

        assert json.loads(storage.content)["round"] == 3
        assert gateway.load() == state

    def test_save_and_load_through_file(self, tmp_path):
        gateway = StoragePersistenceGateway(LocalStateStorage(tmp_path / "state.json"))
        state = _mid_game_state()

        gateway.save(state)

        assert gateway.load() == state

    def test_load_missing_is_none(self, tmp_path):
        gateway = StoragePersistenceGateway(LocalStateStorage(tmp_path / "missing.json"))
        assert gateway.load() is None

    def test_clear(self):
        storage = MemoryStateStorage()
        gateway = StoragePersistenceGateway(storage)
        gateway.save(_mid_game_state())
        gateway.clear()
        assert gateway.load() is None
