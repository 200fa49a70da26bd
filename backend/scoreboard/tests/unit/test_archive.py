"""Tests for the archive of finished games."""

import logging

import pytest

from scoreboard.logic.archive import GameArchive
from scoreboard.logic.exceptions import NotFoundError
from scoreboard.tests.unit.helpers import make_record


class TestArchiveAndDelete:
    def test_archive_appends_in_order(self):
        archive = GameArchive()
        archive.archive(make_record("g1"))
        archive.archive(make_record("g2"))
        assert [r.id for r in archive] == ["g1", "g2"]

    def test_delete_by_id(self):
        archive = GameArchive([make_record("g1"), make_record("g2")])
        assert archive.delete("g1") is True
        assert [r.id for r in archive] == ["g2"]

    def test_delete_unknown_id_is_a_no_op(self, caplog):
        archive = GameArchive([make_record("g1")])
        with caplog.at_level(logging.INFO):
            assert archive.delete("missing") is False
        assert len(archive) == 1
        assert "archived game not found" in caplog.text

    def test_get(self):
        record = make_record("g1")
        archive = GameArchive([record])
        assert archive.get("g1") == record
        assert archive.get("nope") is None


class TestRenameSnapshot:
    def test_renames_only_the_targeted_snapshot(self):
        archive = GameArchive([make_record("g1")])

        updated = archive.rename_snapshot("g1", round_index=0, player_index=1, name="Benji")

        assert updated.rounds[0].players[1].name == "Benji"
        assert updated.rounds[1].players[1].name == "Ben"
        assert updated.players[1].name == "Ben"
        assert updated.points_table[0].players[1].name == "Ben"
        assert archive.get("g1") == updated

    def test_original_record_untouched(self):
        record = make_record("g1")
        archive = GameArchive([record])
        archive.rename_snapshot("g1", 0, 0, "Someone")
        assert record.rounds[0].players[0].name == "Asha"

    def test_unknown_game(self):
        with pytest.raises(NotFoundError):
            GameArchive().rename_snapshot("missing", 0, 0, "X")

    def test_unknown_round_or_player(self):
        archive = GameArchive([make_record("g1", num_rounds=1)])
        with pytest.raises(NotFoundError):
            archive.rename_snapshot("g1", 3, 0, "X")
        with pytest.raises(NotFoundError):
            archive.rename_snapshot("g1", 0, 9, "X")


class TestRenameAcrossArchive:
    def test_renames_everywhere_in_one_game(self):
        archive = GameArchive([make_record("g1", num_rounds=3), make_record("g2")])

        updated = archive.rename_across_archive("g1", "Cara", "Carol")

        assert [p.name for p in updated.players] == ["Asha", "Ben", "Carol"]
        assert all(r.players[2].name == "Carol" for r in updated.rounds)
        assert all(row.players[2].name == "Carol" for row in updated.points_table)
        # other games are left alone
        assert archive.get("g2").players[2].name == "Cara"

    def test_scores_unchanged(self):
        archive = GameArchive([make_record("g1")])
        before = archive.get("g1")
        after = archive.rename_across_archive("g1", "Asha", "A")
        assert [p.score for p in after.players] == [p.score for p in before.players]

    def test_unknown_game(self):
        with pytest.raises(NotFoundError):
            GameArchive().rename_across_archive("missing", "a", "b")
