"""Tests for Position, EliminationRecord and the elimination DTO."""

from datetime import datetime, timezone

import pytest

from elimina.data_models.elimination import (
    EliminationDTO, EliminationRecord, Points, Position
)
from elimina.data_models.game_date import PlayerInfo, PlayerSummary
from elimina.utils.exceptions import InvalidPositionError


class TestPosition:
    def test_valid_bounds(self):
        assert Position.create(1, 10).is_winner
        assert Position.create(10, 10).is_last_place

    @pytest.mark.parametrize("value", [0, 11, -3])
    def test_out_of_range(self, value):
        with pytest.raises(InvalidPositionError) as exc_info:
            Position.create(value, 10)
        assert exc_info.value.position == value
        assert exc_info.value.total_players == 10

    def test_bound_uses_clamped_player_count(self):
        # Fewer than 9 registered players still allows positions up to 9
        assert Position.create(9, 6).value == 9
        with pytest.raises(InvalidPositionError):
            Position.create(25, 30)

    def test_restore_skips_validation(self):
        restored = Position.restore(12, 9)
        assert restored.value == 12
        assert restored.total_players == 9
        assert restored.was_eliminated_before(Position.create(3, 9))

    def test_flags(self):
        runner_up = Position.create(2, 10)
        assert runner_up.is_runner_up
        assert runner_up.is_podium
        assert not runner_up.is_winner
        assert not Position.create(4, 10).is_podium

    def test_eliminated_before_is_descending(self):
        assert Position.create(7, 10).was_eliminated_before(Position.create(3, 10))
        assert not Position.create(3, 10).was_eliminated_before(Position.create(7, 10))


class TestEliminationRecord:
    def test_create_computes_points(self):
        record = EliminationRecord.create(1, 3, 10, "p3", "p1")
        assert record.id is None
        assert record.points == Points(11)
        assert record.elimination_time.tzinfo is not None

    def test_create_rejects_invalid_position(self):
        with pytest.raises(InvalidPositionError):
            EliminationRecord.create(1, 12, 10, "p3", None)

    def test_reconstitute_keeps_stored_points(self):
        when = datetime(2025, 1, 1, tzinfo=timezone.utc)
        record = EliminationRecord.reconstitute(
            7, 1, Position.create(2, 10), Points.from_value(99), "p2", "p1", when
        )
        assert record.points.value == 99
        assert record.elimination_time == when

    def test_auto_complete_winner_id(self):
        assert EliminationRecord.create(1, 2, 10, "p2", "p1").auto_complete_winner_id == "p1"
        assert EliminationRecord.create(1, 2, 10, "p2", None).auto_complete_winner_id is None
        assert EliminationRecord.create(1, 3, 10, "p3", "p1").auto_complete_winner_id is None

    def test_create_winner_elimination_references_itself(self):
        runner_up = EliminationRecord.create(5, 2, 10, "p2", "p1").with_id(4)
        winner = runner_up.create_winner_elimination("p1", 10)
        assert winner.id is None
        assert winner.game_date_id == 5
        assert winner.is_winner
        assert winner.eliminated_player_id == winner.eliminator_player_id == "p1"
        assert winner.points.value == 17

    def test_with_players_keeps_position_and_points(self):
        original = EliminationRecord.create(1, 4, 10, "p4", "p1").with_id(3)
        changed = original.with_players("p5", None)
        assert changed.eliminated_player_id == "p5"
        assert changed.eliminator_player_id is None
        assert (changed.id, changed.position, changed.points) == (original.id, original.position, original.points)
        assert changed.elimination_time == original.elimination_time


def test_dto_to_dict():
    when = datetime(2025, 3, 14, 21, 30, tzinfo=timezone.utc)
    dto = EliminationDTO(
        id=1,
        game_date_id=2,
        position=10,
        points=1,
        eliminated_player=PlayerSummary.from_player(PlayerInfo("p10", "Ana", "Lopez")),
        eliminator_player=None,
        elimination_time=when,
    )
    assert dto.to_dict() == {
        "id": 1,
        "game_date_id": 2,
        "position": 10,
        "points": 1,
        "eliminated_player": {"id": "p10", "first_name": "Ana", "last_name": "Lopez"},
        "eliminator_player": None,
        "elimination_time": when.isoformat(),
    }
