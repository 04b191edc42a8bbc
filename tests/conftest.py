"""Shared fixtures and in-memory port implementations."""

import os

# Keep test runs from writing log files
os.environ['LOG_TO_FILE'] = 'false'

from datetime import datetime
from typing import Dict, List, Optional

import pytest

from elimina.data_models.elimination import EliminationRecord
from elimina.data_models.game_date import GameDateInfo, GameDateStatus, PlayerInfo
from elimina.operations import EliminationOperations
from elimina.operations.ports import (
    EliminationRepository, GameDateRepository, PlayerRepository,
    NotificationService, ParentChildStatsService
)


class InMemoryEliminationRepository(EliminationRepository):
    def __init__(self):
        self.records: Dict[int, EliminationRecord] = {}
        self._next_id = 1

    def save(self, elimination):
        saved = elimination.with_id(self._next_id)
        self.records[saved.id] = saved
        self._next_id += 1
        return saved

    def find_by_id(self, elimination_id):
        return self.records.get(elimination_id)

    def find_by_game_date_id(self, game_date_id):
        records = [r for r in self.records.values() if r.game_date_id == game_date_id]
        return sorted(records, key=lambda r: r.position.value, reverse=True)

    def exists_by_player_in_game_date(self, player_id, game_date_id):
        return self.find_by_player_in_game_date(player_id, game_date_id) is not None

    def exists_by_position_in_game_date(self, position, game_date_id):
        return any(
            r.game_date_id == game_date_id and r.position.value == position
            for r in self.records.values()
        )

    def find_by_player_in_game_date(self, player_id, game_date_id):
        for record in self.records.values():
            if record.game_date_id == game_date_id and record.eliminated_player_id == player_id:
                return record
        return None

    def count_by_game_date_id(self, game_date_id):
        return len(self.find_by_game_date_id(game_date_id))

    def update(self, elimination):
        self.records[elimination.id] = elimination
        return elimination

    def delete(self, elimination_id):
        del self.records[elimination_id]

    def exists_later_eliminations(self, game_date_id, position):
        return any(
            r.game_date_id == game_date_id and r.position.value < position
            for r in self.records.values()
        )


class InMemoryGameDateRepository(GameDateRepository):
    def __init__(self, game_dates: List[GameDateInfo]):
        self.game_dates = {gd.id: gd for gd in game_dates}
        self.completed: List[int] = []

    def find_by_id(self, game_date_id):
        return self.game_dates.get(game_date_id)

    def mark_as_completed(self, game_date_id):
        gd = self.game_dates[game_date_id]
        self.game_dates[game_date_id] = GameDateInfo(
            gd.id, gd.tournament_id, GameDateStatus.COMPLETED, gd.player_ids, gd.scheduled_date
        )
        self.completed.append(game_date_id)


class InMemoryPlayerRepository(PlayerRepository):
    def __init__(self, players: List[PlayerInfo]):
        self.players = {p.id: p for p in players}
        self.victory_dates: Dict[str, str] = {}

    def find_by_id(self, player_id):
        return self.players.get(player_id)

    def update_last_victory_date(self, player_id, victory_date):
        self.victory_dates[player_id] = victory_date


class RecordingNotificationService(NotificationService):
    def __init__(self):
        self.eliminated = []
        self.winners = []

    def notify_player_eliminated(self, notification):
        self.eliminated.append(notification)

    def notify_winner_declared(self, notification):
        self.winners.append(notification)


class RecordingParentChildStatsService(ParentChildStatsService):
    def __init__(self):
        self.updates = []

    def update_stats(self, stat_update):
        self.updates.append(stat_update)


PLAYER_IDS = [f"p{i}" for i in range(1, 11)]
SCHEDULED = datetime(2025, 3, 14, 20, 0)


def make_game_date(
    game_date_id: int = 1,
    player_count: int = 10,
    status: GameDateStatus = GameDateStatus.IN_PROGRESS,
    tournament_id: int = 28
) -> GameDateInfo:
    return GameDateInfo(
        id=game_date_id,
        tournament_id=tournament_id,
        status=status,
        player_ids=tuple(PLAYER_IDS[:player_count]),
        scheduled_date=SCHEDULED,
    )


class EngineHarness:
    """EliminationOperations wired to in-memory ports, with the fakes exposed."""

    def __init__(self, game_dates: Optional[List[GameDateInfo]] = None):
        self.eliminations = InMemoryEliminationRepository()
        self.game_dates = InMemoryGameDateRepository(game_dates or [make_game_date()])
        self.players = InMemoryPlayerRepository(
            [PlayerInfo(pid, f"First{pid}", f"Last{pid}") for pid in PLAYER_IDS]
        )
        self.notifications = RecordingNotificationService()
        self.parent_child = RecordingParentChildStatsService()
        self.operations = EliminationOperations(
            self.eliminations, self.game_dates, self.players, self.notifications, self.parent_child
        )


@pytest.fixture
def engine():
    return EngineHarness()


@pytest.fixture
def nine_player_engine():
    return EngineHarness([make_game_date(player_count=9)])
