"""
Ports consumed by the operations layer.

Persistence and notification collaborators implement these abstract classes;
the SQLAlchemy implementations live in elimina.database.repositories.
Operations receive them as plain constructor arguments.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from elimina.data_models.elimination import EliminationRecord
from elimina.data_models.game_date import GameDateInfo, PlayerInfo
from elimina.data_models.ranking import PlayerRankingInput, RankedTournamentInfo


class EliminationRepository(ABC):
    """Storage for elimination records."""

    @abstractmethod
    def save(self, elimination: EliminationRecord) -> EliminationRecord:
        """Persist a new elimination and return it with its id."""
        pass

    @abstractmethod
    def find_by_id(self, elimination_id: int) -> Optional[EliminationRecord]:
        pass

    @abstractmethod
    def find_by_game_date_id(self, game_date_id: int) -> List[EliminationRecord]:
        """All eliminations of a game date, ordered by position descending."""
        pass

    @abstractmethod
    def exists_by_player_in_game_date(self, player_id: str, game_date_id: int) -> bool:
        pass

    @abstractmethod
    def exists_by_position_in_game_date(self, position: int, game_date_id: int) -> bool:
        pass

    @abstractmethod
    def find_by_player_in_game_date(self, player_id: str, game_date_id: int) -> Optional[EliminationRecord]:
        pass

    @abstractmethod
    def count_by_game_date_id(self, game_date_id: int) -> int:
        pass

    @abstractmethod
    def update(self, elimination: EliminationRecord) -> EliminationRecord:
        pass

    @abstractmethod
    def delete(self, elimination_id: int) -> None:
        pass

    @abstractmethod
    def exists_later_eliminations(self, game_date_id: int, position: int) -> bool:
        """True when a record with a lower position value (a later elimination) exists."""
        pass


class GameDateRepository(ABC):
    """Read access to game dates plus the completion transition."""

    @abstractmethod
    def find_by_id(self, game_date_id: int) -> Optional[GameDateInfo]:
        pass

    @abstractmethod
    def mark_as_completed(self, game_date_id: int) -> None:
        pass


class PlayerRepository(ABC):
    """Read access to players plus the victory date update."""

    @abstractmethod
    def find_by_id(self, player_id: str) -> Optional[PlayerInfo]:
        pass

    @abstractmethod
    def update_last_victory_date(self, player_id: str, victory_date: str) -> None:
        """Store the date (ISO format) of the player's latest win."""
        pass


@dataclass(frozen=True)
class PlayerEliminatedNotification:
    player_id: str
    player_name: str
    position: int
    points: int
    game_date_id: int


@dataclass(frozen=True)
class WinnerDeclaredNotification:
    player_id: str
    player_name: str
    points: int
    game_date_id: int


class NotificationService(ABC):
    """Fire-and-forget notifications about a game date's progress."""

    @abstractmethod
    def notify_player_eliminated(self, notification: PlayerEliminatedNotification) -> None:
        pass

    @abstractmethod
    def notify_winner_declared(self, notification: WinnerDeclaredNotification) -> None:
        pass


@dataclass(frozen=True)
class ParentChildUpdate:
    tournament_id: int
    eliminator_id: str
    eliminated_id: str
    game_date_date: datetime


class ParentChildStatsService(ABC):
    """Who-eliminates-whom statistics."""

    @abstractmethod
    def update_stats(self, stat_update: ParentChildUpdate) -> None:
        pass


@dataclass(frozen=True)
class RankingData:
    """Everything the ranking calculator needs for one tournament."""
    tournament: RankedTournamentInfo
    player_inputs: Sequence[PlayerRankingInput]


class RankingDataSource(ABC):
    """Source of per-date participation data for the standings."""

    @abstractmethod
    def get_ranking_data(self, tournament_id: int, max_date_number: Optional[int] = None) -> Optional[RankingData]:
        """Ranking data for the tournament, or None when it does not exist."""
        pass
