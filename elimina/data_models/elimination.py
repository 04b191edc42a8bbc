"""
Elimination data models

Value objects for a finishing slot and its points, and the elimination record
that ties them to the two players involved. All of them are frozen; changes
produce new instances.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from elimina.data_models.game_date import PlayerSummary
from elimina.utils.exceptions import InvalidPositionError
from elimina.utils.points import PointsSchedule


@dataclass(frozen=True)
class Position:
    """
    Finishing slot within one game date.

    1 is the last player standing (winner), total_players is the first player
    eliminated. A higher value means the player went out earlier.
    """
    value: int
    total_players: int

    def __post_init__(self):
        max_position = PointsSchedule.clamp_players(self.total_players)
        if self.value < 1 or self.value > max_position:
            raise InvalidPositionError(self.value, max_position)

    @classmethod
    def create(cls, position: int, total_players: int) -> "Position":
        return cls(value=position, total_players=total_players)

    @classmethod
    def restore(cls, value: int, total_players: int) -> "Position":
        """Rebuild a stored position without re-checking it against the current player count."""
        position = object.__new__(cls)
        object.__setattr__(position, "value", value)
        object.__setattr__(position, "total_players", total_players)
        return position

    @property
    def is_winner(self) -> bool:
        return self.value == 1

    @property
    def is_runner_up(self) -> bool:
        return self.value == 2

    @property
    def is_podium(self) -> bool:
        return self.value <= 3

    @property
    def is_last_place(self) -> bool:
        return self.value == self.total_players

    def was_eliminated_before(self, other: "Position") -> bool:
        return self.value > other.value


@dataclass(frozen=True)
class Points:
    """Points earned for a position; derived from the schedule, never set by hand."""
    value: int

    @classmethod
    def calculate(cls, position: int, total_players: int) -> "Points":
        return cls(PointsSchedule.points_for_position(position, total_players))

    @classmethod
    def from_value(cls, value: int) -> "Points":
        """Restore stored points without recomputing them."""
        return cls(value)

    def __str__(self) -> str:
        return PointsSchedule.format_points(self.value)


@dataclass(frozen=True)
class EliminationRecord:
    """
    A player knocked out of a game date at a given position.

    Unique per (game_date_id, position) and per (game_date_id,
    eliminated_player_id). Position and points never change after creation;
    only the player references can be reassigned.
    """
    id: Optional[int]
    game_date_id: int
    position: Position
    points: Points
    eliminated_player_id: str
    eliminator_player_id: Optional[str]
    elimination_time: datetime

    @classmethod
    def create(
        cls,
        game_date_id: int,
        position: int,
        total_players: int,
        eliminated_player_id: str,
        eliminator_player_id: Optional[str],
        elimination_time: Optional[datetime] = None
    ) -> "EliminationRecord":
        """
        Create a new, not yet persisted elimination with computed points.

        Raises:
            InvalidPositionError: If position is outside 1..total players
        """
        return cls(
            id=None,
            game_date_id=game_date_id,
            position=Position.create(position, total_players),
            points=Points.calculate(position, total_players),
            eliminated_player_id=eliminated_player_id,
            eliminator_player_id=eliminator_player_id,
            elimination_time=elimination_time or datetime.now(timezone.utc),
        )

    @classmethod
    def reconstitute(
        cls,
        id: int,
        game_date_id: int,
        position: Position,
        points: Points,
        eliminated_player_id: str,
        eliminator_player_id: Optional[str],
        elimination_time: datetime
    ) -> "EliminationRecord":
        """Restore an elimination from storage as-is."""
        return cls(
            id=id,
            game_date_id=game_date_id,
            position=position,
            points=points,
            eliminated_player_id=eliminated_player_id,
            eliminator_player_id=eliminator_player_id,
            elimination_time=elimination_time,
        )

    @property
    def is_winner(self) -> bool:
        return self.position.is_winner

    @property
    def is_runner_up(self) -> bool:
        return self.position.is_runner_up

    @property
    def is_podium(self) -> bool:
        return self.position.is_podium

    @property
    def auto_complete_winner_id(self) -> Optional[str]:
        """The eliminator of the runner-up, who is then the winner."""
        if self.is_runner_up and self.eliminator_player_id:
            return self.eliminator_player_id
        return None

    def with_id(self, id: int) -> "EliminationRecord":
        return replace(self, id=id)

    def with_players(
        self,
        eliminated_player_id: str,
        eliminator_player_id: Optional[str]
    ) -> "EliminationRecord":
        """Reassign the players; position, points and time are kept."""
        return replace(
            self,
            eliminated_player_id=eliminated_player_id,
            eliminator_player_id=eliminator_player_id,
        )

    def create_winner_elimination(self, winner_id: str, total_players: int) -> "EliminationRecord":
        """Position 1 record for the auto-completion; the winner eliminates themselves."""
        return EliminationRecord.create(
            game_date_id=self.game_date_id,
            position=1,
            total_players=total_players,
            eliminated_player_id=winner_id,
            eliminator_player_id=winner_id,
        )


@dataclass(frozen=True)
class EliminationDTO:
    """Elimination with resolved player names, returned to callers."""
    id: int
    game_date_id: int
    position: int
    points: int
    eliminated_player: PlayerSummary
    eliminator_player: Optional[PlayerSummary]
    elimination_time: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "game_date_id": self.game_date_id,
            "position": self.position,
            "points": self.points,
            "eliminated_player": self.eliminated_player.to_dict(),
            "eliminator_player": self.eliminator_player.to_dict() if self.eliminator_player else None,
            "elimination_time": self.elimination_time.isoformat(),
        }
