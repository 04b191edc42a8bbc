"""
Game date and player data models

Immutable data transfer objects exchanged with the repository ports.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Tuple


class GameDateStatus(Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class GameDateInfo:
    """Game date as seen by the elimination operations."""
    id: int
    tournament_id: int
    status: GameDateStatus
    player_ids: Tuple[str, ...]
    scheduled_date: datetime

    @property
    def total_players(self) -> int:
        return len(self.player_ids)

    @property
    def is_in_progress(self) -> bool:
        return self.status == GameDateStatus.IN_PROGRESS


@dataclass(frozen=True)
class PlayerInfo:
    """Player as seen by the elimination operations."""
    id: str
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class PlayerSummary:
    """Player reference embedded in elimination results."""
    id: str
    first_name: str
    last_name: str

    @classmethod
    def from_player(cls, player: PlayerInfo) -> "PlayerSummary":
        return cls(id=player.id, first_name=player.first_name, last_name=player.last_name)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "first_name": self.first_name, "last_name": self.last_name}
