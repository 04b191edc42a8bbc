"""
Ranking data models

Value objects that accumulate a player's standings inputs (tiebreaker counts,
ELIMINA 2 score, trend), the per-player ranking entry, and the tournament
ranking that sorts entries and assigns competition ranks.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import cmp_to_key
from typing import Any, Dict, List, Mapping, Optional, Sequence

from elimina.constants import RankingConstants


@dataclass(frozen=True)
class TiebreakerStats:
    """
    Podium and absence counts used to break ties in final score.

    Criteria in order: more first places, more second places, more third
    places, fewer absences.
    """
    first_places: int = 0
    second_places: int = 0
    third_places: int = 0
    absences: int = 0

    @classmethod
    def create(cls, first_places: int, second_places: int, third_places: int, absences: int) -> "TiebreakerStats":
        return cls(
            first_places=max(0, first_places),
            second_places=max(0, second_places),
            third_places=max(0, third_places),
            absences=max(0, absences),
        )

    @classmethod
    def empty(cls) -> "TiebreakerStats":
        return cls()

    @property
    def podium_finishes(self) -> int:
        return self.first_places + self.second_places + self.third_places

    def with_first_place(self) -> "TiebreakerStats":
        return TiebreakerStats(self.first_places + 1, self.second_places, self.third_places, self.absences)

    def with_second_place(self) -> "TiebreakerStats":
        return TiebreakerStats(self.first_places, self.second_places + 1, self.third_places, self.absences)

    def with_third_place(self) -> "TiebreakerStats":
        return TiebreakerStats(self.first_places, self.second_places, self.third_places + 1, self.absences)

    def with_absence(self) -> "TiebreakerStats":
        return TiebreakerStats(self.first_places, self.second_places, self.third_places, self.absences + 1)

    def compare_to(self, other: "TiebreakerStats") -> int:
        """Negative if self ranks higher, positive if other does, 0 if equal."""
        if self.first_places != other.first_places:
            return other.first_places - self.first_places
        if self.second_places != other.second_places:
            return other.second_places - self.second_places
        if self.third_places != other.third_places:
            return other.third_places - self.third_places
        if self.absences != other.absences:
            return self.absences - other.absences
        return 0


@dataclass(frozen=True)
class Elimina2Score:
    """
    Tournament score under the ELIMINA 2 rule.

    Once ELIMINA2_MIN_DATES dates are on record, the two worst date scores
    (absences count as 0) are dropped from the total. Before that the final
    score is simply the total.
    """
    total_points: int
    final_score: int
    elimina1: Optional[int] = None
    elimina2: Optional[int] = None
    is_applied: bool = False

    @classmethod
    def calculate(cls, points_by_date: Mapping[int, int]) -> "Elimina2Score":
        scores = list(points_by_date.values())
        total_points = sum(scores)

        if len(scores) < RankingConstants.ELIMINA2_MIN_DATES:
            return cls(total_points=total_points, final_score=total_points)

        worst, second_worst = sorted(scores)[:RankingConstants.DROPPED_DATES]
        return cls(
            total_points=total_points,
            final_score=total_points - worst - second_worst,
            elimina1=worst,
            elimina2=second_worst,
            is_applied=True,
        )

    @classmethod
    def from_values(
        cls,
        total_points: int,
        final_score: int,
        elimina1: Optional[int],
        elimina2: Optional[int]
    ) -> "Elimina2Score":
        is_applied = elimina1 is not None and elimina2 is not None
        return cls(total_points, final_score, elimina1, elimina2, is_applied)

    @property
    def eliminated_points(self) -> int:
        if not self.is_applied:
            return 0
        return (self.elimina1 or 0) + (self.elimina2 or 0)

    @property
    def ranking_score(self) -> int:
        return self.final_score

    def compare_to(self, other: "Elimina2Score") -> int:
        """Higher final score first, then higher total points."""
        if self.ranking_score != other.ranking_score:
            return other.ranking_score - self.ranking_score
        return other.total_points - self.total_points


class TrendDirection(Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"


@dataclass(frozen=True)
class RankingTrend:
    """Movement in rank since the previous snapshot; positive change means improvement."""
    direction: TrendDirection
    positions_changed: int = 0

    @classmethod
    def same(cls) -> "RankingTrend":
        return cls(TrendDirection.SAME, 0)

    @classmethod
    def up(cls, positions: int) -> "RankingTrend":
        return cls(TrendDirection.UP, abs(positions))

    @classmethod
    def down(cls, positions: int) -> "RankingTrend":
        return cls(TrendDirection.DOWN, -abs(positions))

    @classmethod
    def calculate(cls, previous_position: Optional[int], current_position: int) -> "RankingTrend":
        if previous_position is None or previous_position == current_position:
            return cls.same()
        change = previous_position - current_position
        if change > 0:
            return cls.up(change)
        return cls.down(change)


@dataclass(frozen=True)
class RankedPlayerInfo:
    """Player details shown in the standings."""
    id: str
    name: str
    alias: Optional[str] = None
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class RankedTournamentInfo:
    """Tournament details the standings are computed for."""
    id: int
    name: str
    number: int
    total_dates: int
    completed_dates: int


@dataclass(frozen=True)
class GameDateParticipation:
    """One player's outcome on one game date."""
    date_number: int
    played: bool
    position: Optional[int]  # None when absent or still playing
    points: int


@dataclass(frozen=True)
class PlayerRankingInput:
    """Raw per-date data for one registered player."""
    player: RankedPlayerInfo
    participations: Sequence[GameDateParticipation]


@dataclass
class PlayerRanking:
    """
    One player's entry in the tournament standings.

    position and trend are assigned by TournamentRanking; everything else is
    fixed at creation.
    """
    player: RankedPlayerInfo
    points_by_date: Dict[int, int]
    dates_played: int
    score: Elimina2Score
    tiebreaker: TiebreakerStats
    position: int = 0
    trend: RankingTrend = field(default_factory=RankingTrend.same)

    @classmethod
    def create(
        cls,
        player: RankedPlayerInfo,
        points_by_date: Mapping[int, int],
        dates_played: int,
        tiebreaker: TiebreakerStats
    ) -> "PlayerRanking":
        points = dict(points_by_date)
        return cls(
            player=player,
            points_by_date=points,
            dates_played=dates_played,
            score=Elimina2Score.calculate(points),
            tiebreaker=tiebreaker,
        )

    @property
    def player_id(self) -> str:
        return self.player.id

    @property
    def player_name(self) -> str:
        return self.player.name

    @property
    def total_points(self) -> int:
        return self.score.total_points

    @property
    def final_score(self) -> int:
        return self.score.final_score

    def points_for_date(self, date_number: int) -> int:
        return self.points_by_date.get(date_number, 0)

    def compare_to(self, other: "PlayerRanking") -> int:
        """
        Ordering used for the standings; negative if self ranks higher.

        Score first, then tiebreaker stats, then display name. Only entries
        with identical names can compare equal.
        """
        score_comparison = self.score.compare_to(other.score)
        if score_comparison != 0:
            return score_comparison

        tiebreaker_comparison = self.tiebreaker.compare_to(other.tiebreaker)
        if tiebreaker_comparison != 0:
            return tiebreaker_comparison

        return _compare_names(self.player.name, other.player.name)

    def is_tied_with(self, other: "PlayerRanking") -> bool:
        return self.compare_to(other) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "player_id": self.player.id,
            "player_name": self.player.name,
            "player_alias": self.player.alias,
            "player_photo": self.player.photo_url,
            "total_points": self.total_points,
            "dates_played": self.dates_played,
            "points_by_date": dict(self.points_by_date),
            "trend": self.trend.direction.value,
            "positions_changed": self.trend.positions_changed,
            "elimina1": self.score.elimina1,
            "elimina2": self.score.elimina2,
            "final_score": self.final_score if self.score.is_applied else None,
            "first_places": self.tiebreaker.first_places,
            "second_places": self.tiebreaker.second_places,
            "third_places": self.tiebreaker.third_places,
            "absences": self.tiebreaker.absences,
        }


def _compare_names(name_a: str, name_b: str) -> int:
    # Case-insensitive first, exact text as the last resort
    key_a = (name_a.casefold(), name_a)
    key_b = (name_b.casefold(), name_b)
    return (key_a > key_b) - (key_a < key_b)


class TournamentRanking:
    """
    Complete standings for a tournament.

    Built fresh on every recalculation. Entries are sorted once and given
    competition ranks: tied entries share a rank and the next entry's rank
    is its 1-based index, so ranks can skip (1, 1, 3).
    """

    def __init__(self, tournament: RankedTournamentInfo, rankings: List[PlayerRanking], last_updated: datetime):
        self.tournament = tournament
        self._rankings = rankings
        self.last_updated = last_updated

    @classmethod
    def create(cls, tournament: RankedTournamentInfo, player_rankings: Sequence[PlayerRanking]) -> "TournamentRanking":
        ordered = sorted(player_rankings, key=cmp_to_key(lambda a, b: a.compare_to(b)))

        current_position = 1
        for index, ranking in enumerate(ordered):
            if index > 0 and not ordered[index - 1].is_tied_with(ranking):
                current_position = index + 1
            ranking.position = current_position

        return cls(tournament, ordered, datetime.now(timezone.utc))

    @classmethod
    def reconstitute(
        cls,
        tournament: RankedTournamentInfo,
        rankings: Sequence[PlayerRanking],
        last_updated: datetime
    ) -> "TournamentRanking":
        return cls(tournament, list(rankings), last_updated)

    @property
    def rankings(self) -> List[PlayerRanking]:
        return list(self._rankings)

    @property
    def player_count(self) -> int:
        return len(self._rankings)

    def get_player_ranking(self, player_id: str) -> Optional[PlayerRanking]:
        for ranking in self._rankings:
            if ranking.player_id == player_id:
                return ranking
        return None

    def get_top_players(self, count: int) -> List[PlayerRanking]:
        return self._rankings[:count]

    def get_leader(self) -> Optional[PlayerRanking]:
        for ranking in self._rankings:
            if ranking.position == 1:
                return ranking
        return None

    def get_podium(self) -> List[PlayerRanking]:
        return [r for r in self._rankings if r.position <= 3]

    def apply_trends(self, previous_ranking: Optional["TournamentRanking"]) -> None:
        """
        Set each entry's trend against a previous snapshot.

        Players missing from the snapshot, or every player when there is no
        snapshot, get a 'same' trend.
        """
        for ranking in self._rankings:
            if previous_ranking is None:
                ranking.trend = RankingTrend.same()
                continue
            previous = previous_ranking.get_player_ranking(ranking.player_id)
            previous_position = previous.position if previous else None
            ranking.trend = RankingTrend.calculate(previous_position, ranking.position)

    def is_elimina2_applied(self) -> bool:
        return self.tournament.completed_dates >= RankingConstants.ELIMINA2_MIN_DATES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tournament": {
                "id": self.tournament.id,
                "name": self.tournament.name,
                "number": self.tournament.number,
                "total_dates": self.tournament.total_dates,
                "completed_dates": self.tournament.completed_dates,
            },
            "rankings": [r.to_dict() for r in self._rankings],
            "last_updated": self.last_updated.isoformat(),
        }
