"""
SQLAlchemy adapters for the elimination and ranking ports.

Every adapter works on a Session supplied by the caller and never commits;
the surrounding Database.transaction() decides when the work is committed.
"""

from typing import Dict, List, Optional

from sqlalchemy import select, update, delete, func
from sqlalchemy.orm import Session, selectinload

from elimina.constants import ParentChildConstants, PlayerRoles, RankingConstants, ScoringConstants
from elimina.data_models.elimination import EliminationRecord, Points, Position
from elimina.data_models.game_date import GameDateInfo, GameDateStatus, PlayerInfo
from elimina.data_models.ranking import (
    GameDateParticipation, PlayerRankingInput, RankedPlayerInfo, RankedTournamentInfo
)
from elimina.database.models import (
    Elimination, GameDate, ParentChildStat, Player, Tournament, TournamentParticipant
)
from elimina.operations.elimination_operations import EliminationOperations
from elimina.operations.ports import (
    EliminationRepository, GameDateRepository, NotificationService,
    ParentChildStatsService, ParentChildUpdate, PlayerRepository,
    RankingData, RankingDataSource
)
from elimina.services.notifications import LoggingNotificationService
from elimina.utils.exceptions import EliminationNotFoundError
from elimina.utils.logger import setup_logger
from elimina.utils.points import PointsSchedule


# ============================================================================
# Eliminations
# ============================================================================

class SqlAlchemyEliminationRepository(EliminationRepository):
    def __init__(self, session: Session):
        self.session = session
        self.logger = setup_logger(f"{__name__}.SqlAlchemyEliminationRepository")

    def save(self, elimination: EliminationRecord) -> EliminationRecord:
        row = Elimination(
            game_date_id=elimination.game_date_id,
            position=elimination.position.value,
            points=elimination.points.value,
            eliminated_player_id=elimination.eliminated_player_id,
            eliminator_player_id=elimination.eliminator_player_id,
            elimination_time=elimination.elimination_time,
        )
        self.session.add(row)
        self.session.flush()
        return elimination.with_id(row.id)

    def find_by_id(self, elimination_id: int) -> Optional[EliminationRecord]:
        row = self.session.get(Elimination, elimination_id)
        return self._to_record(row) if row else None

    def find_by_game_date_id(self, game_date_id: int) -> List[EliminationRecord]:
        result = self.session.execute(
            select(Elimination)
            .where(Elimination.game_date_id == game_date_id)
            .order_by(Elimination.position.desc())
        )
        return [self._to_record(row) for row in result.scalars().all()]

    def exists_by_player_in_game_date(self, player_id: str, game_date_id: int) -> bool:
        return self.find_by_player_in_game_date(player_id, game_date_id) is not None

    def exists_by_position_in_game_date(self, position: int, game_date_id: int) -> bool:
        result = self.session.execute(
            select(Elimination.id).where(
                Elimination.game_date_id == game_date_id,
                Elimination.position == position
            )
        )
        return result.first() is not None

    def find_by_player_in_game_date(self, player_id: str, game_date_id: int) -> Optional[EliminationRecord]:
        result = self.session.execute(
            select(Elimination).where(
                Elimination.game_date_id == game_date_id,
                Elimination.eliminated_player_id == player_id
            )
        )
        row = result.scalar_one_or_none()
        return self._to_record(row) if row else None

    def count_by_game_date_id(self, game_date_id: int) -> int:
        result = self.session.execute(
            select(func.count(Elimination.id)).where(Elimination.game_date_id == game_date_id)
        )
        return result.scalar()

    def update(self, elimination: EliminationRecord) -> EliminationRecord:
        # Only the player references are mutable
        result = self.session.execute(
            update(Elimination)
            .where(Elimination.id == elimination.id)
            .values(
                eliminated_player_id=elimination.eliminated_player_id,
                eliminator_player_id=elimination.eliminator_player_id,
            )
        )
        if result.rowcount == 0:
            raise EliminationNotFoundError(elimination.id)
        return elimination

    def delete(self, elimination_id: int) -> None:
        result = self.session.execute(
            delete(Elimination).where(Elimination.id == elimination_id)
        )
        if result.rowcount == 0:
            raise EliminationNotFoundError(elimination_id)

    def exists_later_eliminations(self, game_date_id: int, position: int) -> bool:
        result = self.session.execute(
            select(Elimination.id).where(
                Elimination.game_date_id == game_date_id,
                Elimination.position < position
            )
        )
        return result.first() is not None

    def _to_record(self, row: Elimination) -> EliminationRecord:
        game_date = self.session.get(GameDate, row.game_date_id)
        return EliminationRecord.reconstitute(
            id=row.id,
            game_date_id=row.game_date_id,
            position=Position.restore(row.position, game_date.total_players),
            points=Points.from_value(row.points),
            eliminated_player_id=row.eliminated_player_id,
            eliminator_player_id=row.eliminator_player_id,
            elimination_time=row.elimination_time,
        )


# ============================================================================
# Game dates and players
# ============================================================================

class SqlAlchemyGameDateRepository(GameDateRepository):
    def __init__(self, session: Session):
        self.session = session
        self.logger = setup_logger(f"{__name__}.SqlAlchemyGameDateRepository")

    def find_by_id(self, game_date_id: int) -> Optional[GameDateInfo]:
        row = self.session.get(GameDate, game_date_id)
        if row is None:
            return None
        return GameDateInfo(
            id=row.id,
            tournament_id=row.tournament_id,
            status=row.status,
            player_ids=tuple(row.player_ids or ()),
            scheduled_date=row.scheduled_date,
        )

    def mark_as_completed(self, game_date_id: int) -> None:
        self.session.execute(
            update(GameDate)
            .where(GameDate.id == game_date_id)
            .values(status=GameDateStatus.COMPLETED)
        )
        self.logger.info(f"Game date {game_date_id} marked as completed")


class SqlAlchemyPlayerRepository(PlayerRepository):
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, player_id: str) -> Optional[PlayerInfo]:
        row = self.session.get(Player, player_id)
        if row is None:
            return None
        return PlayerInfo(id=row.id, first_name=row.first_name, last_name=row.last_name)

    def update_last_victory_date(self, player_id: str, victory_date: str) -> None:
        self.session.execute(
            update(Player)
            .where(Player.id == player_id)
            .values(last_victory_date=victory_date)
        )


# ============================================================================
# Parent/child statistics
# ============================================================================

class SqlAlchemyParentChildStatsService(ParentChildStatsService):
    """
    Tracks how often a player (parent) eliminates another (child) within a
    tournament. Only registered, non-guest participants are tracked, and a
    relation becomes active once the count reaches the threshold.
    """

    def __init__(self, session: Session):
        self.session = session
        self.logger = setup_logger(f"{__name__}.SqlAlchemyParentChildStatsService")

    def update_stats(self, stat_update: ParentChildUpdate) -> None:
        if not self._both_tracked(stat_update):
            self.logger.debug(
                f"Skipping parent/child stat {stat_update.eliminator_id} -> {stat_update.eliminated_id}: "
                f"not both registered non-guest participants of tournament {stat_update.tournament_id}"
            )
            return

        result = self.session.execute(
            select(ParentChildStat).where(
                ParentChildStat.tournament_id == stat_update.tournament_id,
                ParentChildStat.parent_player_id == stat_update.eliminator_id,
                ParentChildStat.child_player_id == stat_update.eliminated_id
            )
        )
        stat = result.scalar_one_or_none()

        if stat is None:
            self.session.add(ParentChildStat(
                tournament_id=stat_update.tournament_id,
                parent_player_id=stat_update.eliminator_id,
                child_player_id=stat_update.eliminated_id,
                elimination_count=1,
                is_active_relation=False,
                first_elimination=stat_update.game_date_date,
                last_elimination=stat_update.game_date_date,
            ))
            self.session.flush()
            return

        stat.elimination_count += 1
        stat.last_elimination = stat_update.game_date_date
        if stat.elimination_count >= ParentChildConstants.ACTIVE_RELATION_THRESHOLD:
            if not stat.is_active_relation:
                self.logger.info(
                    f"Parent/child relation {stat_update.eliminator_id} -> {stat_update.eliminated_id} "
                    f"is now active ({stat.elimination_count} eliminations)"
                )
            stat.is_active_relation = True
        self.session.flush()

    def _both_tracked(self, stat_update: ParentChildUpdate) -> bool:
        player_ids = [stat_update.eliminator_id, stat_update.eliminated_id]
        result = self.session.execute(
            select(Player.role)
            .join(TournamentParticipant, TournamentParticipant.player_id == Player.id)
            .where(
                TournamentParticipant.tournament_id == stat_update.tournament_id,
                Player.id.in_(player_ids)
            )
        )
        roles = result.scalars().all()
        return len(roles) == 2 and all(role != PlayerRoles.INVITADO for role in roles)


# ============================================================================
# Ranking data
# ============================================================================

class SqlAlchemyRankingDataSource(RankingDataSource):
    """Builds ranking inputs from the completed and in-progress dates of a tournament."""

    def __init__(self, session: Session):
        self.session = session

    def get_ranking_data(self, tournament_id: int, max_date_number: Optional[int] = None) -> Optional[RankingData]:
        tournament = self.session.execute(
            select(Tournament)
            .where(Tournament.id == tournament_id)
            .options(selectinload(Tournament.participants).selectinload(TournamentParticipant.player))
        ).scalar_one_or_none()
        if tournament is None:
            return None

        query = (
            select(GameDate)
            .where(
                GameDate.tournament_id == tournament_id,
                GameDate.status.in_([GameDateStatus.COMPLETED, GameDateStatus.IN_PROGRESS])
            )
            .options(selectinload(GameDate.eliminations))
            .order_by(GameDate.date_number)
            .execution_options(populate_existing=True)
        )
        if max_date_number is not None:
            query = query.where(GameDate.date_number <= max_date_number)
        game_dates = self.session.execute(query).scalars().all()

        tournament_info = RankedTournamentInfo(
            id=tournament.id,
            name=tournament.name,
            number=tournament.number,
            total_dates=RankingConstants.TOTAL_DATES_PER_TOURNAMENT,
            completed_dates=len(game_dates),
        )

        player_inputs = []
        for participant in tournament.participants:
            player = participant.player
            player_inputs.append(PlayerRankingInput(
                player=RankedPlayerInfo(
                    id=player.id,
                    name=player.full_name,
                    alias=player.alias,
                    photo_url=player.photo_url,
                ),
                participations=[self._participation(player.id, gd) for gd in game_dates],
            ))

        return RankingData(tournament=tournament_info, player_inputs=player_inputs)

    def _participation(self, player_id: str, game_date: GameDate) -> GameDateParticipation:
        player_ids = game_date.player_ids or []
        if player_id not in player_ids:
            return GameDateParticipation(game_date.date_number, played=False, position=None, points=0)

        eliminations: Dict[str, Elimination] = {e.eliminated_player_id: e for e in game_date.eliminations}
        elimination = eliminations.get(player_id)
        if elimination is not None:
            return GameDateParticipation(
                game_date.date_number, played=True, position=elimination.position, points=elimination.points
            )

        active_players = len(player_ids) - len(game_date.eliminations)
        if active_players == 1 or game_date.status == GameDateStatus.COMPLETED:
            # Winner not registered yet: runner-up points plus the podium step
            runner_up = next((e for e in game_date.eliminations if e.position == 2), None)
            if runner_up is not None:
                winner_points = runner_up.points + ScoringConstants.PODIUM_INCREMENT
            else:
                winner_points = PointsSchedule.points_for_position(1, len(player_ids))
            return GameDateParticipation(game_date.date_number, played=True, position=1, points=winner_points)

        # Still playing
        return GameDateParticipation(game_date.date_number, played=True, position=None, points=0)


# ============================================================================
# Wiring
# ============================================================================

def build_elimination_operations(
    session: Session,
    notification_service: Optional[NotificationService] = None
) -> EliminationOperations:
    """Wire EliminationOperations to the SQLAlchemy adapters for one session."""
    return EliminationOperations(
        elimination_repository=SqlAlchemyEliminationRepository(session),
        game_date_repository=SqlAlchemyGameDateRepository(session),
        player_repository=SqlAlchemyPlayerRepository(session),
        notification_service=notification_service or LoggingNotificationService(),
        parent_child_stats_service=SqlAlchemyParentChildStatsService(session),
    )
