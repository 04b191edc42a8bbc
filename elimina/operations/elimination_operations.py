"""
Elimination Operations Service

Handles all business logic for registering, correcting and undoing player
eliminations within a game date, including the auto-transition to a completed
game date when the runner-up is knocked out and only the winner remains.

Rule violations come back as a failed EliminationOperationResult carrying the
typed error. Missing game dates, players or eliminations are raised as
RecordNotFoundError before anything is written.

The checks here are check-then-act: callers must run each operation inside a
single database transaction (see Database.transaction) so that concurrent
registrations on the same game date are serialized.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from elimina.data_models.elimination import EliminationDTO, EliminationRecord
from elimina.data_models.game_date import GameDateInfo, PlayerInfo, PlayerSummary
from elimina.operations.ports import (
    EliminationRepository, GameDateRepository, PlayerRepository,
    NotificationService, ParentChildStatsService,
    PlayerEliminatedNotification, WinnerDeclaredNotification, ParentChildUpdate
)
from elimina.utils.exceptions import (
    EliminationValidationError, EliminationNotDeletableError, GameDateNotInProgressError,
    ImmutableFieldError, InvalidEliminatorError, PlayerAlreadyEliminatedError,
    PositionAlreadyTakenError, EliminationNotFoundError, GameDateNotFoundError,
    PlayerNotFoundError
)
from elimina.utils.logger import setup_logger


class _Unchanged:
    def __repr__(self):
        return "UNCHANGED"


# Marks an update field the caller did not send (None clears the eliminator)
UNCHANGED: Any = _Unchanged()


@dataclass(frozen=True)
class RegisterEliminationCommand:
    """Input for registering an elimination"""
    game_date_id: int
    position: int
    eliminated_player_id: str
    eliminator_player_id: Optional[str] = None


@dataclass(frozen=True)
class UpdateEliminationCommand:
    """Input for reassigning the players of an elimination"""
    elimination_id: int
    eliminated_player_id: Optional[str] = None
    eliminator_player_id: Any = UNCHANGED
    position: Optional[int] = None  # Rejected if sent
    points: Optional[int] = None    # Rejected if sent


@dataclass
class EliminationOperationResult:
    """Result of an elimination operation"""
    success: bool
    elimination: Optional[EliminationDTO] = None
    triggered_auto_complete: bool = False
    winner_elimination: Optional[EliminationDTO] = None
    error: Optional[EliminationValidationError] = None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.user_message if self.error else None


class EliminationOperations:
    """
    Service class for elimination-related operations.

    Enforces the elimination rules of a game date:
    - Eliminations are only changed while the game date is in progress
    - A player is eliminated at most once and a position is used at most once
    - An eliminator cannot have been knocked out before the position recorded
    - Only the latest elimination can be deleted
    """

    def __init__(
        self,
        elimination_repository: EliminationRepository,
        game_date_repository: GameDateRepository,
        player_repository: PlayerRepository,
        notification_service: NotificationService,
        parent_child_stats_service: ParentChildStatsService
    ):
        self.eliminations = elimination_repository
        self.game_dates = game_date_repository
        self.players = player_repository
        self.notifications = notification_service
        self.parent_child_stats = parent_child_stats_service
        self.logger = setup_logger(f"{__name__}.EliminationOperations")

    # ============================================================================
    # Registration
    # ============================================================================

    def register_elimination(self, command: RegisterEliminationCommand) -> EliminationOperationResult:
        """
        Register a player's elimination with auto-completion of the game date.

        When the runner-up (position 2) is registered with an eliminator and
        every other player already has an elimination, the eliminator's
        position 1 record is created and the game date is marked completed.

        Args:
            command: Game date, position and the players involved

        Returns:
            EliminationOperationResult with the registered elimination and,
            when auto-completion fired, the winner's elimination

        Raises:
            GameDateNotFoundError: If the game date does not exist
            PlayerNotFoundError: If either player does not exist
        """
        try:
            return self._register(command)
        except EliminationValidationError as e:
            self.logger.warning(
                f"Rejected elimination for game date {command.game_date_id} "
                f"position {command.position}: {e.message}"
            )
            return EliminationOperationResult(success=False, error=e)

    def _register(self, command: RegisterEliminationCommand) -> EliminationOperationResult:
        # 1. Validate game date exists and is in progress
        game_date = self._require_in_progress_game_date(command.game_date_id)

        # 2. Validate player not already eliminated
        if self.eliminations.exists_by_player_in_game_date(command.eliminated_player_id, game_date.id):
            raise PlayerAlreadyEliminatedError(command.eliminated_player_id)

        # 3. Validate position not taken
        if self.eliminations.exists_by_position_in_game_date(command.position, game_date.id):
            raise PositionAlreadyTakenError(command.position)

        # 4. Validate eliminator was still playing at this position
        if command.eliminator_player_id:
            eliminator_record = self.eliminations.find_by_player_in_game_date(
                command.eliminator_player_id, game_date.id
            )
            if eliminator_record and eliminator_record.position.value > command.position:
                raise InvalidEliminatorError(
                    command.eliminator_player_id, eliminator_record.position.value
                )

        # 5. Resolve players before writing anything
        eliminated_player = self._require_player(command.eliminated_player_id)
        eliminator_player = (
            self._require_player(command.eliminator_player_id)
            if command.eliminator_player_id else None
        )

        # 6. Build and save the elimination
        total_players = game_date.total_players
        elimination = EliminationRecord.create(
            game_date_id=game_date.id,
            position=command.position,
            total_players=total_players,
            eliminated_player_id=command.eliminated_player_id,
            eliminator_player_id=command.eliminator_player_id,
        )
        saved = self.eliminations.save(elimination)

        self.logger.info(
            f"Registered elimination {saved.id}: {eliminated_player.full_name} out at position "
            f"{saved.position.value} ({saved.points}) in game date {game_date.id}"
        )

        # 7. Winner or elimination side effects
        if saved.is_winner:
            self._handle_winner(eliminated_player, game_date, saved)
        else:
            self.notifications.notify_player_eliminated(PlayerEliminatedNotification(
                player_id=eliminated_player.id,
                player_name=eliminated_player.full_name,
                position=saved.position.value,
                points=saved.points.value,
                game_date_id=game_date.id,
            ))

        # 8. Parent/child stats whenever someone did the eliminating
        if command.eliminator_player_id:
            self.parent_child_stats.update_stats(ParentChildUpdate(
                tournament_id=game_date.tournament_id,
                eliminator_id=command.eliminator_player_id,
                eliminated_id=command.eliminated_player_id,
                game_date_date=game_date.scheduled_date,
            ))

        # 9. Auto-complete when the runner-up leaves only the winner
        winner_dto = None
        winner_id = saved.auto_complete_winner_id
        if winner_id and eliminator_player is not None:
            winner_dto = self._auto_complete(saved, eliminator_player, game_date)

        players = {eliminated_player.id: eliminated_player}
        if eliminator_player is not None:
            players[eliminator_player.id] = eliminator_player

        return EliminationOperationResult(
            success=True,
            elimination=self._to_dto(saved, players),
            triggered_auto_complete=winner_dto is not None,
            winner_elimination=winner_dto,
        )

    def _auto_complete(
        self,
        runner_up: EliminationRecord,
        winner: PlayerInfo,
        game_date: GameDateInfo
    ) -> Optional[EliminationDTO]:
        """Create the winner's elimination and complete the game date if only the winner is left."""
        total_players = game_date.total_players
        elimination_count = self.eliminations.count_by_game_date_id(game_date.id)
        if elimination_count != total_players - 1:
            self.logger.debug(
                f"Game date {game_date.id}: runner-up registered with {elimination_count} of "
                f"{total_players - 1} eliminations, winner must be registered manually"
            )
            return None

        if (
            self.eliminations.exists_by_position_in_game_date(1, game_date.id)
            or self.eliminations.exists_by_player_in_game_date(winner.id, game_date.id)
        ):
            self.logger.debug(
                f"Game date {game_date.id}: winner already registered, skipping auto-completion"
            )
            return None

        winner_record = runner_up.create_winner_elimination(winner.id, total_players)
        saved_winner = self.eliminations.save(winner_record)

        self._handle_winner(winner, game_date, saved_winner)
        self.game_dates.mark_as_completed(game_date.id)

        self.logger.info(
            f"Game date {game_date.id} auto-completed - {winner.full_name} wins with {saved_winner.points}"
        )
        return self._to_dto(saved_winner, {winner.id: winner})

    def _handle_winner(self, player: PlayerInfo, game_date: GameDateInfo, elimination: EliminationRecord):
        """Record the victory date and announce the winner"""
        victory_date = game_date.scheduled_date.date().isoformat()
        self.players.update_last_victory_date(player.id, victory_date)

        self.notifications.notify_winner_declared(WinnerDeclaredNotification(
            player_id=player.id,
            player_name=player.full_name,
            points=elimination.points.value,
            game_date_id=game_date.id,
        ))

    # ============================================================================
    # Corrections
    # ============================================================================

    def update_elimination(self, command: UpdateEliminationCommand) -> EliminationOperationResult:
        """
        Reassign the eliminated player and/or the eliminator of an elimination.

        Position and points never change. The player rules are checked against
        the other eliminations of the game date.

        Args:
            command: Elimination id and the new player assignments

        Returns:
            EliminationOperationResult with the updated elimination

        Raises:
            EliminationNotFoundError: If the elimination does not exist
            GameDateNotFoundError: If its game date does not exist
            PlayerNotFoundError: If a newly assigned player does not exist
        """
        try:
            return self._update(command)
        except EliminationValidationError as e:
            self.logger.warning(f"Rejected update of elimination {command.elimination_id}: {e.message}")
            return EliminationOperationResult(success=False, error=e)

    def _update(self, command: UpdateEliminationCommand) -> EliminationOperationResult:
        existing = self._require_elimination(command.elimination_id)

        if command.position is not None:
            raise ImmutableFieldError("position")
        if command.points is not None:
            raise ImmutableFieldError("points")

        game_date = self._require_in_progress_game_date(existing.game_date_id)

        new_eliminated_id = command.eliminated_player_id or existing.eliminated_player_id
        if new_eliminated_id != existing.eliminated_player_id:
            other = self.eliminations.find_by_player_in_game_date(new_eliminated_id, game_date.id)
            if other and other.id != existing.id:
                raise PlayerAlreadyEliminatedError(new_eliminated_id)

        new_eliminator_id = (
            existing.eliminator_player_id
            if command.eliminator_player_id is UNCHANGED
            else command.eliminator_player_id
        )
        if new_eliminator_id:
            eliminator_record = self.eliminations.find_by_player_in_game_date(new_eliminator_id, game_date.id)
            if (
                eliminator_record
                and eliminator_record.id != existing.id
                and eliminator_record.position.value > existing.position.value
            ):
                raise InvalidEliminatorError(new_eliminator_id, eliminator_record.position.value)

        players = {new_eliminated_id: self._require_player(new_eliminated_id)}
        if new_eliminator_id:
            players[new_eliminator_id] = self._require_player(new_eliminator_id)

        updated = self.eliminations.update(existing.with_players(new_eliminated_id, new_eliminator_id))

        self.logger.info(
            f"Updated elimination {updated.id} (position {updated.position.value}) in game date "
            f"{game_date.id}: eliminated={new_eliminated_id}, eliminator={new_eliminator_id}"
        )
        return EliminationOperationResult(success=True, elimination=self._to_dto(updated, players))

    def delete_elimination(self, elimination_id: int) -> EliminationOperationResult:
        """
        Delete the most recent elimination of a game date.

        Eliminations are undone in reverse order: one with a later elimination
        (a lower position value) in the same game date cannot be deleted.

        Args:
            elimination_id: ID of the elimination to delete

        Returns:
            EliminationOperationResult with the deleted elimination

        Raises:
            EliminationNotFoundError: If the elimination does not exist
            GameDateNotFoundError: If its game date does not exist
        """
        try:
            return self._delete(elimination_id)
        except EliminationValidationError as e:
            self.logger.warning(f"Rejected deletion of elimination {elimination_id}: {e.message}")
            return EliminationOperationResult(success=False, error=e)

    def _delete(self, elimination_id: int) -> EliminationOperationResult:
        existing = self._require_elimination(elimination_id)
        game_date = self._require_in_progress_game_date(existing.game_date_id)

        if self.eliminations.exists_later_eliminations(game_date.id, existing.position.value):
            raise EliminationNotDeletableError(elimination_id, existing.position.value)

        deleted = self._to_dto(existing, {})
        self.eliminations.delete(elimination_id)

        self.logger.info(
            f"Deleted elimination {elimination_id} (position {existing.position.value}) "
            f"from game date {game_date.id}"
        )
        return EliminationOperationResult(success=True, elimination=deleted)

    # ============================================================================
    # Queries
    # ============================================================================

    def get_eliminations(self, game_date_id: int) -> List[EliminationDTO]:
        """
        Get all eliminations of a game date, first eliminated first.

        Raises:
            GameDateNotFoundError: If the game date does not exist
        """
        if self.game_dates.find_by_id(game_date_id) is None:
            raise GameDateNotFoundError(game_date_id)

        players: Dict[str, PlayerInfo] = {}
        return [self._to_dto(record, players) for record in self.eliminations.find_by_game_date_id(game_date_id)]

    # ============================================================================
    # Helpers
    # ============================================================================

    def _require_in_progress_game_date(self, game_date_id: int) -> GameDateInfo:
        game_date = self.game_dates.find_by_id(game_date_id)
        if game_date is None:
            raise GameDateNotFoundError(game_date_id)
        if not game_date.is_in_progress:
            raise GameDateNotInProgressError(game_date_id, game_date.status.value)
        return game_date

    def _require_elimination(self, elimination_id: int) -> EliminationRecord:
        elimination = self.eliminations.find_by_id(elimination_id)
        if elimination is None:
            raise EliminationNotFoundError(elimination_id)
        return elimination

    def _require_player(self, player_id: str) -> PlayerInfo:
        player = self.players.find_by_id(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    def _to_dto(self, record: EliminationRecord, players: Dict[str, PlayerInfo]) -> EliminationDTO:
        """Map a record to its DTO, resolving players through (and filling) the cache"""
        def summary(player_id: str) -> PlayerSummary:
            if player_id not in players:
                players[player_id] = self._require_player(player_id)
            return PlayerSummary.from_player(players[player_id])

        return EliminationDTO(
            id=record.id,
            game_date_id=record.game_date_id,
            position=record.position.value,
            points=record.points.value,
            eliminated_player=summary(record.eliminated_player_id),
            eliminator_player=summary(record.eliminator_player_id) if record.eliminator_player_id else None,
            elimination_time=record.elimination_time,
        )
