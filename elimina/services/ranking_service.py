"""
Ranking service for tournament standings.

Fetches participation data through a RankingDataSource, computes the current
standings and the snapshot after the previous date, and applies trends.
"""

from typing import Optional

from elimina.constants import RankingConstants
from elimina.data_models.ranking import PlayerRanking, TournamentRanking
from elimina.operations.ports import RankingDataSource
from elimina.services.ranking_calculator import RankingCalculator
from elimina.utils.logger import setup_logger

logger = setup_logger(__name__)


class RankingService:
    """Serves tournament standings with trends."""

    def __init__(self, data_source: RankingDataSource, calculator: Optional[RankingCalculator] = None):
        """
        Initialize ranking service.

        Args:
            data_source: Source of per-date participation data
            calculator: Ranking calculator (a fresh one by default)
        """
        self.data_source = data_source
        self.calculator = calculator or RankingCalculator()

    def get_tournament_ranking(self, tournament_id: int) -> Optional[TournamentRanking]:
        """
        Get the current standings of a tournament with trends.

        Trends compare against the standings after the previous date; with
        fewer than two dates every trend is 'same'.

        Returns:
            TournamentRanking, or None if the tournament does not exist
        """
        data = self.data_source.get_ranking_data(tournament_id)
        if data is None:
            logger.warning(f"Ranking requested for unknown tournament {tournament_id}")
            return None

        current = self.calculator.calculate(data.tournament, data.player_inputs, None)

        previous = None
        completed_dates = data.tournament.completed_dates
        if completed_dates >= RankingConstants.MIN_DATES_FOR_TREND:
            previous = self.calculator.calculate_for_dates(
                data.tournament, data.player_inputs, completed_dates - 1
            )

        current.apply_trends(previous)

        logger.info(
            f"Ranking for tournament {tournament_id}: {current.player_count} players, "
            f"{completed_dates} dates, ELIMINA 2 {'applied' if current.is_elimina2_applied() else 'pending'}"
        )
        return current

    def get_player_ranking(self, tournament_id: int, player_id: str) -> Optional[PlayerRanking]:
        """Get one player's entry in the current standings."""
        ranking = self.get_tournament_ranking(tournament_id)
        if ranking is None:
            return None
        return ranking.get_player_ranking(player_id)
