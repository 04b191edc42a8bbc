"""
Ranking Calculator

Turns raw per-date participation data into a TournamentRanking: one pass per
player folds the participations into a points-by-date map and tiebreaker
stats, then TournamentRanking sorts the entries and assigns ranks.

Pure and stateless: every call builds fresh objects, so one calculator can be
shared between any number of readers.
"""

from dataclasses import replace
from typing import Dict, Sequence

from elimina.data_models.ranking import (
    PlayerRanking, PlayerRankingInput, RankedTournamentInfo,
    TiebreakerStats, TournamentRanking
)
from elimina.utils.logger import setup_logger

logger = setup_logger(__name__)

# Distinguishes "no previous ranking given" from an explicit None
_NOT_GIVEN = object()


class RankingCalculator:
    """Builds tournament standings from participation data."""

    def calculate(
        self,
        tournament: RankedTournamentInfo,
        player_inputs: Sequence[PlayerRankingInput],
        previous_ranking=_NOT_GIVEN
    ) -> TournamentRanking:
        """
        Calculate the complete tournament ranking.

        Args:
            tournament: Tournament info
            player_inputs: Participation data for each registered player
            previous_ranking: Snapshot to compute trends against. Omit it to
                skip the trend step; pass None to reset every trend to 'same'.

        Returns:
            Sorted TournamentRanking with ranks assigned
        """
        player_rankings = [self._build_player_ranking(p) for p in player_inputs]
        ranking = TournamentRanking.create(tournament, player_rankings)

        if previous_ranking is not _NOT_GIVEN:
            ranking.apply_trends(previous_ranking)

        logger.debug(
            f"Calculated ranking for tournament {tournament.id}: "
            f"{ranking.player_count} players, {tournament.completed_dates} dates"
        )
        return ranking

    def calculate_for_dates(
        self,
        tournament: RankedTournamentInfo,
        player_inputs: Sequence[PlayerRankingInput],
        max_date_number: int
    ) -> TournamentRanking:
        """
        Calculate the ranking as it stood after a given date.

        Used to build the previous snapshot for trends. Trends of the returned
        ranking are all 'same'.
        """
        filtered_inputs = [
            replace(
                player_input,
                participations=[p for p in player_input.participations if p.date_number <= max_date_number],
            )
            for player_input in player_inputs
        ]
        adjusted_tournament = replace(
            tournament,
            completed_dates=min(tournament.completed_dates, max_date_number),
        )
        return self.calculate(adjusted_tournament, filtered_inputs, None)

    def _build_player_ranking(self, player_input: PlayerRankingInput) -> PlayerRanking:
        points_by_date: Dict[int, int] = {}
        dates_played = 0
        tiebreaker = TiebreakerStats.empty()

        for participation in player_input.participations:
            points_by_date[participation.date_number] = participation.points

            if not participation.played:
                # Absence is defined by not playing, whatever the points say
                tiebreaker = tiebreaker.with_absence()
                continue

            dates_played += 1
            if participation.position == 1:
                tiebreaker = tiebreaker.with_first_place()
            elif participation.position == 2:
                tiebreaker = tiebreaker.with_second_place()
            elif participation.position == 3:
                tiebreaker = tiebreaker.with_third_place()

        return PlayerRanking.create(player_input.player, points_by_date, dates_played, tiebreaker)
