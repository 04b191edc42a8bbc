"""Tests for RankingCalculator and RankingService."""

from elimina.data_models.ranking import (
    GameDateParticipation, PlayerRankingInput, RankedPlayerInfo,
    RankedTournamentInfo, RankingTrend, TiebreakerStats, TrendDirection
)
from elimina.operations.ports import RankingData, RankingDataSource
from elimina.services import RankingCalculator, RankingService


def played(date_number, position, points):
    return GameDateParticipation(date_number, played=True, position=position, points=points)


def absent(date_number):
    return GameDateParticipation(date_number, played=False, position=None, points=0)


def tournament(completed_dates):
    return RankedTournamentInfo(id=28, name="Torneo 28", number=28, total_dates=12, completed_dates=completed_dates)


# Date 1: Ana wins, Bruno second. Date 2: Bruno wins, Carla second, Ana absent.
INPUTS = [
    PlayerRankingInput(RankedPlayerInfo("p1", "Ana"), [played(1, 1, 17), absent(2)]),
    PlayerRankingInput(RankedPlayerInfo("p2", "Bruno"), [played(1, 2, 14), played(2, 1, 17)]),
    PlayerRankingInput(RankedPlayerInfo("p3", "Carla"), [played(1, 10, 1), played(2, 2, 14)]),
]


class FakeRankingDataSource(RankingDataSource):
    def __init__(self, data):
        self.data = data

    def get_ranking_data(self, tournament_id, max_date_number=None):
        return self.data.get(tournament_id)


class TestRankingCalculator:
    def test_folds_participations(self):
        ranking = RankingCalculator().calculate(tournament(2), INPUTS)
        bruno = ranking.get_player_ranking("p2")
        assert bruno.position == 1
        assert bruno.total_points == 31
        assert bruno.dates_played == 2
        assert bruno.tiebreaker == TiebreakerStats(1, 1, 0, 0)

        ana = ranking.get_player_ranking("p1")
        assert ana.dates_played == 1
        assert ana.points_by_date == {1: 17, 2: 0}
        assert ana.tiebreaker == TiebreakerStats(1, 0, 0, 1)

    def test_absence_counts_even_with_points(self):
        odd_input = PlayerRankingInput(
            RankedPlayerInfo("p9", "Ines"),
            [GameDateParticipation(1, played=False, position=None, points=5)],
        )
        ranking = RankingCalculator().calculate(tournament(1), [odd_input])
        entry = ranking.get_player_ranking("p9")
        assert entry.tiebreaker.absences == 1
        assert entry.dates_played == 0
        assert entry.total_points == 5

    def test_still_playing_counts_as_played(self):
        playing = PlayerRankingInput(RankedPlayerInfo("p9", "Ines"), [played(1, None, 0)])
        entry = RankingCalculator().calculate(tournament(1), [playing]).get_player_ranking("p9")
        assert entry.dates_played == 1
        assert entry.tiebreaker == TiebreakerStats.empty()

    def test_trend_step_skipped_unless_requested(self):
        calculator = RankingCalculator()
        previous = calculator.calculate_for_dates(tournament(2), INPUTS, 1)
        current = calculator.calculate(tournament(2), INPUTS, previous)
        assert current.get_player_ranking("p2").trend == RankingTrend.up(1)

        reset = calculator.calculate(tournament(2), INPUTS, None)
        assert all(r.trend == RankingTrend.same() for r in reset.rankings)

    def test_calculate_for_dates(self):
        ranking = RankingCalculator().calculate_for_dates(tournament(2), INPUTS, 1)
        assert ranking.tournament.completed_dates == 1
        assert [r.player_id for r in ranking.rankings] == ["p1", "p2", "p3"]
        assert ranking.get_player_ranking("p1").points_by_date == {1: 17}
        assert ranking.get_player_ranking("p1").tiebreaker.absences == 0


class TestRankingService:
    def test_current_ranking_with_trends(self):
        service = RankingService(FakeRankingDataSource({28: RankingData(tournament(2), INPUTS)}))
        ranking = service.get_tournament_ranking(28)

        assert [r.player_id for r in ranking.rankings] == ["p2", "p1", "p3"]
        trends = {r.player_id: r.trend.direction for r in ranking.rankings}
        assert trends == {"p2": TrendDirection.UP, "p1": TrendDirection.DOWN, "p3": TrendDirection.SAME}

    def test_single_date_has_no_trend(self):
        single = [PlayerRankingInput(i.player, list(i.participations)[:1]) for i in INPUTS]
        service = RankingService(FakeRankingDataSource({28: RankingData(tournament(1), single)}))
        ranking = service.get_tournament_ranking(28)
        assert all(r.trend == RankingTrend.same() for r in ranking.rankings)

    def test_unknown_tournament(self):
        service = RankingService(FakeRankingDataSource({}))
        assert service.get_tournament_ranking(1) is None
        assert service.get_player_ranking(1, "p1") is None

    def test_player_ranking(self):
        service = RankingService(FakeRankingDataSource({28: RankingData(tournament(2), INPUTS)}))
        assert service.get_player_ranking(28, "p3").position == 3
        assert service.get_player_ranking(28, "nobody") is None
