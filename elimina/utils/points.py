"""
Points schedule for a game date.

Builds the points-per-position table from the player count. The table is
built from last place upwards so every supported count yields a
non-increasing table ending in a single point.
"""

from typing import List

from elimina.constants import ScoringConstants


class PointsSchedule:
    """Handles the ELIMINA 2 points-per-position schedule for a game date"""

    @staticmethod
    def clamp_players(total_players: int) -> int:
        """
        Clamp a player count into the supported range

        Args:
            total_players: Number of players registered for the game date

        Returns:
            Player count between MIN_PLAYERS and MAX_PLAYERS
        """
        return max(ScoringConstants.MIN_PLAYERS, min(ScoringConstants.MAX_PLAYERS, total_players))

    @staticmethod
    def build_points_array(total_players: int) -> List[int]:
        """
        Build the complete points table for a number of players

        Index 0 is position 1 (winner), index total_players - 1 is the
        first player eliminated. Built from last place upwards:
        - Last place: 1 point
        - Second-last up to position 10: +1 each
        - Position 9: +2 over position 10
        - Positions 8 to 4: +1 each
        - Positions 3, 2, 1: +3 each

        Args:
            total_players: Number of players, between MIN_PLAYERS and MAX_PLAYERS

        Returns:
            List of points, one per position
        """
        if not ScoringConstants.MIN_PLAYERS <= total_players <= ScoringConstants.MAX_PLAYERS:
            raise ValueError(
                f"Points schedule supports {ScoringConstants.MIN_PLAYERS}-"
                f"{ScoringConstants.MAX_PLAYERS} players, got {total_players}"
            )

        points = [0] * total_players
        points[total_players - 1] = ScoringConstants.LAST_PLACE_POINTS

        # Second-last down to position 10 (index 9)
        bottom_index = ScoringConstants.BOTTOM_START - 1
        for i in range(total_players - 2, bottom_index - 1, -1):
            points[i] = points[i + 1] + ScoringConstants.BOTTOM_INCREMENT

        # Position 9 bonus only when position 10 is a distinct slot;
        # with 9 players position 9 is last place and keeps its single point
        bonus_index = ScoringConstants.BONUS_POSITION - 1
        if total_players > ScoringConstants.BONUS_POSITION:
            points[bonus_index] = points[bonus_index + 1] + ScoringConstants.POSITION_9_BONUS

        # Positions 8 to 4 (indices 7 to 3)
        for i in range(bonus_index - 1, ScoringConstants.MIDDLE_TOP - 2, -1):
            points[i] = points[i + 1] + ScoringConstants.MIDDLE_INCREMENT

        # Podium (indices 2, 1, 0)
        for i in range(ScoringConstants.PODIUM_SIZE - 1, -1, -1):
            points[i] = points[i + 1] + ScoringConstants.PODIUM_INCREMENT

        return points

    @staticmethod
    def get_distribution(total_players: int) -> List[int]:
        """
        Get the points table for display, clamping the player count first

        Args:
            total_players: Number of players (any value)

        Returns:
            Points table for the clamped player count
        """
        return PointsSchedule.build_points_array(PointsSchedule.clamp_players(total_players))

    @staticmethod
    def points_for_position(position: int, total_players: int) -> int:
        """
        Get the points for a single finishing position

        Out-of-range positions yield 0 instead of failing so that display code
        can render partial tables.

        Args:
            position: Finishing position (1 = winner)
            total_players: Number of players in the game date

        Returns:
            Points awarded for the position
        """
        players = PointsSchedule.clamp_players(total_players)
        if position < 1 or position > players:
            return 0
        return PointsSchedule.build_points_array(players)[position - 1]

    @staticmethod
    def format_points(points: int) -> str:
        """Format points for display"""
        return f"{points} pts"
