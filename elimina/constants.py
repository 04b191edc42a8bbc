"""
Engine-wide constants for the ELIMINA 2 tournament engine.

This module contains the rules of the game (points schedule, ranking gates,
parent/child thresholds) so that none of them appear as magic numbers in the
scoring and ranking code.
"""

from elimina.config import Config


class ScoringConstants:
    """Constants for the per-date points schedule."""
    
    # Supported player counts (values outside are clamped)
    MIN_PLAYERS = 9
    MAX_PLAYERS = 24
    
    # Increments between consecutive positions
    BOTTOM_INCREMENT = 1   # From second-last up to position 10
    POSITION_9_BONUS = 2   # Position 9 over position 10
    MIDDLE_INCREMENT = 1   # Positions 8 to 4
    PODIUM_INCREMENT = 3   # Positions 3, 2, 1
    
    # Position ranges
    BONUS_POSITION = 9
    BOTTOM_START = 10
    MIDDLE_TOP = 4
    PODIUM_SIZE = 3
    
    # Points for the last player eliminated in any date
    LAST_PLACE_POINTS = 1


class RankingConstants:
    """Constants for tournament standings."""
    
    # ELIMINA 2: drop the two worst dates once enough dates are played
    ELIMINA2_MIN_DATES = 6
    DROPPED_DATES = 2
    
    # Of the 12 dates, the best 10 count
    TOTAL_DATES_PER_TOURNAMENT = Config.TOTAL_DATES_PER_TOURNAMENT
    BEST_DATES_COUNT = TOTAL_DATES_PER_TOURNAMENT - DROPPED_DATES
    
    # Trend needs at least two dates to compare against
    MIN_DATES_FOR_TREND = 2


class ParentChildConstants:
    """Constants for who-eliminates-whom statistics."""
    
    # A parent/child relation becomes active after this many eliminations
    ACTIVE_RELATION_THRESHOLD = 3


class PlayerRoles:
    """Player roles as stored on the player record."""
    
    COMISION = "Comision"
    ENFERMO = "Enfermo"
    INVITADO = "Invitado"  # Guests never count for parent/child stats
