"""
Services package for the ELIMINA 2 engine.
"""

from .ranking_calculator import RankingCalculator
from .ranking_service import RankingService
from .notifications import LoggingNotificationService

__all__ = ['RankingCalculator', 'RankingService', 'LoggingNotificationService']
