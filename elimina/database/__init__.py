"""
Database Layer

SQLAlchemy models, the Database session manager and the repository adapters
that back the elimination operations and the ranking service.
"""

from .database import Database
from .repositories import (
    SqlAlchemyEliminationRepository,
    SqlAlchemyGameDateRepository,
    SqlAlchemyPlayerRepository,
    SqlAlchemyParentChildStatsService,
    SqlAlchemyRankingDataSource,
    build_elimination_operations,
)

__all__ = [
    'Database',
    'SqlAlchemyEliminationRepository',
    'SqlAlchemyGameDateRepository',
    'SqlAlchemyPlayerRepository',
    'SqlAlchemyParentChildStatsService',
    'SqlAlchemyRankingDataSource',
    'build_elimination_operations',
]
