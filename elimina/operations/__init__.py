"""
Operations Layer

Business logic that composes the repository and notification ports into the
elimination use cases. Ports are passed in as constructor arguments; the
SQLAlchemy wiring lives in elimina.database.repositories.

- EliminationOperations: register, update, delete and list eliminations
"""

from .elimination_operations import (
    EliminationOperations,
    EliminationOperationResult,
    RegisterEliminationCommand,
    UpdateEliminationCommand,
    UNCHANGED,
)

__all__ = [
    'EliminationOperations',
    'EliminationOperationResult',
    'RegisterEliminationCommand',
    'UpdateEliminationCommand',
    'UNCHANGED',
]
