"""
Custom exceptions for the elimination and ranking engine with user-friendly error messages.

Two families exist:
- EliminationValidationError: rule violations the caller can fix and retry with
  different input. Operations return these inside a failed result.
- RecordNotFoundError: a referenced game date, player or elimination does not
  exist. This is a data-integrity problem and is always raised.
"""

class EliminaException(Exception):
    """Base exception for engine errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message

# ========== Validation errors ==========

class EliminationValidationError(EliminaException):
    """Base class for caller-recoverable elimination rule violations."""
    pass

class InvalidPositionError(EliminationValidationError):
    """Raised when a position is outside 1..total players."""
    def __init__(self, position: int, total_players: int):
        self.position = position
        self.total_players = total_players
        super().__init__(
            f"Invalid position {position} for {total_players} players",
            f"❌ Position must be between 1 and {total_players}."
        )

class PlayerAlreadyEliminatedError(EliminationValidationError):
    """Raised when the player already has an elimination in the game date."""
    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(
            f"Player {player_id} is already eliminated in this game date",
            "❌ This player has already been eliminated!"
        )

class PositionAlreadyTakenError(EliminationValidationError):
    """Raised when the position already has an elimination in the game date."""
    def __init__(self, position: int):
        self.position = position
        super().__init__(
            f"Position {position} is already taken in this game date",
            f"❌ Position {position} has already been registered!"
        )

class InvalidEliminatorError(EliminationValidationError):
    """Raised when the eliminator was knocked out before the recorded position."""
    def __init__(self, eliminator_id: str, eliminator_position: int):
        self.eliminator_id = eliminator_id
        self.eliminator_position = eliminator_position
        super().__init__(
            f"Eliminator {eliminator_id} was already eliminated at position {eliminator_position}",
            f"❌ The eliminator was already out in position {eliminator_position}!"
        )

class GameDateNotInProgressError(EliminationValidationError):
    """Raised when eliminations are changed on a game date that is not in progress."""
    def __init__(self, game_date_id: int, status: str):
        self.game_date_id = game_date_id
        self.status = status
        super().__init__(
            f"Game date {game_date_id} is {status}, expected in_progress",
            "❌ Eliminations can only be changed while the game date is in progress."
        )

class EliminationNotDeletableError(EliminationValidationError):
    """Raised when deleting an elimination that has newer eliminations after it."""
    def __init__(self, elimination_id: int, position: int):
        self.elimination_id = elimination_id
        self.position = position
        super().__init__(
            f"Elimination {elimination_id} at position {position} has later eliminations",
            "❌ There are eliminations after this one. Delete the newer eliminations first."
        )

class ImmutableFieldError(EliminationValidationError):
    """Raised when an update tries to change position or points."""
    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(
            f"Field '{field_name}' cannot be changed on an existing elimination",
            "❌ Position and points cannot be changed. Delete and register again instead."
        )

# ========== Missing records ==========

class RecordNotFoundError(EliminaException):
    """Raised when a referenced record does not exist."""
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} {entity_id} not found",
            f"❌ {entity} not found!"
        )

class GameDateNotFoundError(RecordNotFoundError):
    """Raised when a game date is not found."""
    def __init__(self, game_date_id: int):
        super().__init__("Game date", game_date_id)

class PlayerNotFoundError(RecordNotFoundError):
    """Raised when a player is not found."""
    def __init__(self, player_id: str):
        super().__init__("Player", player_id)

class EliminationNotFoundError(RecordNotFoundError):
    """Raised when an elimination is not found."""
    def __init__(self, elimination_id: int):
        super().__init__("Elimination", elimination_id)
