"""
Notification adapter that reports game date progress through the log.
"""

from elimina.operations.ports import (
    NotificationService, PlayerEliminatedNotification, WinnerDeclaredNotification
)
from elimina.utils.logger import setup_logger

logger = setup_logger(__name__)


class LoggingNotificationService(NotificationService):
    """Writes elimination and winner announcements to the log."""

    def notify_player_eliminated(self, notification: PlayerEliminatedNotification) -> None:
        logger.info(
            f"💀 {notification.player_name} eliminated in position {notification.position} "
            f"({notification.points} pts) - game date {notification.game_date_id}"
        )

    def notify_winner_declared(self, notification: WinnerDeclaredNotification) -> None:
        logger.info(
            f"🏆 {notification.player_name} wins game date {notification.game_date_id} "
            f"({notification.points} pts)"
        )
