"""Notification collaborator."""

from src.marketplace.core.notifications.events import (
    LoggingNotifier,
    Notification,
    NotificationType,
    Notifier,
    dispatch,
)

__all__ = [
    "LoggingNotifier",
    "Notification",
    "NotificationType",
    "Notifier",
    "dispatch",
]
