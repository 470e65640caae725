"""Workflow notification events.

Delivery (push, SMS, in-app inbox) belongs to the notification service.
This module only describes the events the workflow emits and hands them to
a sink after the owning transaction has committed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol
from uuid import UUID

from src.marketplace.core.logging import get_logger

logger = get_logger(__name__)


class NotificationType(str, Enum):
    REQUEST_RECEIVED = "request_received"
    PROPOSAL_RECEIVED = "proposal_received"
    PROPOSAL_ACCEPTED = "proposal_accepted"
    PROPOSAL_REJECTED = "proposal_rejected"
    DESIGNER_ASSIGNED = "designer_assigned"


@dataclass(frozen=True)
class Notification:
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)


class Notifier(Protocol):
    async def send(self, notification: Notification) -> None: ...


class LoggingNotifier:
    """Default sink: records the event in the structured log."""

    async def send(self, notification: Notification) -> None:
        logger.info(
            "Notification emitted",
            recipient=str(notification.user_id),
            notification_type=notification.type.value,
            title=notification.title,
        )


async def dispatch(notifier: Notifier, notifications: list[Notification]) -> None:
    """Send each notification; a failing send never affects the others."""
    for notification in notifications:
        try:
            await notifier.send(notification)
        except Exception as e:
            logger.warning(
                "Failed to send notification",
                notification_type=notification.type.value,
                recipient=str(notification.user_id),
                error=str(e),
            )
