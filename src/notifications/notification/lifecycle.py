"""Notification lifecycle commands + handlers — read, sent, mark-all, delete, cleanup.

Each handler runs inside a unit of work, so mark-all-read and cleanup
either apply to every matching notification or to none.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from notifications.domain import notifications
from notifications.notification.listing import fetch_all
from notifications.notification.notification import Notification

logger = structlog.get_logger(__name__)

DEFAULT_RETENTION_DAYS = 30


@notifications.command(part_of="Notification")
class MarkNotificationRead:
    """Mark one notification as read."""

    notification_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class MarkNotificationSent:
    """Mark one notification as handed off for delivery."""

    notification_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class MarkAllNotificationsRead:
    """Mark every unread notification of a user as read."""

    user_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class DeleteNotification:
    notification_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class CleanupNotifications:
    """Delete a user's read notifications older than ``older_than_days``."""

    user_id: Identifier(required=True)
    older_than_days: Integer(default=DEFAULT_RETENTION_DAYS)


@notifications.command_handler(part_of=Notification)
class NotificationLifecycleHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        if notification.mark_read():
            repo.add(notification)
            logger.info("Notification marked read", notification_id=str(notification.id))
        return notification

    @handle(MarkNotificationSent)
    def mark_sent(self, command: MarkNotificationSent):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        if notification.mark_sent():
            repo.add(notification)
            logger.info("Notification marked sent", notification_id=str(notification.id))
        return notification

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command: MarkAllNotificationsRead) -> int:
        repo = current_domain.repository_for(Notification)
        unread = fetch_all(repo._dao.query.filter(user_id=str(command.user_id), is_read=False))

        read_at = datetime.now(UTC)
        for notification in unread:
            notification.mark_read(read_at=read_at)
            repo.add(notification)

        logger.info("Notifications marked read", user_id=str(command.user_id), count=len(unread))
        return len(unread)

    @handle(DeleteNotification)
    def delete(self, command: DeleteNotification):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        repo._dao.delete(notification)
        logger.info("Notification deleted", notification_id=str(notification.id))
        return notification

    @handle(CleanupNotifications)
    def cleanup(self, command: CleanupNotifications) -> int:
        days = command.older_than_days
        if days is None or days < 1:
            raise ValidationError({"older_than_days": ["Must be a positive integer"]})

        cutoff = datetime.now(UTC) - timedelta(days=days)
        repo = current_domain.repository_for(Notification)
        read = fetch_all(repo._dao.query.filter(user_id=str(command.user_id), is_read=True))

        expired = [n for n in read if n.is_older_than(cutoff)]
        for notification in expired:
            repo._dao.delete(notification)

        logger.info(
            "Old notifications cleaned up",
            user_id=str(command.user_id),
            older_than_days=days,
            count=len(expired),
        )
        return len(expired)
