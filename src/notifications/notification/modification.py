"""Generic field update of a notification."""

import structlog
from protean.utils.globals import current_domain

from notifications.exceptions import storage_errors
from notifications.notification.notification import Notification

logger = structlog.get_logger(__name__)


def update_notification(notification_id, changes: dict) -> Notification:
    """Merge ``changes`` into the notification and persist it.

    Raises ObjectNotFoundError for an unknown id and ValidationError for
    fields that cannot be updated or values that do not validate.
    """
    with storage_errors("update_notification"):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(notification_id)

    notification.apply_changes(**changes)

    with storage_errors("update_notification"):
        repo.add(notification)

    logger.info(
        "Notification updated",
        notification_id=str(notification.id),
        fields=sorted(changes),
    )
    return notification
