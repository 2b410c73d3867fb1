"""Notification creation — single and bulk inserts."""

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from notifications.exceptions import storage_errors
from notifications.notification.notification import Notification, validate_notification_type

logger = structlog.get_logger(__name__)

_REQUIRED_FIELDS = ("user_id", "notification_type", "title", "message")
_ACCEPTED_FIELDS = (*_REQUIRED_FIELDS, "entity_type", "entity_id", "channels")


def _build(data) -> Notification:
    if not isinstance(data, dict):
        raise ValidationError({"notification": ["Must be an object"]})

    unknown = sorted(set(data) - set(_ACCEPTED_FIELDS))
    if unknown:
        raise ValidationError({field: ["Unknown field"] for field in unknown})

    missing = [field for field in _REQUIRED_FIELDS if not data.get(field)]
    if missing:
        raise ValidationError({field: ["is required"] for field in missing})

    validate_notification_type(data["notification_type"])
    return Notification.create(**data)


def create_notification(**data) -> Notification:
    """Create and persist one notification.

    Requires ``user_id``, ``notification_type``, ``title`` and ``message``.
    ``channels`` defaults to an empty list.
    """
    notification = _build(data)

    with storage_errors("create_notification"):
        current_domain.repository_for(Notification).add(notification)

    logger.info(
        "Notification created",
        notification_id=str(notification.id),
        user_id=str(notification.user_id),
        notification_type=notification.notification_type,
    )
    return notification


def create_notifications_bulk(items) -> list[Notification]:
    """Insert each item independently and return the created notifications.

    Items are not wrapped in a unit of work: when item ``i`` is invalid the
    ones before it stay persisted and a ValidationError keyed
    ``notifications[i].<field>`` is raised.
    """
    if not isinstance(items, list) or not items:
        raise ValidationError({"notifications": ["Must be a non-empty list"]})

    repo = current_domain.repository_for(Notification)
    created = []

    for index, data in enumerate(items):
        try:
            notification = _build(data)
        except ValidationError as exc:
            logger.warning(
                "Bulk notification create stopped at invalid item",
                index=index,
                created=len(created),
            )
            raise ValidationError(
                {f"notifications[{index}].{field}": errors for field, errors in exc.messages.items()}
            ) from exc

        with storage_errors("create_notifications_bulk"):
            repo.add(notification)
        created.append(notification)

    logger.info("Notifications created in bulk", count=len(created))
    return created
