"""Read-side queries over notifications: per-user lists, pending, by entity, stats."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from notifications.exceptions import storage_errors
from notifications.notification.notification import (
    CHANNELS,
    ENTITY_TYPES,
    Notification,
    validate_notification_type,
)

PAGE_SIZE = 100
PENDING_BATCH_SIZE = 100
DEFAULT_LIST_LIMIT = 50


def fetch_all(queryset, page_size: int = PAGE_SIZE) -> list:
    """Drain a queryset page by page. Querysets cap each ``all()`` at one page."""
    results = []
    offset = 0
    while True:
        page = queryset.offset(offset).limit(page_size).all().items
        results.extend(page)
        if len(page) < page_size:
            return results
        offset += page_size


def _query():
    return current_domain.repository_for(Notification)._dao.query


def get_notification(notification_id) -> Notification:
    """Fetch one notification. Raises ObjectNotFoundError when unknown."""
    with storage_errors("get_notification"):
        return current_domain.repository_for(Notification).get(notification_id)


def list_for_user(
    user_id,
    is_read: bool | None = None,
    notification_type: str | None = None,
    is_sent: bool | None = None,
    limit: int = DEFAULT_LIST_LIMIT,
    skip: int = 0,
) -> list[Notification]:
    """A user's notifications, newest first, with optional equality filters."""
    if limit < 1:
        raise ValidationError({"limit": ["Must be a positive integer"]})
    if skip < 0:
        raise ValidationError({"skip": ["Must not be negative"]})

    filters = {"user_id": str(user_id)}
    if is_read is not None:
        filters["is_read"] = is_read
    if is_sent is not None:
        filters["is_sent"] = is_sent
    if notification_type is not None:
        filters["notification_type"] = validate_notification_type(notification_type)

    with storage_errors("list_notifications"):
        return list(_query().filter(**filters).order_by("-created_at").offset(skip).limit(limit).all().items)


def unread_count(user_id) -> int:
    with storage_errors("unread_count"):
        return _query().filter(user_id=str(user_id), is_read=False).all().total


def pending(channel: str | None = None) -> list[Notification]:
    """Unsent notifications, oldest first, at most one batch per call.

    With ``channel``, only notifications addressed to that channel. Channels
    are stored as JSON text, so unsent records are read page by page in
    creation order until the batch is full.
    """
    if channel is not None and channel not in CHANNELS:
        raise ValidationError({"channel": [f"Invalid channel: {channel}"]})

    with storage_errors("pending_notifications"):
        unsent = _query().filter(is_sent=False).order_by("created_at")
        if channel is None:
            return list(unsent.limit(PENDING_BATCH_SIZE).all().items)

    matches = []
    offset = 0
    while len(matches) < PENDING_BATCH_SIZE:
        with storage_errors("pending_notifications"):
            page = unsent.offset(offset).limit(PAGE_SIZE).all().items
        matches.extend(n for n in page if channel in n.get_channels())
        if len(page) < PAGE_SIZE:
            break
        offset += PAGE_SIZE
    return matches[:PENDING_BATCH_SIZE]


def by_entity(entity_type, entity_id) -> list[Notification]:
    """Notifications linked to one business entity, newest first."""
    if entity_type not in ENTITY_TYPES:
        raise ValidationError({"entity_type": [f"Invalid entity type: {entity_type}"]})

    with storage_errors("notifications_by_entity"):
        return fetch_all(
            _query().filter(entity_type=entity_type, entity_id=str(entity_id)).order_by("-created_at")
        )


def stats_by_type(user_id) -> dict[str, dict[str, int]]:
    """Total and unread counts per notification type for one user.

    Types the user has no notifications of are absent.
    """
    with storage_errors("notification_stats"):
        notifications = fetch_all(_query().filter(user_id=str(user_id)))

    stats = {}
    for notification in notifications:
        bucket = stats.setdefault(notification.notification_type, {"total": 0, "unread": 0})
        bucket["total"] += 1
        if not notification.is_read:
            bucket["unread"] += 1
    return stats
