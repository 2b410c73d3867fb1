"""Preference resolution — effective channels and quiet-hours suppression per user.

Reads never materialize a record except ``get_or_create``. Mutations on a
user without a record start from the defaults.
"""

import threading
from datetime import datetime, time

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from notifications.exceptions import ConflictError, StorageError, storage_errors
from notifications.notification.notification import validate_notification_type
from notifications.preference.preference import NotificationPreference, default_channels_for

logger = structlog.get_logger(__name__)


def find_preference(user_id) -> NotificationPreference | None:
    """Return the stored preference for ``user_id``, or None."""
    with storage_errors("find_preference"):
        repo = current_domain.repository_for(NotificationPreference)
        prefs = repo._dao.query.filter(user_id=str(user_id)).all().items
    return prefs[0] if prefs else None


def list_preferences() -> list[NotificationPreference]:
    with storage_errors("list_preferences"):
        repo = current_domain.repository_for(NotificationPreference)
        return list(repo._dao.query.all().items)


# Serializes default creation within this process
_default_creation_lock = threading.Lock()


def _insert_default(user_id) -> NotificationPreference:
    preference = NotificationPreference.create_default(user_id)
    with storage_errors("get_or_create_preference"):
        current_domain.repository_for(NotificationPreference).add(preference)
    return preference


def _is_duplicate_user(exc: ValidationError) -> bool:
    return "user_id" in (exc.messages or {})


def get_or_create(user_id) -> NotificationPreference:
    """Fetch the user's preferences, persisting the defaults on first access.

    Creation is serialized in-process and re-checked under the lock. An insert
    rejected by the store, either as a ``user_id`` uniqueness ValidationError
    or as a StorageError from the provider's own constraint, is answered by
    re-reading the record another writer stored first.
    """
    preference = find_preference(user_id)
    if preference is not None:
        return preference

    with _default_creation_lock:
        preference = find_preference(user_id)
        if preference is not None:
            return preference

        try:
            preference = _insert_default(user_id)
        except (ValidationError, StorageError) as exc:
            if isinstance(exc, ValidationError) and not _is_duplicate_user(exc):
                raise
            existing = find_preference(user_id)
            if existing is None:
                raise
            logger.info("Default preferences created concurrently, re-reading", user_id=str(user_id))
            return existing

    logger.info("Default preferences created", user_id=str(user_id))
    return preference


def channels_for(user_id, notification_type) -> list[str]:
    """Effective channels for one notification type. Never creates a record."""
    validate_notification_type(notification_type)
    preference = find_preference(user_id)
    if preference is None:
        return default_channels_for(notification_type)
    return preference.channels_for(notification_type)


def set_category_channels(user_id, notification_type, channels) -> NotificationPreference:
    """Replace the channels of one notification type for the user."""
    preference = get_or_create(user_id)
    preference.set_category_channels(notification_type, channels)

    with storage_errors("set_category_channels"):
        current_domain.repository_for(NotificationPreference).add(preference)

    logger.info(
        "Category channels updated",
        user_id=str(user_id),
        notification_type=notification_type,
    )
    return preference


def is_suppressed(user_id, now: time | None = None) -> bool:
    """Check whether delivery to the user is currently held back by Do-Not-Disturb.

    ``now`` is a local time of day and defaults to the current local time.
    """
    preference = find_preference(user_id)
    if preference is None:
        return False
    if now is None:
        now = datetime.now().time()
    return preference.quiet_hours_active(now)


def create_preference(user_id, preferences=None, do_not_disturb=None) -> NotificationPreference:
    """Create preferences explicitly. Fails with ConflictError if the user already has them."""
    if find_preference(user_id) is not None:
        raise ConflictError(f"Preferences already exist for user {user_id}")

    preference = NotificationPreference.create(user_id, preferences=preferences, do_not_disturb=do_not_disturb)
    with storage_errors("create_preference"):
        try:
            current_domain.repository_for(NotificationPreference).add(preference)
        except ValidationError as exc:
            if _is_duplicate_user(exc):
                raise ConflictError(f"Preferences already exist for user {user_id}") from exc
            raise

    logger.info("Preferences created", user_id=str(user_id))
    return preference


def replace_preferences(user_id, preferences=None, do_not_disturb=None) -> NotificationPreference:
    """Replace the user's preferences wholesale, creating the record when absent."""
    preference = find_preference(user_id)
    if preference is None:
        preference = NotificationPreference.create(user_id, preferences=preferences, do_not_disturb=do_not_disturb)
    else:
        preference.replace(preferences=preferences, do_not_disturb=do_not_disturb)

    with storage_errors("replace_preferences"):
        current_domain.repository_for(NotificationPreference).add(preference)

    logger.info("Preferences replaced", user_id=str(user_id))
    return preference
