"""Notification aggregate — a message recorded for a user.

Read and sent are two independent flags, each paired with the timestamp of
its first transition:

    created ── mark_read ──▶ is_read=True,  read_at stamped once
    created ── mark_sent ──▶ is_sent=True,  sent_at stamped once
    any state ── delete ──▶ record removed (terminal)

Neither flag ever goes back to False through the lifecycle API.
"""

import json
from collections.abc import Iterable
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text

from notifications.domain import notifications
from notifications.notification.events import (
    NotificationCreated,
    NotificationRead,
    NotificationSent,
    NotificationUpdated,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    PARCEL_UPDATE = "parcel_update"
    CONSOLIDATION_UPDATE = "consolidation_update"
    WAREHOUSE_UPDATE = "warehouse_update"
    SYSTEM_ALERT = "system_alert"
    PAYMENT_UPDATE = "payment_update"


class NotificationChannel(Enum):
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"
    IN_APP = "in_app"


class EntityType(Enum):
    PARCEL = "Parcel"
    CONSOLIDATION = "Consolidation"
    WAREHOUSE = "Warehouse"


NOTIFICATION_TYPES = tuple(t.value for t in NotificationType)
CHANNELS = tuple(c.value for c in NotificationChannel)
ENTITY_TYPES = tuple(e.value for e in EntityType)

_CONTENT_FIELDS = (
    "notification_type",
    "title",
    "message",
    "entity_type",
    "entity_id",
    "channels",
)
_UPDATABLE_FIELDS = (*_CONTENT_FIELDS, "is_read", "is_sent")


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------
def normalize_channels(channels, field: str = "channels") -> list[str]:
    """Validate a collection of channel names and return it de-duplicated and sorted."""
    if channels is None:
        return []
    if isinstance(channels, str) or not isinstance(channels, Iterable):
        raise ValidationError({field: ["Channels must be a list of channel names"]})

    channels = list(channels)
    invalid = [str(c) for c in channels if c not in CHANNELS]
    if invalid:
        raise ValidationError({field: [f"Invalid channels: {', '.join(invalid)}"]})

    return sorted(set(channels))


def validate_notification_type(value, field: str = "notification_type") -> str:
    if value not in NOTIFICATION_TYPES:
        raise ValidationError({field: [f"Invalid notification type: {value}. Must be one of {', '.join(NOTIFICATION_TYPES)}"]})
    return value


def _check_entity_reference(entity_type, entity_id):
    if bool(entity_type) != bool(entity_id):
        raise ValidationError({"entity": ["entity_type and entity_id must be provided together"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class Notification:
    """A notification addressed to one user, optionally linked to a business entity."""

    # Recipient
    user_id: Identifier(required=True)

    # Category and content
    notification_type: String(choices=NotificationType, required=True)
    title: String(required=True, max_length=500)
    message: Text(required=True)

    # Entity reference (both or neither)
    entity_type: String(choices=EntityType)
    entity_id: Identifier()

    # Delivery channels, fixed at creation
    channels: Text()  # JSON list of NotificationChannel values

    # Read / sent flags
    is_read: Boolean(default=False)
    read_at: DateTime()
    is_sent: Boolean(default=False)
    sent_at: DateTime()

    created_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        user_id,
        notification_type,
        title,
        message,
        entity_type=None,
        entity_id=None,
        channels=None,
    ):
        """Create a new unread, unsent notification."""
        _check_entity_reference(entity_type, entity_id)
        channel_list = normalize_channels(channels)
        now = datetime.now(UTC)

        notification = cls(
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            message=message,
            entity_type=entity_type,
            entity_id=entity_id,
            channels=json.dumps(channel_list),
            is_read=False,
            is_sent=False,
            created_at=now,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                user_id=str(user_id),
                notification_type=notification_type,
                channels=notification.channels,
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id else None,
                created_at=now,
            )
        )

        return notification

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def mark_read(self, read_at=None) -> bool:
        """Mark the notification as read.

        Only the first call stamps ``read_at``. Returns True when the
        notification actually changed.
        """
        if self.is_read:
            return False

        now = read_at or datetime.now(UTC)
        self.is_read = True
        self.read_at = now

        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                read_at=now,
            )
        )
        return True

    def mark_sent(self, sent_at=None) -> bool:
        """Mark the notification as sent. Same once-only rule as ``mark_read``."""
        if self.is_sent:
            return False

        now = sent_at or datetime.now(UTC)
        self.is_sent = True
        self.sent_at = now

        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                sent_at=now,
            )
        )
        return True

    def apply_changes(self, **changes):
        """Merge a set of field changes into the notification.

        ``is_read`` and ``is_sent`` may only be set to True; doing so goes
        through the regular transition. Identity and ownership are not
        updatable here.
        """
        if not changes:
            raise ValidationError({"changes": ["At least one field must be provided"]})

        unknown = sorted(set(changes) - set(_UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in unknown})

        for flag in ("is_read", "is_sent"):
            if flag in changes and changes[flag] is not True:
                raise ValidationError({flag: ["Can only be changed to true"]})

        if "notification_type" in changes:
            validate_notification_type(changes["notification_type"])

        _check_entity_reference(
            changes.get("entity_type", self.entity_type),
            changes.get("entity_id", self.entity_id),
        )

        if "channels" in changes:
            changes["channels"] = json.dumps(normalize_channels(changes["channels"]))

        for field in _CONTENT_FIELDS:
            if field in changes:
                setattr(self, field, changes[field])

        if changes.get("is_read"):
            self.mark_read()
        if changes.get("is_sent"):
            self.mark_sent()

        self.raise_(
            NotificationUpdated(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                changed_fields=",".join(sorted(changes)),
                updated_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Query helpers
    # -------------------------------------------------------------------
    def get_channels(self) -> list[str]:
        """Return the channel list."""
        return json.loads(self.channels) if self.channels else []

    def is_older_than(self, cutoff: datetime) -> bool:
        """Check whether the notification was created before ``cutoff``."""
        created = self.created_at
        if created.tzinfo is None and cutoff.tzinfo is not None:
            created = created.replace(tzinfo=cutoff.tzinfo)
        elif created.tzinfo is not None and cutoff.tzinfo is None:
            created = created.replace(tzinfo=None)
        return created < cutoff
