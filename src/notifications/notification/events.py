"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from notifications.domain import notifications


@notifications.event(part_of="Notification")
class NotificationCreated:
    """A notification was recorded for a user."""

    __version__ = "v1"

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    notification_type: String(required=True)
    channels: Text()  # JSON list of channel values
    entity_type: String()
    entity_id: Identifier()
    created_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRead:
    """A notification was read by its owner for the first time."""

    __version__ = "v1"

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    read_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationSent:
    """A notification was handed off to its delivery channels."""

    __version__ = "v1"

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    sent_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationUpdated:
    """Fields of a notification were changed through a generic update."""

    __version__ = "v1"

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)
    changed_fields: String(required=True, max_length=500)  # comma-separated field names
    updated_at: DateTime(required=True)
