"""Domain events for the NotificationPreference aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String, Text

from notifications.domain import notifications


@notifications.event(part_of="NotificationPreference")
class PreferencesCreated:
    """Notification preferences were created for a user."""

    __version__ = "v1"

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    preferences: Text(required=True)  # JSON mapping type -> channels
    quiet_hours_enabled: Boolean(required=True)
    created_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class CategoryChannelsUpdated:
    """The channels for one notification type were replaced."""

    __version__ = "v1"

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    notification_type: String(required=True)
    channels: Text(required=True)  # JSON list
    updated_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class DoNotDisturbEnabled:
    """A user switched on their do-not-disturb window."""

    __version__ = "v1"

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    start: String(required=True)
    end: String(required=True)
    updated_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class DoNotDisturbDisabled:
    """A user switched off their do-not-disturb window."""

    __version__ = "v1"

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    updated_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class PreferencesReset:
    """Preferences were reset to the system defaults."""

    __version__ = "v1"

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    reset_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class PreferencesReplaced:
    """Channel mapping and do-not-disturb settings were replaced wholesale."""

    __version__ = "v1"

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    preferences: Text(required=True)
    quiet_hours_enabled: Boolean(required=True)
    updated_at: DateTime(required=True)
