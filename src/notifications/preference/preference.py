"""NotificationPreference aggregate — per-user delivery channels and Do-Not-Disturb.

One record per user. The channel mapping is stored as JSON keyed by
notification type. Types missing from the stored mapping resolve to their
system default, so every type always has a channel set when read.
"""

import json
from datetime import UTC, datetime, time

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text

from notifications.domain import notifications
from notifications.notification.notification import (
    NOTIFICATION_TYPES,
    normalize_channels,
    validate_notification_type,
)
from notifications.preference.events import (
    CategoryChannelsUpdated,
    DoNotDisturbDisabled,
    DoNotDisturbEnabled,
    PreferencesCreated,
    PreferencesReplaced,
    PreferencesReset,
)
from notifications.preference.quiet_hours import is_within_window, validate_time_of_day

DEFAULT_CHANNELS = {
    "parcel_update": ["email", "in_app"],
    "consolidation_update": ["email", "in_app"],
    "warehouse_update": ["in_app"],
    "system_alert": ["email", "in_app"],
    "payment_update": ["email", "in_app"],
}


def default_channels_for(notification_type: str) -> list[str]:
    validate_notification_type(notification_type)
    return list(DEFAULT_CHANNELS[notification_type])


def default_preferences() -> dict[str, list[str]]:
    return {category: list(channels) for category, channels in DEFAULT_CHANNELS.items()}


def normalize_preferences(preferences) -> dict[str, list[str]]:
    """Validate a category -> channels mapping, filling unspecified categories with defaults."""
    if preferences is None:
        return default_preferences()
    if not isinstance(preferences, dict):
        raise ValidationError({"preferences": ["Preferences must be a mapping of notification type to channels"]})

    unknown = sorted(k for k in preferences if k not in NOTIFICATION_TYPES)
    if unknown:
        raise ValidationError({"preferences": [f"Invalid notification types: {', '.join(unknown)}"]})

    result = default_preferences()
    for category, channels in preferences.items():
        result[category] = normalize_channels(channels, field=f"preferences.{category}")
    return result


def parse_do_not_disturb(do_not_disturb) -> tuple[bool, str | None, str | None]:
    """Turn a ``{"enabled", "start", "end"}`` mapping into validated DND settings.

    Bounds are required only when the window is enabled. ``None`` means
    disabled with no bounds.
    """
    if do_not_disturb is None:
        return False, None, None
    if not isinstance(do_not_disturb, dict):
        raise ValidationError({"do_not_disturb": ["Must be an object with enabled, start and end"]})

    enabled = bool(do_not_disturb.get("enabled", False))
    start = do_not_disturb.get("start")
    end = do_not_disturb.get("end")

    if enabled or start is not None:
        start = validate_time_of_day(start, "start")
    if enabled or end is not None:
        end = validate_time_of_day(end, "end")

    return enabled, start, end


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class NotificationPreference:
    """A user's channel choices per notification type and their quiet hours."""

    # User link
    user_id: Identifier(required=True, unique=True)

    # Channel mapping
    preferences: Text()  # JSON mapping NotificationType value -> list of channels

    # Do-Not-Disturb
    quiet_hours_enabled: Boolean(default=False)
    quiet_hours_start: String(max_length=5)  # "22:00" format
    quiet_hours_end: String(max_length=5)  # "07:00" format

    # Timestamps
    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def create_default(cls, user_id):
        """Create system-default preferences: every type on its default channels, DND off."""
        return cls.create(user_id)

    @classmethod
    def create(cls, user_id, preferences=None, do_not_disturb=None):
        """Create preferences from an optional mapping and DND settings."""
        mapping = normalize_preferences(preferences)
        enabled, start, end = parse_do_not_disturb(do_not_disturb)
        now = datetime.now(UTC)

        preference = cls(
            user_id=user_id,
            preferences=json.dumps(mapping),
            quiet_hours_enabled=enabled,
            quiet_hours_start=start,
            quiet_hours_end=end,
            created_at=now,
            updated_at=now,
        )

        preference.raise_(
            PreferencesCreated(
                preference_id=str(preference.id),
                user_id=str(user_id),
                preferences=preference.preferences,
                quiet_hours_enabled=enabled,
                created_at=now,
            )
        )

        return preference

    # -------------------------------------------------------------------
    # Channel management
    # -------------------------------------------------------------------
    def get_preferences(self) -> dict[str, list[str]]:
        """Return the full channel mapping with defaults for missing types."""
        stored = json.loads(self.preferences) if self.preferences else {}
        mapping = default_preferences()
        mapping.update({k: v for k, v in stored.items() if k in NOTIFICATION_TYPES})
        return mapping

    def channels_for(self, notification_type: str) -> list[str]:
        validate_notification_type(notification_type)
        return self.get_preferences()[notification_type]

    def set_category_channels(self, notification_type, channels):
        """Replace the channel set of one notification type."""
        validate_notification_type(notification_type)
        channel_list = normalize_channels(channels)

        mapping = self.get_preferences()
        mapping[notification_type] = channel_list

        now = datetime.now(UTC)
        self.preferences = json.dumps(mapping)
        self.updated_at = now

        self.raise_(
            CategoryChannelsUpdated(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                notification_type=notification_type,
                channels=json.dumps(channel_list),
                updated_at=now,
            )
        )

    def replace(self, preferences=None, do_not_disturb=None):
        """Replace the channel mapping and DND settings wholesale."""
        mapping = normalize_preferences(preferences)
        enabled, start, end = parse_do_not_disturb(do_not_disturb)

        now = datetime.now(UTC)
        self.preferences = json.dumps(mapping)
        self.quiet_hours_enabled = enabled
        self.quiet_hours_start = start
        self.quiet_hours_end = end
        self.updated_at = now

        self.raise_(
            PreferencesReplaced(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                preferences=self.preferences,
                quiet_hours_enabled=enabled,
                updated_at=now,
            )
        )

    def reset_to_default(self):
        """Restore default channels and switch DND off, clearing its bounds."""
        now = datetime.now(UTC)
        self.preferences = json.dumps(default_preferences())
        self.quiet_hours_enabled = False
        self.quiet_hours_start = None
        self.quiet_hours_end = None
        self.updated_at = now

        self.raise_(
            PreferencesReset(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                reset_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Do-Not-Disturb
    # -------------------------------------------------------------------
    def enable_do_not_disturb(self, start, end):
        """Switch DND on for the ``start``-``end`` window. Both bounds required."""
        validate_time_of_day(start, "start")
        validate_time_of_day(end, "end")

        now = datetime.now(UTC)
        self.quiet_hours_enabled = True
        self.quiet_hours_start = start
        self.quiet_hours_end = end
        self.updated_at = now

        self.raise_(
            DoNotDisturbEnabled(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                start=start,
                end=end,
                updated_at=now,
            )
        )

    def disable_do_not_disturb(self):
        """Switch DND off. The window bounds are kept for a later re-enable."""
        now = datetime.now(UTC)
        self.quiet_hours_enabled = False
        self.updated_at = now

        self.raise_(
            DoNotDisturbDisabled(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                updated_at=now,
            )
        )

    def quiet_hours_active(self, now: time) -> bool:
        """Check whether DND is on and ``now`` falls within the window."""
        if not self.quiet_hours_enabled:
            return False
        if not self.quiet_hours_start or not self.quiet_hours_end:
            return False
        return is_within_window(now, self.quiet_hours_start, self.quiet_hours_end)

    def do_not_disturb(self) -> dict:
        return {
            "enabled": bool(self.quiet_hours_enabled),
            "start": self.quiet_hours_start,
            "end": self.quiet_hours_end,
        }
