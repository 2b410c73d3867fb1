"""Preference management commands + handlers — Do-Not-Disturb, reset and removal."""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from notifications.domain import notifications
from notifications.preference.preference import NotificationPreference
from notifications.preference.resolver import find_preference, get_or_create

logger = structlog.get_logger(__name__)


@notifications.command(part_of="NotificationPreference")
class EnableDoNotDisturb:
    """Switch on a user's do-not-disturb window."""

    user_id: Identifier(required=True)
    start: String(required=True, max_length=5)
    end: String(required=True, max_length=5)


@notifications.command(part_of="NotificationPreference")
class DisableDoNotDisturb:
    """Switch off a user's do-not-disturb window."""

    user_id: Identifier(required=True)


@notifications.command(part_of="NotificationPreference")
class ResetPreferences:
    """Restore a user's preferences to the system defaults."""

    user_id: Identifier(required=True)


@notifications.command(part_of="NotificationPreference")
class DeletePreferences:
    """Remove a user's preference record."""

    user_id: Identifier(required=True)


@notifications.command_handler(part_of=NotificationPreference)
class ManagePreferencesHandler:
    @handle(EnableDoNotDisturb)
    def enable_do_not_disturb(self, command: EnableDoNotDisturb):
        preference = get_or_create(command.user_id)
        preference.enable_do_not_disturb(command.start, command.end)
        current_domain.repository_for(NotificationPreference).add(preference)
        logger.info(
            "Do-not-disturb enabled",
            user_id=str(command.user_id),
            start=command.start,
            end=command.end,
        )
        return preference

    @handle(DisableDoNotDisturb)
    def disable_do_not_disturb(self, command: DisableDoNotDisturb):
        preference = get_or_create(command.user_id)
        preference.disable_do_not_disturb()
        current_domain.repository_for(NotificationPreference).add(preference)
        logger.info("Do-not-disturb disabled", user_id=str(command.user_id))
        return preference

    @handle(ResetPreferences)
    def reset_preferences(self, command: ResetPreferences):
        preference = get_or_create(command.user_id)
        preference.reset_to_default()
        current_domain.repository_for(NotificationPreference).add(preference)
        logger.info("Preferences reset to defaults", user_id=str(command.user_id))
        return preference

    @handle(DeletePreferences)
    def delete_preferences(self, command: DeletePreferences):
        preference = find_preference(command.user_id)
        if preference is None:
            raise ObjectNotFoundError(f"Preferences for user {command.user_id} not found")
        current_domain.repository_for(NotificationPreference)._dao.delete(preference)
        logger.info("Preferences deleted", user_id=str(command.user_id))
        return preference
