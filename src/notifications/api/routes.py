"""FastAPI routes for the Notifications service.

Thin adapters that translate HTTP requests into domain commands and
queries. No business logic — just schema→command→response translation.
"""

from typing import Any

from fastapi import APIRouter, Body, Query
from protean.utils.globals import current_domain

from notifications.api.schemas import (
    BulkCreateNotificationsRequest,
    BulkCreateResponse,
    CategoryChannelsRequest,
    ChannelsResponse,
    CountResponse,
    CreateNotificationRequest,
    CreatePreferencesRequest,
    DoNotDisturbStatusResponse,
    EnableDoNotDisturbRequest,
    NotificationListResponse,
    NotificationResponse,
    PreferencesListResponse,
    PreferencesRequest,
    PreferencesResponse,
    StatsResponse,
    UnreadCountResponse,
    updatable_changes,
)
from notifications.exceptions import storage_errors
from notifications.notification import listing
from notifications.notification.creation import create_notification, create_notifications_bulk
from notifications.notification.lifecycle import (
    CleanupNotifications,
    DeleteNotification,
    MarkAllNotificationsRead,
    MarkNotificationRead,
    MarkNotificationSent,
)
from notifications.notification.modification import update_notification
from notifications.preference import resolver
from notifications.preference.management import (
    DeletePreferences,
    DisableDoNotDisturb,
    EnableDoNotDisturb,
    ResetPreferences,
)

notification_router = APIRouter(prefix="/api/notifications", tags=["notifications"])
preference_router = APIRouter(prefix="/api/preferences", tags=["preferences"])


def _process(command, operation: str):
    with storage_errors(operation):
        return current_domain.process(command, asynchronous=False)


def _notification_list(notifications) -> NotificationListResponse:
    return NotificationListResponse(
        notifications=[NotificationResponse.from_aggregate(n) for n in notifications],
        count=len(notifications),
    )


# ---------------------------------------------------------------------------
# Notifications: queries that must be matched before /{notification_id}
# ---------------------------------------------------------------------------
@notification_router.get("/pending", response_model=NotificationListResponse)
async def get_pending_notifications(channel: str | None = None) -> NotificationListResponse:
    """Unsent notifications, oldest first, optionally for one channel."""
    return _notification_list(listing.pending(channel))


# ---------------------------------------------------------------------------
# Notifications: creation
# ---------------------------------------------------------------------------
@notification_router.post("", status_code=201, response_model=NotificationResponse)
@notification_router.post("/", status_code=201, response_model=NotificationResponse, include_in_schema=False)
async def create(body: CreateNotificationRequest) -> NotificationResponse:
    """Create a notification."""
    notification = create_notification(**body.model_dump(exclude_none=True))
    return NotificationResponse.from_aggregate(notification)


@notification_router.post("/bulk", status_code=201, response_model=BulkCreateResponse)
async def create_bulk(body: BulkCreateNotificationsRequest) -> BulkCreateResponse:
    """Create several notifications. Items before an invalid one stay created."""
    created = create_notifications_bulk(body.notifications)
    return BulkCreateResponse(
        notifications=[NotificationResponse.from_aggregate(n) for n in created],
        count=len(created),
    )


# ---------------------------------------------------------------------------
# Notifications: per user
# ---------------------------------------------------------------------------
@notification_router.get("/user/{user_id}", response_model=NotificationListResponse)
async def get_user_notifications(
    user_id: str,
    is_read: bool | None = None,
    notification_type: str | None = Query(None, alias="type"),
    is_sent: bool | None = None,
    limit: int = Query(listing.DEFAULT_LIST_LIMIT, ge=1),
    skip: int = Query(0, ge=0),
) -> NotificationListResponse:
    """A user's notifications, newest first."""
    return _notification_list(
        listing.list_for_user(
            user_id,
            is_read=is_read,
            notification_type=notification_type,
            is_sent=is_sent,
            limit=limit,
            skip=skip,
        )
    )


@notification_router.get("/user/{user_id}/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(user_id: str) -> UnreadCountResponse:
    return UnreadCountResponse(user_id=user_id, unread_count=listing.unread_count(user_id))


@notification_router.get("/user/{user_id}/stats", response_model=StatsResponse)
async def get_stats(user_id: str) -> StatsResponse:
    """Total and unread counts per notification type."""
    return StatsResponse(user_id=user_id, stats=listing.stats_by_type(user_id))


@notification_router.patch("/user/{user_id}/read-all", response_model=CountResponse)
async def mark_all_read(user_id: str) -> CountResponse:
    count = _process(MarkAllNotificationsRead(user_id=user_id), "mark_all_read")
    return CountResponse(count=count)


@notification_router.delete("/user/{user_id}/cleanup", response_model=CountResponse)
async def cleanup(user_id: str, older_than_days: int = 30) -> CountResponse:
    """Delete the user's read notifications older than ``older_than_days``."""
    command = CleanupNotifications(user_id=user_id, older_than_days=older_than_days)
    count = _process(command, "cleanup_notifications")
    return CountResponse(count=count)


# ---------------------------------------------------------------------------
# Notifications: by entity
# ---------------------------------------------------------------------------
@notification_router.get("/entity/{entity_type}/{entity_id}", response_model=NotificationListResponse)
async def get_entity_notifications(entity_type: str, entity_id: str) -> NotificationListResponse:
    return _notification_list(listing.by_entity(entity_type, entity_id))


# ---------------------------------------------------------------------------
# Notifications: single record
# ---------------------------------------------------------------------------
@notification_router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(notification_id: str) -> NotificationResponse:
    return NotificationResponse.from_aggregate(listing.get_notification(notification_id))


@notification_router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: str) -> NotificationResponse:
    notification = _process(MarkNotificationRead(notification_id=notification_id), "mark_read")
    return NotificationResponse.from_aggregate(notification)


@notification_router.patch("/{notification_id}/sent", response_model=NotificationResponse)
async def mark_sent(notification_id: str) -> NotificationResponse:
    notification = _process(MarkNotificationSent(notification_id=notification_id), "mark_sent")
    return NotificationResponse.from_aggregate(notification)


@notification_router.put("/{notification_id}", response_model=NotificationResponse)
async def update(notification_id: str, body: dict[str, Any] = Body(...)) -> NotificationResponse:
    """Update notification fields. ``id`` and ``user_id`` in the body are ignored."""
    notification = update_notification(notification_id, updatable_changes(body))
    return NotificationResponse.from_aggregate(notification)


@notification_router.delete("/{notification_id}", response_model=NotificationResponse)
async def delete(notification_id: str) -> NotificationResponse:
    notification = _process(DeleteNotification(notification_id=notification_id), "delete_notification")
    return NotificationResponse.from_aggregate(notification)


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------
@preference_router.get("", response_model=PreferencesListResponse)
@preference_router.get("/", response_model=PreferencesListResponse, include_in_schema=False)
async def list_all_preferences() -> PreferencesListResponse:
    preferences = resolver.list_preferences()
    return PreferencesListResponse(
        preferences=[PreferencesResponse.from_aggregate(p) for p in preferences],
        count=len(preferences),
    )


@preference_router.post("", status_code=201, response_model=PreferencesResponse)
@preference_router.post("/", status_code=201, response_model=PreferencesResponse, include_in_schema=False)
async def create_preferences(body: CreatePreferencesRequest) -> PreferencesResponse:
    """Create preferences for a user. 409 when they already exist."""
    preference = resolver.create_preference(
        body.user_id,
        preferences=body.preferences,
        do_not_disturb=body.do_not_disturb_settings(),
    )
    return PreferencesResponse.from_aggregate(preference)


@preference_router.get("/user/{user_id}", response_model=PreferencesResponse)
async def get_user_preferences(user_id: str) -> PreferencesResponse:
    """Get a user's preferences, creating the defaults on first access."""
    return PreferencesResponse.from_aggregate(resolver.get_or_create(user_id))


@preference_router.put("/user/{user_id}", response_model=PreferencesResponse)
async def replace_user_preferences(user_id: str, body: PreferencesRequest) -> PreferencesResponse:
    preference = resolver.replace_preferences(
        user_id,
        preferences=body.preferences,
        do_not_disturb=body.do_not_disturb_settings(),
    )
    return PreferencesResponse.from_aggregate(preference)


@preference_router.patch("/user/{user_id}/type/{notification_type}", response_model=PreferencesResponse)
async def update_category_channels(
    user_id: str, notification_type: str, body: CategoryChannelsRequest
) -> PreferencesResponse:
    preference = resolver.set_category_channels(user_id, notification_type, body.channels)
    return PreferencesResponse.from_aggregate(preference)


@preference_router.get("/user/{user_id}/type/{notification_type}/channels", response_model=ChannelsResponse)
async def get_category_channels(user_id: str, notification_type: str) -> ChannelsResponse:
    return ChannelsResponse(
        user_id=user_id,
        notification_type=notification_type,
        channels=resolver.channels_for(user_id, notification_type),
    )


@preference_router.post("/user/{user_id}/dnd/enable", response_model=PreferencesResponse)
async def enable_dnd(user_id: str, body: EnableDoNotDisturbRequest) -> PreferencesResponse:
    command = EnableDoNotDisturb(user_id=user_id, start=body.start, end=body.end)
    return PreferencesResponse.from_aggregate(_process(command, "enable_do_not_disturb"))


@preference_router.post("/user/{user_id}/dnd/disable", response_model=PreferencesResponse)
async def disable_dnd(user_id: str) -> PreferencesResponse:
    command = DisableDoNotDisturb(user_id=user_id)
    return PreferencesResponse.from_aggregate(_process(command, "disable_do_not_disturb"))


@preference_router.get("/user/{user_id}/dnd/status", response_model=DoNotDisturbStatusResponse)
async def get_dnd_status(user_id: str) -> DoNotDisturbStatusResponse:
    """DND settings and whether delivery is suppressed right now."""
    preference = resolver.find_preference(user_id)
    settings = preference.do_not_disturb() if preference else {"enabled": False, "start": None, "end": None}
    return DoNotDisturbStatusResponse(
        user_id=user_id,
        suppressed=resolver.is_suppressed(user_id),
        **settings,
    )


@preference_router.post("/user/{user_id}/reset", response_model=PreferencesResponse)
async def reset_preferences(user_id: str) -> PreferencesResponse:
    command = ResetPreferences(user_id=user_id)
    return PreferencesResponse.from_aggregate(_process(command, "reset_preferences"))


@preference_router.delete("/user/{user_id}", response_model=PreferencesResponse)
async def delete_preferences(user_id: str) -> PreferencesResponse:
    command = DeletePreferences(user_id=user_id)
    return PreferencesResponse.from_aggregate(_process(command, "delete_preferences"))
