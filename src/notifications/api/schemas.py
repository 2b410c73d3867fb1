"""Pydantic request/response models for the Notifications API.

API schemas are separate from Protean commands (anti-corruption pattern).
Value validation (types, channels, HH:MM bounds) is left to the domain so
that every failure surfaces with the same error body.
"""

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class CreateNotificationRequest(BaseModel):
    user_id: str
    notification_type: str = Field(..., examples=["parcel_update"])
    title: str
    message: str
    entity_type: str | None = Field(None, examples=["Parcel"])
    entity_id: str | None = None
    channels: list[str] = Field(default_factory=list, examples=[["email", "in_app"]])


class BulkCreateNotificationsRequest(BaseModel):
    # Items stay loosely typed so that each one is validated and reported by position
    notifications: list[dict]


PROTECTED_FIELDS = ("id", "_id", "user_id", "userId")


def updatable_changes(body: dict) -> dict:
    """Drop identity and ownership fields from a generic update body."""
    return {k: v for k, v in body.items() if k not in PROTECTED_FIELDS}


class DoNotDisturbSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = False
    start: str | None = Field(None, alias="from", examples=["22:00"])
    end: str | None = Field(None, alias="to", examples=["07:00"])


class PreferencesRequest(BaseModel):
    preferences: dict[str, list[str]] | None = None
    do_not_disturb: DoNotDisturbSettings | None = None

    def do_not_disturb_settings(self) -> dict | None:
        if self.do_not_disturb is None:
            return None
        return self.do_not_disturb.model_dump()


class CreatePreferencesRequest(PreferencesRequest):
    user_id: str


class CategoryChannelsRequest(BaseModel):
    channels: list[str]


class EnableDoNotDisturbRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: str = Field(..., alias="from", examples=["22:00"])
    end: str = Field(..., alias="to", examples=["07:00"])


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class NotificationResponse(BaseModel):
    id: str
    user_id: str
    notification_type: str
    title: str
    message: str
    entity_type: str | None = None
    entity_id: str | None = None
    channels: list[str] = []
    is_read: bool
    read_at: str | None = None
    is_sent: bool
    sent_at: str | None = None
    created_at: str | None = None

    @classmethod
    def from_aggregate(cls, notification) -> "NotificationResponse":
        return cls(
            id=str(notification.id),
            user_id=str(notification.user_id),
            notification_type=notification.notification_type,
            title=notification.title,
            message=notification.message,
            entity_type=notification.entity_type,
            entity_id=str(notification.entity_id) if notification.entity_id else None,
            channels=notification.get_channels(),
            is_read=bool(notification.is_read),
            read_at=notification.read_at.isoformat() if notification.read_at else None,
            is_sent=bool(notification.is_sent),
            sent_at=notification.sent_at.isoformat() if notification.sent_at else None,
            created_at=notification.created_at.isoformat() if notification.created_at else None,
        )


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    count: int


class BulkCreateResponse(BaseModel):
    notifications: list[NotificationResponse]
    count: int


class CountResponse(BaseModel):
    count: int


class UnreadCountResponse(BaseModel):
    user_id: str
    unread_count: int


class TypeStats(BaseModel):
    total: int
    unread: int


class StatsResponse(BaseModel):
    user_id: str
    stats: dict[str, TypeStats]


class DoNotDisturbResponse(BaseModel):
    # Bounds go out as ``from``/``to``, matching requests
    model_config = ConfigDict(populate_by_name=True)

    enabled: bool
    start: str | None = Field(None, alias="from")
    end: str | None = Field(None, alias="to")


class DoNotDisturbStatusResponse(DoNotDisturbResponse):
    user_id: str
    suppressed: bool


class PreferencesResponse(BaseModel):
    id: str
    user_id: str
    preferences: dict[str, list[str]]
    do_not_disturb: DoNotDisturbResponse
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_aggregate(cls, preference) -> "PreferencesResponse":
        return cls(
            id=str(preference.id),
            user_id=str(preference.user_id),
            preferences=preference.get_preferences(),
            do_not_disturb=DoNotDisturbResponse(**preference.do_not_disturb()),
            created_at=preference.created_at.isoformat() if preference.created_at else None,
            updated_at=preference.updated_at.isoformat() if preference.updated_at else None,
        )


class PreferencesListResponse(BaseModel):
    preferences: list[PreferencesResponse]
    count: int


class ChannelsResponse(BaseModel):
    user_id: str
    notification_type: str
    channels: list[str]

