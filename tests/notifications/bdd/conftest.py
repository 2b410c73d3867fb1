"""Shared BDD fixtures and step definitions for the Notifications domain."""

import pytest
from notifications.notification.events import NotificationCreated, NotificationRead, NotificationSent
from notifications.notification.notification import Notification, NotificationType
from notifications.preference.resolver import find_preference
from pytest_bdd import given, parsers, then

_NOTIFICATION_EVENT_CLASSES = {
    "NotificationCreated": NotificationCreated,
    "NotificationRead": NotificationRead,
    "NotificationSent": NotificationSent,
}


def _new_notification(user_id="user-bdd"):
    return Notification.create(
        user_id=user_id,
        notification_type=NotificationType.PARCEL_UPDATE.value,
        title="Parcel update",
        message="Your parcel is out for delivery",
    )


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps: notifications
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a new notification for user "{user_id}"'),
    target_fixture="notification",
)
def new_notification(user_id):
    return _new_notification(user_id)


@given("a read notification", target_fixture="notification")
def read_notification():
    n = _new_notification()
    n.mark_read()
    n._events.clear()
    return n


# ---------------------------------------------------------------------------
# Given steps: preferences
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a new user "{user_id}"'), target_fixture="user_id")
def new_user(user_id):
    return user_id


# ---------------------------------------------------------------------------
# Then steps: notifications
# ---------------------------------------------------------------------------
@then("the notification is read")
def notification_is_read(notification):
    assert notification.is_read is True
    assert notification.read_at is not None


@then("the notification is sent")
def notification_is_sent(notification):
    assert notification.is_sent is True
    assert notification.sent_at is not None


@then("the notification is not sent")
def notification_is_not_sent(notification):
    assert notification.is_sent is False
    assert notification.sent_at is None


@then(parsers.cfparse("a {event_type} event is raised"))
def notification_event_raised(notification, event_type):
    event_cls = _NOTIFICATION_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in notification._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in notification._events]}"


@then("no new events are raised")
def no_new_events(notification):
    assert notification._events == []


# ---------------------------------------------------------------------------
# Then steps: preferences
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{notification_type}" is delivered via "{channels}"'))
def delivered_via(user_id, notification_type, channels):
    assert find_preference(user_id).channels_for(notification_type) == channels.split(",")


@then("do-not-disturb is disabled")
def dnd_disabled(user_id):
    assert find_preference(user_id).quiet_hours_enabled is False


@then(parsers.cfparse('the do-not-disturb window is "{start}" - "{end}"'))
def dnd_window(user_id, start, end):
    pref = find_preference(user_id)
    assert pref.quiet_hours_start == start
    assert pref.quiet_hours_end == end
