"""Application tests for single and bulk notification creation."""

import pytest
from notifications.notification.creation import create_notification, create_notifications_bulk
from notifications.notification.notification import Notification
from protean import current_domain
from protean.exceptions import ValidationError


def _payload(**overrides):
    data = {
        "user_id": "user-cr",
        "notification_type": "consolidation_update",
        "title": "Consolidation ready",
        "message": "Your consolidated shipment is ready",
    }
    data.update(overrides)
    return data


def _stored_count():
    return current_domain.repository_for(Notification)._dao.query.all().total


class TestCreateNotification:
    def test_persists_and_returns(self):
        n = create_notification(**_payload(channels=["email"]))
        stored = current_domain.repository_for(Notification).get(n.id)
        assert stored.title == "Consolidation ready"
        assert stored.get_channels() == ["email"]
        assert stored.created_at is not None

    def test_with_entity_reference(self):
        n = create_notification(**_payload(entity_type="Consolidation", entity_id="con-7"))
        assert n.entity_type == "Consolidation"

    @pytest.mark.parametrize("missing", ["user_id", "notification_type", "title", "message"])
    def test_required_fields(self, missing):
        data = _payload()
        del data[missing]
        with pytest.raises(ValidationError) as exc:
            create_notification(**data)
        assert missing in exc.value.messages
        assert _stored_count() == 0

    def test_invalid_type(self):
        with pytest.raises(ValidationError) as exc:
            create_notification(**_payload(notification_type="newsletter"))
        assert "notification_type" in exc.value.messages

    def test_unknown_field(self):
        with pytest.raises(ValidationError) as exc:
            create_notification(**_payload(priority="high"))
        assert "priority" in exc.value.messages


class TestCreateNotificationsBulk:
    def test_creates_all(self):
        created = create_notifications_bulk([_payload(), _payload(title="Second"), _payload(title="Third")])
        assert len(created) == 3
        assert _stored_count() == 3

    def test_invalid_item_reports_position(self):
        with pytest.raises(ValidationError) as exc:
            create_notifications_bulk([_payload(), _payload(notification_type="newsletter"), _payload()])
        assert "notifications[1].notification_type" in exc.value.messages

    def test_items_before_failure_stay_persisted(self):
        with pytest.raises(ValidationError):
            create_notifications_bulk([_payload(title="First"), _payload(title="Second"), {"user_id": "user-cr"}])
        titles = sorted(n.title for n in current_domain.repository_for(Notification)._dao.query.all().items)
        assert titles == ["First", "Second"]

    def test_empty_list_rejected(self):
        with pytest.raises(ValidationError) as exc:
            create_notifications_bulk([])
        assert "notifications" in exc.value.messages

    def test_non_object_item_rejected(self):
        with pytest.raises(ValidationError) as exc:
            create_notifications_bulk(["not-an-object"])
        assert "notifications[0].notification" in exc.value.messages
