"""Integration tests for the preference endpoints."""

from fastapi.testclient import TestClient
from notifications.preference.preference import DEFAULT_CHANNELS


def _get_test_client():
    from fastapi import FastAPI
    from notifications.api.errors import register_exception_handlers
    from notifications.api.routes import preference_router
    from notifications.domain import notifications

    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request, call_next):
        with notifications.domain_context():
            return await call_next(request)

    app.include_router(preference_router)
    register_exception_handlers(app)
    return TestClient(app)


class TestGetOrCreate:
    def test_first_get_creates_defaults(self):
        client = _get_test_client()
        resp = client.get("/api/preferences/user/user-new")
        assert resp.status_code == 200
        data = resp.json()
        assert data["user_id"] == "user-new"
        assert data["preferences"] == DEFAULT_CHANNELS
        assert data["do_not_disturb"]["enabled"] is False

        again = client.get("/api/preferences/user/user-new").json()
        assert again["id"] == data["id"]

    def test_list_all(self):
        client = _get_test_client()
        client.get("/api/preferences/user/a")
        client.get("/api/preferences/user/b")
        assert client.get("/api/preferences").json()["count"] == 2


class TestCreate:
    def test_create(self):
        client = _get_test_client()
        resp = client.post(
            "/api/preferences",
            json={
                "user_id": "user-1",
                "preferences": {"parcel_update": ["sms"]},
                "do_not_disturb": {"enabled": True, "from": "22:00", "to": "07:00"},
            },
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["preferences"]["parcel_update"] == ["sms"]
        assert data["do_not_disturb"] == {"enabled": True, "from": "22:00", "to": "07:00"}

    def test_duplicate_is_409(self):
        client = _get_test_client()
        client.post("/api/preferences", json={"user_id": "user-1"})
        resp = client.post("/api/preferences", json={"user_id": "user-1"})
        assert resp.status_code == 409

    def test_unknown_category_is_400(self):
        client = _get_test_client()
        resp = client.post("/api/preferences", json={"user_id": "u", "preferences": {"newsletter": []}})
        assert resp.status_code == 400


class TestReplace:
    def test_upsert(self):
        client = _get_test_client()
        resp = client.put(
            "/api/preferences/user/user-up",
            json={"preferences": {"warehouse_update": ["email"]}},
        )
        assert resp.status_code == 200
        assert resp.json()["preferences"]["warehouse_update"] == ["email"]


class TestCategoryChannels:
    def test_update_and_read_channels(self):
        client = _get_test_client()
        resp = client.patch(
            "/api/preferences/user/user-1/type/parcel_update",
            json={"channels": ["push", "email"]},
        )
        assert resp.status_code == 200

        channels = client.get("/api/preferences/user/user-1/type/parcel_update/channels").json()
        assert channels == {"user_id": "user-1", "notification_type": "parcel_update", "channels": ["email", "push"]}

    def test_channels_without_record_are_defaults(self):
        client = _get_test_client()
        resp = client.get("/api/preferences/user/ghost/type/warehouse_update/channels")
        assert resp.json()["channels"] == ["in_app"]
        assert client.get("/api/preferences").json()["count"] == 0

    def test_invalid_channel_is_400(self):
        client = _get_test_client()
        resp = client.patch(
            "/api/preferences/user/user-1/type/parcel_update",
            json={"channels": ["email", "carrier_pigeon"]},
        )
        assert resp.status_code == 400
        assert "carrier_pigeon" in resp.json()["details"]["channels"][0]

    def test_invalid_type_is_400(self):
        client = _get_test_client()
        resp = client.get("/api/preferences/user/user-1/type/newsletter/channels")
        assert resp.status_code == 400


class TestDoNotDisturb:
    def test_enable_disable_status(self):
        client = _get_test_client()
        resp = client.post("/api/preferences/user/user-1/dnd/enable", json={"from": "00:00", "to": "00:00"})
        assert resp.status_code == 200
        assert resp.json()["do_not_disturb"]["enabled"] is True

        status = client.get("/api/preferences/user/user-1/dnd/status").json()
        assert status["enabled"] is True
        assert status["suppressed"] is True

        client.post("/api/preferences/user/user-1/dnd/disable")
        status = client.get("/api/preferences/user/user-1/dnd/status").json()
        assert status["enabled"] is False
        assert status["from"] == "00:00"
        assert status["suppressed"] is False

    def test_enable_malformed_time_is_400(self):
        client = _get_test_client()
        resp = client.post("/api/preferences/user/user-1/dnd/enable", json={"from": "9pm", "to": "07:00"})
        assert resp.status_code == 400

    def test_enable_missing_bound_is_400(self):
        client = _get_test_client()
        resp = client.post("/api/preferences/user/user-1/dnd/enable", json={"from": "22:00"})
        assert resp.status_code == 400

    def test_response_bounds_can_be_sent_back(self):
        client = _get_test_client()
        client.post("/api/preferences/user/user-1/dnd/enable", json={"from": "22:00", "to": "07:00"})
        settings = client.get("/api/preferences/user/user-1").json()["do_not_disturb"]
        assert settings == {"enabled": True, "from": "22:00", "to": "07:00"}

        settings["from"] = "23:00"
        resp = client.put("/api/preferences/user/user-1", json={"do_not_disturb": settings})

        assert resp.status_code == 200
        assert resp.json()["do_not_disturb"] == {"enabled": True, "from": "23:00", "to": "07:00"}

    def test_status_without_record(self):
        client = _get_test_client()
        status = client.get("/api/preferences/user/ghost/dnd/status").json()
        assert status == {"enabled": False, "from": None, "to": None, "user_id": "ghost", "suppressed": False}


class TestResetAndDelete:
    def test_reset(self):
        client = _get_test_client()
        client.patch("/api/preferences/user/user-1/type/parcel_update", json={"channels": ["sms"]})
        resp = client.post("/api/preferences/user/user-1/reset")
        assert resp.json()["preferences"] == DEFAULT_CHANNELS

    def test_delete(self):
        client = _get_test_client()
        client.get("/api/preferences/user/user-1")
        assert client.delete("/api/preferences/user/user-1").status_code == 200
        assert client.get("/api/preferences").json()["count"] == 0

    def test_delete_missing_is_404(self):
        client = _get_test_client()
        assert client.delete("/api/preferences/user/nobody").status_code == 404
