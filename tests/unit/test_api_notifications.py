"""HTTP tests for /api/send-notification and /api/notification-stats."""
import pytest


@pytest.fixture
def devices(profiles):
    profiles.docs.update({
        "a1": {"userType": "admin", "fcmToken": "tok-a1"},
        "u1": {"userType": "user", "fcmToken": "tok-u1"},
        "u2": {"userType": "user"},
    })
    return profiles


def test_send_to_everyone(client, devices, messaging):
    resp = client.post("/api/send-notification", json={"title": "Hi", "body": "Hello"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["messageId"].startswith("batch-")
    assert body["stats"] == {"total": 2, "successful": 2, "failed": 0}
    assert sorted(token for token, _ in messaging.sent) == ["tok-a1", "tok-u1"]


def test_send_to_admins_only(client, devices, messaging):
    resp = client.post("/api/send-notification", json={"title": "Hi", "body": "Hello", "targetType": "admin"})

    assert resp.get_json()["stats"]["total"] == 1
    assert [token for token, _ in messaging.sent] == ["tok-a1"]


def test_explicit_users_override_target_type(client, devices, messaging):
    resp = client.post(
        "/api/send-notification",
        json={"title": "Hi", "body": "Hello", "targetType": "admin", "targetUsers": ["u1", "u2"]},
    )

    assert resp.get_json()["stats"]["total"] == 1
    assert [token for token, _ in messaging.sent] == ["tok-u1"]


def test_unknown_target_type_ignored_with_explicit_users(client, devices, messaging):
    devices.docs["u2"]["fcmToken"] = "tok-u2"

    resp = client.post(
        "/api/send-notification",
        json={"title": "t", "body": "b", "targetType": "premium", "targetUsers": ["u1", "u2"]},
    )

    assert resp.status_code == 200
    assert resp.get_json()["stats"] == {"total": 2, "successful": 2, "failed": 0}
    assert sorted(token for token, _ in messaging.sent) == ["tok-u1", "tok-u2"]


def test_no_recipients_is_200_with_failure_body(client, devices, messaging):
    resp = client.post("/api/send-notification", json={"title": "Hi", "body": "Hello", "targetUsers": ["u2"]})

    assert resp.status_code == 200
    assert resp.get_json() == {
        "success": False,
        "error": "No users have enabled notifications for the specified criteria",
    }
    assert messaging.sent == []


def test_failed_token_counted(client, devices, messaging):
    messaging.failing.add("tok-u1")

    resp = client.post("/api/send-notification", json={"title": "Hi", "body": "Hello"})

    assert resp.status_code == 200
    assert resp.get_json()["stats"] == {"total": 2, "successful": 1, "failed": 1}


@pytest.mark.parametrize("payload", [
    {"title": "Hi"},
    {"body": "Hello"},
    {"title": "Hi", "body": "Hello", "targetType": "staff"},
])
def test_invalid_payload_is_400(client, devices, messaging, payload):
    resp = client.post("/api/send-notification", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert messaging.sent == []


def test_notification_stats(client, devices):
    resp = client.get("/api/notification-stats")

    assert resp.status_code == 200
    assert resp.get_json() == {
        "totalUsers": 3,
        "usersWithNotifications": 2,
        "admins": 1,
        "regularUsers": 2,
    }
