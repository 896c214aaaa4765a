"""
HTTP tests for /api user management routes (admin bearer token guard).
"""
import datetime

import pytest

from tests.conftest import auth_header


# ============================================================================
# /api/grant-admin
# ============================================================================

def test_grant_admin_creates_new_admin(client, admin_token, identity, profiles):
    resp = client.post("/api/grant-admin", json={"email": "new@x.com"}, headers=auth_header(admin_token))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["email"] == "new@x.com"
    assert body["message"] == "Admin role granted with temporary password set"
    assert len(body["tempPassword"]) == 12

    uid = body["uid"]
    assert identity.claims[uid] == {"mustChangePassword": True}
    doc = profiles.docs[uid]
    assert doc["userType"] == "admin"
    assert doc["creationEndpoint"] == "grant_admin"
    assert doc["createdBy"] == "Ada Admin"
    assert doc["tempPassword"] == body["tempPassword"]
    assert "createdAt" in doc


def test_grant_admin_promotes_existing_user(client, admin_token, identity, profiles):
    record = identity.add_user("member@x.com")
    profiles.docs[record.uid] = {"userType": "user", "fcmToken": "tok"}

    resp = client.post(
        "/api/grant-admin",
        json={"email": "member@x.com", "tempPassword": "Rotate123"},
        headers=auth_header(admin_token),
    )

    assert resp.status_code == 200
    assert resp.get_json()["uid"] == record.uid
    assert resp.get_json()["tempPassword"] == "Rotate123"
    assert profiles.docs[record.uid]["userType"] == "admin"
    assert profiles.docs[record.uid]["fcmToken"] == "tok"
    assert identity.passwords[record.uid] == "Rotate123"


def test_grant_admin_invalid_email_is_400(client, admin_token, profiles):
    writes_before = len(profiles.writes)
    resp = client.post("/api/grant-admin", json={"email": "nope"}, headers=auth_header(admin_token))

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert resp.get_json()["code"] == "invalid_input"
    assert len(profiles.writes) == writes_before


def test_grant_admin_without_token_is_401(client, identity):
    resp = client.post("/api/grant-admin", json={"email": "new@x.com"})

    assert resp.status_code == 401
    assert "create_user" not in identity.call_names()


def test_grant_admin_by_regular_user_is_403(client, identity, profiles):
    identity.add_user("joe@x.com", uid="joe")
    profiles.docs["joe"] = {"userType": "user"}
    token = identity.issue_token("joe")

    resp = client.post("/api/grant-admin", json={"email": "new@x.com"}, headers=auth_header(token))

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "Admin access required"
    assert "new@x.com" not in identity.users


# ============================================================================
# /api/create-user
# ============================================================================

def test_create_user_with_names(client, admin_token, profiles):
    resp = client.post(
        "/api/create-user",
        json={"email": "bob@x.com", "firstName": "Bob", "lastName": "Hug"},
        headers=auth_header(admin_token),
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "User created successfully"
    doc = profiles.docs[body["uid"]]
    assert doc["userType"] == "user"
    assert doc["accountType"] == "Admin-Created"
    assert doc["creationEndpoint"] == "create_user"
    assert doc["createdBy"] == "Ada Admin"
    assert doc["displayName"] == "Bob Hug"


def test_create_user_existing_email_updates_profile(client, admin_token, identity, profiles):
    record = identity.add_user("bob@x.com")

    resp = client.post("/api/create-user", json={"email": "bob@x.com"}, headers=auth_header(admin_token))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["uid"] == record.uid
    assert "tempPassword" not in body
    assert "createdAt" not in profiles.docs[record.uid]


# ============================================================================
# /api/make-inactive, /api/make-active
# ============================================================================

def test_make_inactive_by_uid(client, admin_token, profiles):
    profiles.docs["u9"] = {"accountStatus": "Active"}

    resp = client.post("/api/make-inactive", json={"uid": "u9"}, headers=auth_header(admin_token))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["uid"] == "u9"
    assert body["accountStatus"] == "Inactive"
    assert body["message"] == "User marked as inactive"
    assert profiles.docs["u9"]["accountStatus"] == "Inactive"


def test_make_active_by_email(client, admin_token, identity, profiles):
    record = identity.add_user("bob@x.com")

    resp = client.post("/api/make-active", json={"email": "bob@x.com"}, headers=auth_header(admin_token))

    assert resp.status_code == 200
    assert profiles.docs[record.uid]["accountStatus"] == "Active"


def test_make_inactive_requires_uid_or_email(client, admin_token):
    resp = client.post("/api/make-inactive", json={}, headers=auth_header(admin_token))

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Either uid or email is required"


def test_make_inactive_unknown_email_is_404(client, admin_token):
    resp = client.post("/api/make-inactive", json={"email": "ghost@x.com"}, headers=auth_header(admin_token))

    assert resp.status_code == 404
    assert resp.get_json()["code"] == "not_found"


# ============================================================================
# Open endpoints
# ============================================================================

def test_list_users_hides_private_fields(client, profiles):
    profiles.docs["u1"] = {
        "email": "a@x.com",
        "userType": "user",
        "fcmToken": "secret-token",
        "tempPassword": "secret-pass",
        "createdAt": datetime.datetime(2024, 5, 1, 12, 0, tzinfo=datetime.timezone.utc),
    }
    profiles.docs["u2"] = {"email": "b@x.com", "userType": "admin"}

    resp = client.get("/api/users")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["total"] == 2
    users = {user["id"]: user for user in body["users"]}
    assert users["u1"]["notificationsEnabled"] is True
    assert users["u2"]["notificationsEnabled"] is False
    assert "fcmToken" not in users["u1"]
    assert "tempPassword" not in users["u1"]
    assert users["u1"]["createdAt"].startswith("2024-05-01T12:00:00")


@pytest.mark.parametrize("path, flag, kind", [
    ("/api/make-triple-hugger", "Yes", "triple"),
    ("/api/make-double-hugger", "No", "double"),
])
def test_hugger_routes(client, identity, profiles, path, flag, kind):
    record = identity.add_user("hug@x.com")

    resp = client.post(path, json={"email": "hug@x.com"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["is_triple_hugger"] == flag
    assert body["message"] == f"User marked as {kind} hugger"
    assert profiles.docs[record.uid]["is_triple_hugger"] == flag


def test_hugger_unknown_email_is_404(client):
    resp = client.post("/api/make-triple-hugger", json={"email": "ghost@x.com"})
    assert resp.status_code == 404


def test_remove_password_change_requirement(client, identity):
    record = identity.add_user("a@x.com")
    identity.claims[record.uid] = {"mustChangePassword": True}

    resp = client.post("/api/remove-password-change-requirement", json={"uid": record.uid})

    assert resp.status_code == 200
    assert resp.get_json()["mustChangePassword"] is False
    assert identity.claims[record.uid] == {"mustChangePassword": False}


def test_remove_password_change_requirement_unknown_uid_is_404(client):
    resp = client.post("/api/remove-password-change-requirement", json={"uid": "missing"})

    assert resp.status_code == 404
    assert resp.get_json()["code"] == "upstream_error"


def test_unparsable_body_is_400(client, admin_token):
    resp = client.post(
        "/api/create-user",
        data="{not json",
        content_type="application/json",
        headers=auth_header(admin_token),
    )
    assert resp.status_code == 400
