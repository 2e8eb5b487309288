"""Integration tests for administrative endpoints."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from chirp.models.revoked_token import RevokedToken
from tests.factories.revoked_token import RevokedTokenFactory
from tests.factories.user import AdminFactory, UserFactory
from tests.helpers.auth import login_headers


def _admin_headers(client, session):
    AdminFactory(username="root")
    session.commit()
    return login_headers(client, "root")


def test_non_admin_is_forbidden(client, session) -> None:
    UserFactory(username="pleb")
    session.commit()
    headers = login_headers(client, "pleb")

    resp = client.get("/api/v1/admin/users", headers=headers)

    assert resp.status_code == 403
    assert resp.get_json()["code"] == "forbidden"
    assert client.get("/api/v1/admin/users").status_code == 401


def test_list_users(client, session) -> None:
    headers = _admin_headers(client, session)
    for i in range(3):
        UserFactory(username=f"listed{i}")
    session.commit()

    resp = client.get("/api/v1/admin/users?limit=2&sort=username", headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert len(body["data"]) == 2
    assert body["meta"]["total"] == 4
    assert body["meta"]["has_next"] is True
    assert body["meta"]["has_prev"] is False

    filtered = client.get("/api/v1/admin/users?username=listed1", headers=headers).get_json()
    assert [u["username"] for u in filtered["data"]] == ["listed1"]


def test_deactivate_blocks_login(client, session) -> None:
    headers = _admin_headers(client, session)
    target = UserFactory(username="banned")
    session.commit()
    target_id = target.id

    resp = client.patch(
        f"/api/v1/admin/users/{target_id}",
        json={"is_active": False, "is_verified": True},
        headers=headers,
    )

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["is_active"] is False
    assert data["is_verified"] is True
    denied = client.post(
        "/api/v1/auth/login", json={"identifier": "banned", "password": "password123"}
    )
    assert denied.status_code == 401
    assert denied.get_json()["code"] == "invalid_credentials"


def test_promote_and_bad_role(client, session) -> None:
    headers = _admin_headers(client, session)
    target = UserFactory(username="promoted")
    session.commit()
    target_id = target.id

    ok = client.patch(f"/api/v1/admin/users/{target_id}", json={"role": "ADMIN"}, headers=headers)
    assert ok.get_json()["data"]["role"] == "ADMIN"

    bad = client.patch(f"/api/v1/admin/users/{target_id}", json={"role": "GOD"}, headers=headers)
    assert bad.status_code == 400

    missing = client.patch("/api/v1/admin/users/999999", json={"role": "USER"}, headers=headers)
    assert missing.status_code == 404


def test_sweep_revocations(client, session) -> None:
    headers = _admin_headers(client, session)
    now = datetime.now(UTC)
    RevokedTokenFactory(expires_at=now - timedelta(minutes=5))
    RevokedTokenFactory(expires_at=now - timedelta(days=1))
    RevokedTokenFactory(token="still.valid", expires_at=now + timedelta(hours=1))
    session.commit()

    resp = client.post("/api/v1/admin/revocations/sweep", headers=headers)

    assert resp.status_code == 200
    assert resp.get_json() == {"removed": 2}
    assert [r.token for r in session.query(RevokedToken).all()] == ["still.valid"]
