from __future__ import annotations

from datetime import timedelta

from durood_tracker import db
from durood_tracker.models.user import User
from durood_tracker.time_utils import local_today


def _login_as(client, username: str, email: str) -> dict:
    u = User(email=email, username=username, display_name=username.title())
    u.set_password("secret123")
    db.session.add(u)
    db.session.commit()
    resp = client.post("/api/auth/login", json={"identifier": username, "password": "secret123"})
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


def test_user_count(client, user) -> None:
    assert client.get("/api/users/count").get_json() == {"count": 1}


def test_health(client) -> None:
    assert client.get("/api/health").status_code == 200


def test_dashboard_overview(client, auth_headers) -> None:
    today = local_today()
    yesterday = today - timedelta(days=1)
    client.post("/api/durood", json={"count": 40}, headers=auth_headers)
    client.post("/api/durood", json={"count": 15, "date": yesterday.isoformat()}, headers=auth_headers)
    client.post("/api/goal", json={"goal": 100}, headers=auth_headers)

    body = client.get("/api/dashboard/overview", headers=auth_headers).get_json()
    assert body["user"]["username"] == "amina"
    assert body["today"]["count"] == 40
    assert body["today"]["goal"]["goal"] == 100
    assert len(body["week"]) == 7
    assert body["week"][-1] == {"date": today.isoformat(), "count": 40}
    assert body["week"][-2]["count"] == 15
    assert body["streak"] == {"current_streak_days": 2, "longest_streak_days": 2}
    assert body["level"]["points"] == 10
    assert body["global_total"] == 55


def test_rankings_order_and_fallback(client, auth_headers) -> None:
    other = _login_as(client, "bilal", "bilal@example.com")
    client.post("/api/durood", json={"count": 20, "date": "2025-01-05"}, headers=auth_headers)
    client.post("/api/durood", json={"count": 50, "date": "2025-01-05"}, headers=other)

    body = client.get("/api/rankings?date=2025-01-05").get_json()
    assert [(r["username"], r["rank"], r["count"]) for r in body["rankings"]] == [
        ("bilal", 1, 50),
        ("amina", 2, 20),
    ]

    fallback = client.get("/api/rankings?date=2025-01-09").get_json()
    assert fallback["date"] == "2025-01-05"
    assert fallback["note"]
    assert fallback["total"] == 2


def test_rankings_empty(client) -> None:
    body = client.get("/api/rankings").get_json()
    assert body["rankings"] == []
    assert body["total"] == 0


def test_profile_update(client, auth_headers) -> None:
    resp = client.put(
        "/api/profile",
        json={"username": "amina_k", "display_name": "Amina K"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["user"]["username"] == "amina_k"
    assert resp.get_json()["user"]["display_name"] == "Amina K"


def test_profile_email_change_requires_reverification(client, auth_headers, user) -> None:
    user.email_verified = True
    db.session.commit()

    resp = client.put("/api/profile", json={"email": "new@example.com"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["user"]["email_verified"] is False

    bad = client.put("/api/profile", json={"email": "not-an-email"}, headers=auth_headers)
    assert bad.status_code == 400


def test_profile_rejects_taken_username(client, auth_headers) -> None:
    _login_as(client, "bilal", "bilal@example.com")
    resp = client.put("/api/profile", json={"username": "bilal"}, headers=auth_headers)
    assert resp.status_code == 400
    assert client.put("/api/profile", json={"username": "ab"}, headers=auth_headers).status_code == 400


def test_profile_password_change(client, auth_headers) -> None:
    wrong = client.put(
        "/api/profile",
        json={"currentPassword": "nope", "newPassword": "another1"},
        headers=auth_headers,
    )
    assert wrong.status_code == 400

    ok = client.put(
        "/api/profile",
        json={"currentPassword": "secret123", "newPassword": "another1"},
        headers=auth_headers,
    )
    assert ok.status_code == 200
    login = client.post("/api/auth/login", json={"identifier": "amina", "password": "another1"})
    assert login.status_code == 200
