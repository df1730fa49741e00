from __future__ import annotations

import re
from datetime import timedelta

from durood_tracker import db
from durood_tracker.mailer import MailNotConfigured
from durood_tracker.models.password_reset import PasswordReset
from durood_tracker.models.user import User
from durood_tracker.time_utils import utc_now

FORGOT_MESSAGE = "If an account with that email exists, you will receive password reset instructions."


def _token_from(body: str) -> str:
    return re.search(r"token=([0-9a-f]+)", body).group(1)


def test_register_and_login(client, sent_emails) -> None:
    resp = client.post(
        "/api/auth/register",
        json={"email": "Yusuf@Example.com", "username": "yusuf", "password": "secret123"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["user"]["email"] == "yusuf@example.com"
    assert body["user"]["email_verified"] is False
    assert body["token"]

    assert len(sent_emails) == 1
    assert sent_emails[0]["to"] == "yusuf@example.com"

    login = client.post("/api/auth/login", json={"email": "yusuf@example.com", "password": "secret123"})
    assert login.status_code == 200

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {login.get_json()['token']}"})
    assert me.get_json()["user"]["username"] == "yusuf"


def test_signup_alias(client, sent_emails) -> None:
    resp = client.post(
        "/api/auth/signup",
        json={"email": "z@example.com", "username": "zainab", "password": "secret123"},
    )
    assert resp.status_code == 201


def test_register_succeeds_when_email_cannot_be_sent(client) -> None:
    resp = client.post(
        "/api/auth/register",
        json={"email": "x@example.com", "username": "xavier", "password": "secret123"},
    )
    assert resp.status_code == 201
    assert User.query.filter_by(username="xavier").count() == 1


def test_register_validation(client, user) -> None:
    assert client.post("/api/auth/register", json={}).status_code == 400
    short = client.post(
        "/api/auth/register", json={"email": "n@example.com", "username": "n", "password": "123"}
    )
    assert short.status_code == 400
    dup_email = client.post(
        "/api/auth/register",
        json={"email": "amina@example.com", "username": "other", "password": "secret123"},
    )
    assert dup_email.status_code == 400
    dup_username = client.post(
        "/api/auth/register",
        json={"email": "new@example.com", "username": "amina", "password": "secret123"},
    )
    assert dup_username.status_code == 400


def test_login_rejects_bad_password(client, user) -> None:
    resp = client.post("/api/auth/login", json={"identifier": "amina", "password": "wrong-password"})
    assert resp.status_code == 401


def test_invalid_token_is_401(client) -> None:
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_forgot_password_does_not_reveal_accounts(client, user, sent_emails) -> None:
    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    known = client.post("/api/auth/forgot-password", json={"email": "amina@example.com"})

    assert unknown.status_code == known.status_code == 200
    assert unknown.get_json() == known.get_json() == {"message": FORGOT_MESSAGE}
    assert [m["to"] for m in sent_emails] == ["amina@example.com"]


def test_reset_token_is_stored_hashed(client, user, sent_emails) -> None:
    client.post("/api/auth/forgot-password", json={"email": "amina@example.com"})
    raw = _token_from(sent_emails[0]["body"])

    row = PasswordReset.query.one()
    assert row.token_hash != raw
    assert row.expires > utc_now() + timedelta(minutes=55)


def test_reset_password_flow_is_single_use(client, user, sent_emails) -> None:
    client.post("/api/auth/forgot-password", json={"email": "amina@example.com"})
    raw = _token_from(sent_emails[0]["body"])

    resp = client.post("/api/auth/reset-password", json={"token": raw, "password": "newsecret"})
    assert resp.status_code == 200
    assert PasswordReset.query.count() == 0

    login = client.post("/api/auth/login", json={"identifier": "amina", "password": "newsecret"})
    assert login.status_code == 200

    reuse = client.post("/api/auth/reset-password", json={"token": raw, "password": "another1"})
    assert reuse.status_code == 400


def test_reset_password_rejects_expired_token(client, user, sent_emails) -> None:
    client.post("/api/auth/forgot-password", json={"email": "amina@example.com"})
    raw = _token_from(sent_emails[0]["body"])

    row = PasswordReset.query.one()
    row.expires = utc_now() - timedelta(minutes=1)
    db.session.commit()

    resp = client.post("/api/auth/reset-password", json={"token": raw, "password": "newsecret"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Reset token has expired"


def test_reset_password_validation(client) -> None:
    assert client.post("/api/auth/reset-password", json={}).status_code == 400
    short = client.post("/api/auth/reset-password", json={"token": "abc", "password": "123"})
    assert short.status_code == 400
    unknown = client.post("/api/auth/reset-password", json={"token": "abc", "password": "123456"})
    assert unknown.status_code == 400


def test_failed_reset_email_removes_token(client, user, monkeypatch) -> None:
    def no_mail(to_email, subject, body):
        raise MailNotConfigured("Email service not configured")

    monkeypatch.setattr("durood_tracker.mailer.send_email", no_mail)

    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    known = client.post("/api/auth/forgot-password", json={"email": "amina@example.com"})

    assert unknown.status_code == known.status_code == 200
    assert unknown.get_json() == known.get_json() == {"message": FORGOT_MESSAGE}
    assert PasswordReset.query.count() == 0


def test_forgot_password_without_smtp_is_generic(client, user) -> None:
    resp = client.post("/api/auth/forgot-password", json={"email": "amina@example.com"})
    assert resp.status_code == 200
    assert resp.get_json() == {"message": FORGOT_MESSAGE}
    assert PasswordReset.query.count() == 0


def test_verify_email_flow(client, sent_emails) -> None:
    client.post(
        "/api/auth/register",
        json={"email": "h@example.com", "username": "hamza", "password": "secret123"},
    )
    raw = _token_from(sent_emails[0]["body"])

    stored = User.query.filter_by(username="hamza").one()
    assert stored.email_verification_token != raw

    resp = client.post("/api/auth/verify-email", json={"token": raw})
    assert resp.status_code == 200

    db.session.expire_all()
    stored = User.query.filter_by(username="hamza").one()
    assert stored.email_verified is True
    assert stored.email_verification_token is None

    again = client.post("/api/auth/verify-email", json={"token": raw})
    assert again.status_code == 400


def test_verify_email_rejects_expired_token(client, sent_emails) -> None:
    client.post(
        "/api/auth/register",
        json={"email": "h@example.com", "username": "hamza", "password": "secret123"},
    )
    raw = _token_from(sent_emails[0]["body"])

    stored = User.query.filter_by(username="hamza").one()
    stored.email_verification_expires = utc_now() - timedelta(hours=1)
    db.session.commit()

    assert client.post("/api/auth/verify-email", json={"token": raw}).status_code == 400


def test_resend_verification(client, user, sent_emails) -> None:
    assert client.post("/api/auth/resend-verification", json={}).status_code == 400
    assert client.post(
        "/api/auth/resend-verification", json={"email": "ghost@example.com"}
    ).status_code == 404

    resp = client.post("/api/auth/resend-verification", json={"email": "amina@example.com"})
    assert resp.status_code == 200
    raw = _token_from(sent_emails[-1]["body"])
    assert client.post("/api/auth/verify-email", json={"token": raw}).status_code == 200

    already = client.post("/api/auth/resend-verification", json={"email": "amina@example.com"})
    assert already.status_code == 400
    assert already.get_json()["message"] == "Email is already verified"
