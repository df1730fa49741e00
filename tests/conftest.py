from __future__ import annotations

import pytest

from config import TestConfig
from durood_tracker import create_app, db, get_broadcaster
from durood_tracker.events import TotalBroadcaster
from durood_tracker.models.user import User


@pytest.fixture()
def app():
    app = create_app(TestConfig, broadcaster=TotalBroadcaster())
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()
    get_broadcaster(app).close()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def user(app) -> User:
    u = User(email="amina@example.com", username="amina", display_name="Amina")
    u.set_password("secret123")
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture()
def auth_headers(client, user) -> dict:
    resp = client.post("/api/auth/login", json={"identifier": "amina", "password": "secret123"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture()
def sent_emails(monkeypatch) -> list:
    """Capture outgoing mail instead of talking to SMTP."""
    outbox = []

    def fake_send(to_email, subject, body):
        outbox.append({"to": to_email, "subject": subject, "body": body})

    monkeypatch.setattr("durood_tracker.mailer.send_email", fake_send)
    return outbox
