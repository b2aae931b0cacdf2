import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tennis_connect.api.deps import get_db
from tennis_connect.db.base import Base
import tennis_connect.models  # noqa: F401
from tennis_connect.main import app


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _register(c, email, role="player", name="Test User"):
    r = c.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "secret123", "name": name, "role": role},
    )
    assert r.status_code == 201
    return r.json()


def test_message_flow(client):
    coach = _register(client, "coach@example.com", role="coach", name="Tony Roche")

    with TestClient(app) as player:
        me = _register(player, "pat@example.com", name="Pat Cash")
        sent = player.post(
            "/api/v1/messages",
            json={"recipient_id": coach["id"], "subject": "Lessons", "content": "Are you free Saturday?"},
        )
        assert sent.status_code == 201
        msg = sent.json()
        assert msg["sender_user_id"] == me["id"]
        assert msg["sender_name"] == "Pat Cash"
        assert msg["sender_email"] == "pat@example.com"
        assert msg["recipient_type"] == "coach"
        assert msg["is_read"] is False

        player.post("/api/v1/messages", json={"recipient_id": coach["id"], "content": "Or Sunday?"})

        # The sender cannot touch the recipient's inbox.
        assert player.get("/api/v1/messages").json() == []
        assert player.put(f"/api/v1/messages/{msg['id']}/read").status_code == 403
        assert player.delete(f"/api/v1/messages/{msg['id']}").status_code == 403

    inbox = client.get("/api/v1/messages").json()
    assert [m["content"] for m in inbox] == ["Or Sunday?", "Are you free Saturday?"]
    assert client.get("/api/v1/messages/unread-count").json() == {"count": 2}

    read = client.put(f"/api/v1/messages/{msg['id']}/read")
    assert read.status_code == 200
    assert read.json()["is_read"] is True
    assert client.get("/api/v1/messages/unread-count").json() == {"count": 1}

    assert client.delete(f"/api/v1/messages/{msg['id']}").status_code == 200
    assert len(client.get("/api/v1/messages").json()) == 1
    assert client.put(f"/api/v1/messages/{msg['id']}/read").status_code == 404


def test_send_message_validation(client):
    assert client.get("/api/v1/messages").status_code == 401
    assert client.get("/api/v1/messages/unread-count").status_code == 401

    me = _register(client, "pat@example.com")
    assert client.post("/api/v1/messages", json={"recipient_id": 999, "content": "hi"}).status_code == 404
    assert client.post("/api/v1/messages", json={"recipient_id": me["id"], "content": "hi"}).status_code == 400

    with TestClient(app) as other:
        coach = _register(other, "coach@example.com", role="coach")

    mismatch = client.post(
        "/api/v1/messages",
        json={"recipient_id": coach["id"], "recipient_type": "player", "content": "hi"},
    )
    assert mismatch.status_code == 400

    blank = client.post("/api/v1/messages", json={"recipient_id": coach["id"], "content": "   "})
    assert blank.status_code == 400
    assert client.post("/api/v1/messages", json={"recipient_id": coach["id"], "content": ""}).status_code == 422


def test_anonymous_contact_request(client):
    coach = _register(client, "coach@example.com", role="coach")

    with TestClient(app) as visitor:
        r = visitor.post(
            "/api/v1/messages/contact",
            json={
                "recipient_id": coach["id"],
                "content": "Do you coach adults?",
                "sender_name": "Visitor",
                "sender_email": "Visitor@Example.com",
                "sender_phone": "0400 000 000",
            },
        )
        assert r.status_code == 201
        assert r.json()["sender_user_id"] is None
        assert r.json()["sender_email"] == "visitor@example.com"

        missing = visitor.post(
            "/api/v1/messages/contact",
            json={"recipient_id": 999, "content": "hi", "sender_name": "V", "sender_email": "v@example.com"},
        )
        assert missing.status_code == 404

    inbox = client.get("/api/v1/messages").json()
    assert len(inbox) == 1
    assert inbox[0]["sender_phone"] == "0400 000 000"
    assert inbox[0]["recipient_type"] == "coach"


def test_contact_request_validates_sender(client):
    coach = _register(client, "coach@example.com", role="coach")

    with TestClient(app) as visitor:
        base = {"recipient_id": coach["id"], "content": "Lessons?", "sender_name": "Visitor"}
        bad_email = visitor.post("/api/v1/messages/contact", json={**base, "sender_email": "xyz"})
        assert bad_email.status_code == 422

        blank_name = visitor.post(
            "/api/v1/messages/contact",
            json={**base, "sender_name": "   ", "sender_email": "v@example.com"},
        )
        assert blank_name.status_code == 422

    assert client.get("/api/v1/messages").json() == []
