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


def test_player_profile_created_on_first_save(client):
    me = _register(client, "pat@example.com", name="Pat Cash")

    first = client.get("/api/v1/me/player-profile")
    assert first.status_code == 200
    assert first.json() is None

    saved = client.put(
        "/api/v1/me/player-profile",
        json={"bio": "Serve and volley", "preferred_courts": ["Rushcutters Bay"]},
    )
    assert saved.status_code == 200
    profile = saved.json()
    assert profile["user_id"] == me["id"]
    assert profile["location"] == "Sydney"
    assert profile["skill_level"] == "Beginner"
    assert profile["bio"] == "Serve and volley"
    assert profile["preferred_courts"] == ["Rushcutters Bay"]

    again = client.put("/api/v1/me/player-profile", json={"skill_level": "Advanced"})
    assert again.json()["id"] == profile["id"]
    assert again.json()["skill_level"] == "Advanced"
    assert again.json()["bio"] == "Serve and volley"

    assert client.put("/api/v1/me/player-profile", json={"location": None}).status_code == 400


def test_profile_photo_updates_user(client):
    _register(client, "pat@example.com")

    r = client.put("/api/v1/me/player-profile", json={"avatar": "https://img.test/a.png"})
    assert r.status_code == 200
    assert "avatar" not in r.json()

    me = client.get("/api/v1/me").json()
    assert me["avatar"] == "https://img.test/a.png"
    assert me["cover"] is None


def test_profile_role_checks(client):
    assert client.get("/api/v1/me/player-profile").status_code == 401

    _register(client, "coach@example.com", role="coach")
    assert client.get("/api/v1/me/player-profile").status_code == 403
    assert client.put("/api/v1/me/player-profile", json={"bio": "x"}).status_code == 403

    saved = client.put(
        "/api/v1/me/coach-profile",
        json={"rate": "$80/hr", "tags": ["Kids", "Serve"], "schedule": {"mon": ["9:00", "10:00"]}},
    )
    assert saved.status_code == 200
    data = saved.json()
    assert data["title"] == "Coach"
    assert data["reviews"] == 0
    assert data["tags"] == ["Kids", "Serve"]
    assert data["schedule"] == {"mon": ["9:00", "10:00"]}
    assert client.get("/api/v1/me/coach-profile").json()["rate"] == "$80/hr"


def test_update_user_only_self(client):
    me = _register(client, "pat@example.com")

    with TestClient(app) as other:
        them = _register(other, "sam@example.com")

    forbidden = client.put(f"/api/v1/users/{them['id']}", json={"name": "Hacked"})
    assert forbidden.status_code == 403

    ok = client.put(f"/api/v1/users/{me['id']}", json={"cover": "https://img.test/c.png", "name": "Pat"})
    assert ok.status_code == 200
    assert ok.json()["cover"] == "https://img.test/c.png"
    assert ok.json()["name"] == "Pat"


def test_public_players_and_coaches(client):
    player = _register(client, "pat@example.com", name="Pat Rafter")
    client.put("/api/v1/me/player-profile", json={"skill_level": "Intermediate", "location": "Bondi"})
    client.post("/api/v1/auth/logout")

    with TestClient(app) as c2:
        _register(c2, "lleyton@example.com", name="Lleyton Hewitt")

    with TestClient(app) as c3:
        coach = _register(c3, "coach@example.com", role="coach", name="Tony Roche")
        c3.put(
            "/api/v1/me/coach-profile",
            json={"location": "Manly", "locations": ["Mosman"], "tags": ["Kids"]},
        )

    # Public listing works without a session.
    players = client.get("/api/v1/players").json()
    assert {p["user"]["id"] for p in players} == {player["id"], player["id"] + 1}
    assert all("email" not in p["user"] for p in players)

    by_level = client.get("/api/v1/players", params={"skill_level": "intermediate"}).json()
    assert [p["user"]["slug"] for p in by_level] == [player["slug"]]
    assert by_level[0]["profile"]["location"] == "Bondi"

    by_name = client.get("/api/v1/players", params={"q": "hewitt"}).json()
    assert len(by_name) == 1
    assert by_name[0]["profile"] is None

    detail = client.get(f"/api/v1/players/{player['slug']}")
    assert detail.status_code == 200
    assert detail.json()["profile"]["skill_level"] == "Intermediate"

    assert client.get(f"/api/v1/players/{coach['slug']}").status_code == 404
    assert client.get("/api/v1/players/nobody-0000").status_code == 404

    coaches = client.get("/api/v1/coaches").json()
    assert [c["user"]["id"] for c in coaches] == [coach["id"]]
    assert len(client.get("/api/v1/coaches", params={"location": "mosman"}).json()) == 1
    assert client.get("/api/v1/coaches", params={"location": "Parramatta"}).json() == []
    assert len(client.get("/api/v1/coaches", params={"tag": "kids"}).json()) == 1

    assert client.get(f"/api/v1/coaches/{coach['slug']}").json()["profile"]["location"] == "Manly"
    assert client.get(f"/api/v1/coaches/{player['slug']}").status_code == 404


def test_blank_names_and_profile_fields_rejected(client):
    me = _register(client, "pat@example.com", name="Pat")

    r = client.put(f"/api/v1/users/{me['id']}", json={"name": "   "})
    assert r.status_code == 422
    assert client.get("/api/v1/me").json()["name"] == "Pat"

    assert client.put("/api/v1/me/player-profile", json={"location": "  "}).status_code == 422
    saved = client.put("/api/v1/me/player-profile", json={"location": " Bondi ", "skill_level": " Advanced "})
    assert saved.json()["location"] == "Bondi"
    assert saved.json()["skill_level"] == "Advanced"
