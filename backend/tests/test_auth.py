import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tennis_connect.api.deps import get_db
from tennis_connect.api.v1.auth import generate_slug
from tennis_connect.core.settings import settings
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


def _register(c, email="ana@example.com", role="player", name="Ana Lopez", password="secret123"):
    return c.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "name": name, "role": role},
    )


def test_register_logs_in_and_hides_password(client):
    r = _register(client, email="  Ana@Example.com ")
    assert r.status_code == 201
    data = r.json()
    assert data["email"] == "ana@example.com"
    assert data["role"] == "player"
    assert "password" not in data
    assert re.fullmatch(r"ana-lopez-[0-9a-f]{4}", data["slug"])
    assert settings.SESSION_COOKIE_NAME in r.cookies

    me = client.get("/api/v1/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == data["id"]


def test_register_duplicate_email(client):
    assert _register(client).status_code == 201

    with TestClient(app) as other:
        dup = _register(other, email="ANA@example.com", name="Someone Else")
    assert dup.status_code == 409


def test_register_validation(client):
    assert _register(client, role="admin").status_code == 422
    assert _register(client, email="not-an-email").status_code == 422
    assert _register(client, password="123").status_code == 422
    assert _register(client, name="   ").status_code == 422


def test_login_logout_flow(client):
    _register(client, role="coach", name="Coach Mike", email="mike@example.com")
    client.post("/api/v1/auth/logout")

    assert client.get("/api/v1/auth/me").status_code == 401

    bad = client.post("/api/v1/auth/login", json={"email": "mike@example.com", "password": "nope"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Login failed"

    unknown = client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": "x"})
    assert unknown.status_code == 401

    ok = client.post("/api/v1/auth/login", json={"email": "Mike@Example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["role"] == "coach"

    assert client.get("/api/v1/me").status_code == 200

    out = client.post("/api/v1/auth/logout")
    assert out.status_code == 200
    assert out.json() == {"ok": True}
    assert client.get("/api/v1/me").status_code == 401


def test_logout_without_session_is_ok(client):
    r = client.post("/api/v1/auth/logout")
    assert r.status_code == 200


def test_generate_slug():
    assert re.fullmatch(r"jo-wilfried-tsonga-[0-9a-f]{4}", generate_slug("  Jo-Wilfried  Tsonga! "))
    assert re.fullmatch(r"user-[0-9a-f]{4}", generate_slug("!!!"))
