# nameplate_dashboard/tests/conftest.py
import pytest

from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.init_db import init_db
from nameplate_dashboard.db.session import get_session, reset_engine
from nameplate_dashboard.services.user_service import UserService

PASSWORD = "secret123"
JWT_SECRET = "test-secret-key-for-signing-session-tokens"


@pytest.fixture()
def database(tmp_path, monkeypatch):
    """Fresh SQLite file per test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.delenv("STORAGE_ACCESS_KEY", raising=False)
    reset_engine()
    init_db()
    yield
    reset_engine()


@pytest.fixture()
def db(database):
    session = get_session()
    yield session
    session.close()


@pytest.fixture()
def app(database):
    from nameplate_dashboard.app_factory import create_app

    return create_app("testing", overrides={"JWT_SECRET": JWT_SECRET, "STORAGE_ACCESS_KEY": None})


@pytest.fixture()
def client(app):
    return app.test_client()


def make_user(role=UserRole.officer, rmo="RMO1", email=None, name="Test User"):
    db = get_session()
    try:
        user = UserService(db).register_user(
            officer_name=name,
            email=email or f"{role.value}.{rmo or 'x'}.{name.replace(' ', '')}@example.com".lower(),
            password=PASSWORD,
            mobile_number="9876543210",
            rmo=rmo,
            role=role,
        )
        db.commit()
        return user
    finally:
        db.close()


def login(client, user):
    response = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})
    assert response.status_code == 200, response.get_json()
    return response


@pytest.fixture()
def admin(database):
    return make_user(UserRole.admin, rmo=None, name="Admin")


@pytest.fixture()
def reviewer(database):
    return make_user(UserRole.rmo, rmo="RMO1", name="Reviewer")


@pytest.fixture()
def officer(database):
    return make_user(UserRole.officer, rmo="RMO1", name="Officer One")


def nameplate_payload(officer_user, **overrides):
    payload = {
        "theme": "ambuja",
        "background": "/backgrounds/ambuja/d1.webp",
        "houseName": "Sunrise Villa",
        "ownerName": "R. Sharma",
        "address": "Plot 21, Pune",
        "rmo": officer_user.rmo,
        "officer": officer_user.officer_number,
        "lot": "LOT-1",
        "officer_name": officer_user.officer_name,
        "email": officer_user.email,
        "mobile_number": "9876543210",
        "designation": "Sales Officer",
        "image_url": "https://cdn.example.com/nameplate-x.png",
    }
    payload.update(overrides)
    return payload
