"""Pytest fixtures — SQLite database per test, TestClient with get_db overridden."""
import uuid
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from recipe_hub.database import Base, get_db
from recipe_hub.main import app

# Import all models so they register with Base.metadata
from recipe_hub.models.user import User, UserRole                            # noqa: F401
from recipe_hub.models.group import Group, GroupMember, GroupJoinRequest      # noqa: F401
from recipe_hub.models.recipe import Recipe                                  # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """A session on the test database, independent of the API's sessions."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def register_user(client: TestClient, name: str = "Test User", email: str | None = None,
                  password: str = "secret123") -> dict:
    """Register through the API; returns the user JSON plus token and auth headers."""
    email = email or f"{name.split()[0].lower()}-{uuid.uuid4().hex[:8]}@example.com"
    resp = client.post("/api/users/register", json={
        "name": name,
        "email": email,
        "password": password,
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    return {
        **data["user"],
        "token": data["token"],
        "headers": {"Authorization": f"Bearer {data['token']}"},
    }


def register_admin(client: TestClient, db, name: str = "Site Admin") -> dict:
    """Register a user, then promote it to system admin directly in the database."""
    admin = register_user(client, name=name)
    db.query(User).filter(User.user_id == admin["userId"]).update({User.role: UserRole.admin})
    db.commit()
    admin["role"] = "admin"
    return admin


def create_test_group(client: TestClient, owner: dict, name: str = "Test Group",
                      is_private: bool = True, **extra) -> dict:
    """POST /api/groups and return the group JSON."""
    resp = client.post("/api/groups/", headers=owner["headers"], json={
        "name": name,
        "description": "A group for testing recipes together",
        "isPrivate": is_private,
        **extra,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["group"]


def recipe_payload(**overrides) -> dict:
    payload = {
        "title": "Tomato Soup",
        "description": "A simple and warming tomato soup",
        "ingredients": [
            {"name": "Tomato", "quantity": "6", "unit": "pcs"},
            {"name": "Salt", "quantity": "1", "unit": "tsp"},
        ],
        "steps": [
            {"number": 1, "description": "Chop the tomatoes"},
            {"number": 2, "description": "Simmer for 20 minutes"},
        ],
        "prepTime": 10,
        "cookTime": 20,
        "servings": 4,
        "difficulty": "Easy",
        "category": "Lunch",
        "tags": ["soup", "vegetarian"],
        "isPrivate": False,
    }
    payload.update(overrides)
    return payload


def create_test_recipe(client: TestClient, author: dict, **overrides) -> dict:
    """POST /api/recipes and return the recipe JSON."""
    resp = client.post("/api/recipes/", headers=author["headers"], json=recipe_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()["recipe"]


def approve_recipe(client: TestClient, admin: dict, recipe_id: str) -> dict:
    resp = client.post(f"/api/recipes/moderation/{recipe_id}/approve", headers=admin["headers"])
    assert resp.status_code == 200, resp.text
    return resp.json()["recipe"]


def approve_group(client: TestClient, admin: dict, group_id: str) -> dict:
    resp = client.post(f"/api/groups/moderation/{group_id}/approve", headers=admin["headers"])
    assert resp.status_code == 200, resp.text
    return resp.json()["group"]
