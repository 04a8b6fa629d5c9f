"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite file under ``tmp_path``; the settings
object is patched in place because it is read at call time by the
database layer.
"""
from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient

from memo_api.app.core.config import settings
from memo_api.app.core.db import init_db
from memo_api.app.main import app


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point the app at a fresh, migrated database."""
    db_path = tmp_path / "memo_board.db"
    monkeypatch.setattr(settings, "database_url", str(db_path))
    # Keep hashing cheap in tests.
    monkeypatch.setattr(settings, "password_iterations", 1000)
    init_db()
    return db_path


@pytest.fixture
def make_client():
    """Factory for independent clients, each with its own cookie jar."""
    with ExitStack() as stack:
        def _make() -> TestClient:
            return stack.enter_context(TestClient(app))
        yield _make


@pytest.fixture
def client(make_client):
    return make_client()


def signup(client: TestClient, username: str, password: str = "pass1"):
    return client.post("/api/v1/account/signup", json={"username": username, "password": password})


def signin(client: TestClient, username: str, password: str = "pass1"):
    return client.post("/api/v1/account/signin", json={"username": username, "password": password})


def login_as(client: TestClient, username: str, password: str = "pass1") -> TestClient:
    """Register ``username`` (if needed) and sign ``client`` in."""
    signup(client, username, password)
    response = signin(client, username, password)
    assert response.status_code == 200
    return client


def write_memo(client: TestClient, contents: str) -> int:
    """Write a memo and return its id (the newest id of the writer's feed)."""
    response = client.post("/api/v1/memo/", json={"contents": contents})
    assert response.status_code == 200
    username = client.get("/api/v1/account/getinfo").json()["info"]["username"]
    return client.get(f"/api/v1/memo/{username}").json()[0]["id"]
