"""
Test configuration and fixtures for PlanMap tests.
"""
import os

# Must be set before planmap.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from planmap.main import app
from planmap.client.api import PlanmapApi
from planmap.db.database import SessionLocal
from planmap.db.init_db import create_tables, drop_all_tables
from planmap.domain.events import event_publisher


@pytest.fixture(autouse=True)
def database():
    """Fresh schema in the shared in-memory database for every test."""
    create_tables()
    yield
    drop_all_tables()


@pytest.fixture(autouse=True)
def clean_event_subscribers():
    event_publisher.clear_subscribers()
    yield
    event_publisher.clear_subscribers()


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


def _signup(client, email="student@example.com", password="secret123", username=None):
    response = client.post("/api/auth/signup", json={
        "email": email, "password": password, "username": username,
    })
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def signup(client):
    """Sign up and return the Authorization header for the new account."""
    return lambda **kwargs: _signup(client, **kwargs)


@pytest.fixture
def auth_headers(client):
    return _signup(client)


@pytest.fixture
def other_headers(client):
    return _signup(client, email="someone-else@example.com")


@pytest.fixture
def mindmap(client, auth_headers):
    response = client.post("/api/mindmaps", json={"title": "Biology"}, headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def make_node(client, auth_headers, mindmap):
    """Factory creating nodes in the default mindmap."""
    def _make(react_flow_id, **fields):
        body = {"mindmap_id": mindmap["id"], "react_flow_id": react_flow_id, **fields}
        response = client.post("/api/nodes", json=body, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest_asyncio.fixture
async def api(auth_headers):
    """Async API client signed in as the default user, served in-process."""
    token = auth_headers["Authorization"].split(" ", 1)[1]
    async with PlanmapApi(
        base_url="http://testserver",
        token=token,
        transport=httpx.ASGITransport(app=app),
    ) as client:
        yield client


@pytest.fixture
def sleeps():
    """Delays requested by retry loops; the coroutine returns immediately."""
    recorded = []

    async def fake_sleep(delay):
        recorded.append(delay)

    fake_sleep.calls = recorded
    return fake_sleep
