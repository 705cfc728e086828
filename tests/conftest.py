"""
Shared fixtures for the API tests.

Settings are read once at import time, so the environment is pinned here before
anything from inventory is imported: a throwaway SQLite file, a fixed JWT secret
and the cheapest bcrypt cost. Each test that uses ``client`` gets freshly
created tables and a TestClient whose lifespan has bootstrapped the default
admin account.
"""

import os
import tempfile
from collections.abc import Callable, Generator
from itertools import count

_DB_DIR = tempfile.mkdtemp(prefix="inventory-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APP_ENV"] = "dev"

import pytest
from fastapi.testclient import TestClient

from inventory.core.database import engine
from inventory.main import app
from inventory.models import Base

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient over empty tables; the lifespan creates the default admin."""
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    with TestClient(app) as test_client:
        yield test_client


def _login(client: TestClient, username: str, password: str) -> str:
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    token = _login(client, ADMIN_USERNAME, ADMIN_PASSWORD)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(client: TestClient) -> dict[str, str]:
    """Headers for a freshly registered non-admin user 'bob'."""
    resp = client.post(
        "/api/auth/register",
        json={"username": "bob", "email": "bob@example.com", "password": "hunter22"},
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def product_payload() -> Callable[..., dict]:
    """Factory for valid product bodies; staffId and serialNumber differ per call."""
    seq = count(1)

    def make(**overrides: object) -> dict:
        n = next(seq)
        body = {
            "firstName": "Jane",
            "lastName": "Doe",
            "staffId": 1000 + n,
            "designation": "Clerk",
            "department": "Finance",
            "location": "Head Office",
            "block": "B",
            "roomNumber": "101",
            "make": "APC",
            "model": "Back-UPS 600",
            "serialNumber": f"SN-{n}",
            "capacityVA": "600",
            "issueDate": "2024-01-15",
        }
        body.update(overrides)
        return body

    return make
