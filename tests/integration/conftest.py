"""
Integration test fixtures.
These fixtures set up the Firestore emulator and FastAPI test client.
Tests are skipped unless FIRESTORE_EMULATOR_HOST points at a running emulator.
"""
import os
import pytest
from fastapi.testclient import TestClient
from google.auth.credentials import AnonymousCredentials
from google.cloud import firestore
from jose import jwt

from healthdesk.dependencies import ALGORITHM, SECRET_KEY
from healthdesk.main import app


def pytest_collection_modifyitems(config, items):
    if os.getenv("FIRESTORE_EMULATOR_HOST"):
        return
    skip = pytest.mark.skip(reason="FIRESTORE_EMULATOR_HOST not set")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def test_project_id():
    """Get test project ID."""
    return os.getenv("TEST_GCP_PROJECT_ID", "test-project")


@pytest.fixture(scope="function")
def test_db(test_project_id, monkeypatch):
    """
    Create a test Firestore client connected to the emulator.
    Cleans up test data before and after each test.
    """
    monkeypatch.setenv("GCP_PROJECT_ID", test_project_id)
    monkeypatch.setenv("HEALTHDESK_DATA_MODE", "live")
    monkeypatch.delenv("REDIS_HOST", raising=False)

    test_client = firestore.Client(project=test_project_id, credentials=AnonymousCredentials())

    def clean():
        for collection in test_client.collections():
            for doc in collection.stream():
                doc.reference.delete()

    clean()
    yield test_client
    clean()


@pytest.fixture
def client(test_db):
    """FastAPI test client with test database."""
    return TestClient(app)


def register(client, email, full_name="Test User", password="testpassword123"):
    response = client.post("/auth/register", json={
        "full_name": full_name,
        "email": email,
        "password": password,
    })
    assert response.status_code == 201
    token = response.json()["access_token"]
    decoded = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    return {
        "user_id": decoded["sub"],
        "email": email,
        "password": password,
        "access_token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture
def registered_user(client):
    """Register a user and return user data with token."""
    return register(client, "testuser@example.com")


@pytest.fixture
def auth_headers(registered_user):
    """Just the auth headers for authenticated requests."""
    return registered_user["headers"]


@pytest.fixture
def admin_user(client, test_db):
    """Register a user and grant admin membership directly in Firestore."""
    user = register(client, "admin@example.com", full_name="Admin User")
    test_db.collection("admin_users").document(user["user_id"]).set({"created_at": firestore.SERVER_TIMESTAMP})
    return user
