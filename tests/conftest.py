import os

# Settings are read at import time; point everything at the in-memory doubles first
os.environ["USE_MOCK_DB"] = "true"
os.environ["USE_MOCK_AUTH"] = "true"
os.environ.pop("MOCK_DB_PATH", None)

import pytest
from fastapi.testclient import TestClient

from app.config import firebase
from app.main import app
from app.services import (
    identity_service,
    post_service,
    ppa_service,
    profile_cache,
    reminder_service,
    user_service,
)

SINGLETONS = [
    (identity_service, "_identity_service"),
    (profile_cache, "_profile_cache"),
    (user_service, "_user_service"),
    (post_service, "_post_service"),
    (reminder_service, "_reminder_service"),
    (ppa_service, "_ppa_service"),
]


@pytest.fixture(autouse=True)
def fresh_backends(monkeypatch):
    """Every test gets an empty document store and identity provider."""
    firebase.reset_db()
    for module, attr in SINGLETONS:
        monkeypatch.setattr(module, attr, None)
    yield
    if profile_cache._profile_cache is not None:
        profile_cache._profile_cache.clear()
    firebase.reset_db()


@pytest.fixture
def db():
    return firebase.get_db()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def register(client):
    """Sign up and sign in a user; returns (headers, uid, token)."""

    def _register(email="ada@example.com", password="s3cret-pass", state_code="LA/23A/1234", batch="2023 Batch A"):
        resp = client.post("/auth/signup", json={
            "email": email,
            "password": password,
            "confirm_password": password,
            "state_code": state_code,
            "batch": batch,
        })
        assert resp.status_code == 201, resp.text

        resp = client.post("/auth/signin", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["uid"], body["token"]

    return _register


@pytest.fixture
def auth_headers(register):
    headers, _, _ = register()
    return headers
