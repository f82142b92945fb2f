"""Shared pytest fixtures."""

import os

# Settings are read at import time; these must be in place first.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:6379/15")
os.environ.setdefault("ALLOWED_ORIGIN", "http://localhost:3000")
os.environ.setdefault("RATE_LIMIT_TIMES", "100")
os.environ.setdefault("RATE_LIMIT_SECONDS", "60")
os.environ.setdefault("MAX_FILE_MB", "1")
os.environ.setdefault("TRUST_PROXY", "false")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("ADMIN_PASSWORD", "s3cret")
os.environ.setdefault("PRIVATE_ACCESS_PASSWORD", "letmein")

import pytest  # noqa: E402

from tests.fakes import (  # noqa: E402
    FakeAnalyticsStore,
    FakeBlobStore,
    FakeRecordStore,
    FakeSessionStore,
)


@pytest.fixture
def records() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def blobs() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def sessions() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def analytics() -> FakeAnalyticsStore:
    return FakeAnalyticsStore()


@pytest.fixture
def client(records, blobs, sessions, analytics):
    """TestClient over the real app with in-memory stores and no rate limit.

    The client is not entered as a context manager, so the Redis lifespan
    never runs.
    """
    from fastapi.testclient import TestClient

    from controller import controller_dependencies as deps
    from main import app

    async def _no_limit() -> None:
        return None

    app.dependency_overrides[deps.get_records] = lambda: records
    app.dependency_overrides[deps.get_blobs] = lambda: blobs
    app.dependency_overrides[deps.get_sessions] = lambda: sessions
    app.dependency_overrides[deps.get_analytics_store] = lambda: analytics
    app.dependency_overrides[deps.rate_limiter] = _no_limit
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    resp = client.post(
        "/api/v1/admin/auth/login",
        json={"email": "admin@example.com", "password": "s3cret"},
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}
