"""
Pytest fixtures for the offline order backend.

Provides environment setup, an in-memory database, a fake Cafe24 API and the
FastAPI test client.
"""

import os

# Configuration is read at import time, so set it before importing the package
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CAFE24_MALLID"] = "testmall"
os.environ["CAFE24_CLIENT_ID"] = "client-id"
os.environ["CAFE24_CLIENT_SECRET"] = "client-secret"
os.environ["CAFE24_ACCESS_TOKEN"] = "access-0"
os.environ["CAFE24_REFRESH_TOKEN"] = "refresh-0"
os.environ["ADMIN_API_KEY"] = "admin-secret"
os.environ["REFERENCE_STORAGE"] = "db"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.pop("TOKEN_ENCRYPTION_KEY", None)

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from offline_orders.database import SessionLocal, create_tables, init_engine  # noqa: E402
from offline_orders.main import app  # noqa: E402

TOKEN_URL = "https://testmall.cafe24api.com/api/v2/oauth/token"


@pytest.fixture(scope="function")
def session_factory():
    """Fresh in-memory database per test"""
    init_engine("sqlite://")
    create_tables()
    return SessionLocal


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture(scope="function")
def client():
    """Test client with the full startup sequence (config check, tables, tokens, seeding)"""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class FakeCafe24:
    """
    Scripted Cafe24 API. `api_responses` is consumed one per admin API call;
    every OAuth token request is answered by `token_response`.
    """

    def __init__(self, api_responses=None, token_response=None):
        self.api_responses = list(api_responses or [])
        self.token_response = token_response or httpx.Response(
            200, json={"access_token": "access-1", "refresh_token": "refresh-1"}
        )
        self.api_calls = []
        self.token_calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if str(request.url).startswith(TOKEN_URL):
            self.token_calls.append(request)
            return self.token_response
        self.api_calls.append(request)
        if not self.api_responses:
            raise AssertionError(f"Unexpected Cafe24 call: {request.method} {request.url}")
        return self.api_responses.pop(0)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def fake_cafe24():
    return FakeCafe24
