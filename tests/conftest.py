"""Shared fixtures: in-memory database, fake Genuka API, test client."""

from __future__ import annotations

import json
import os
import time
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs

# Must be set before any genuka_auth import (settings are read at import time)
os.environ["APP_ENV"] = "testing"
os.environ["APP_KEY"] = "test-app-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["GENUKA_URL"] = "https://genuka.test"
os.environ["GENUKA_CLIENT_ID"] = "test-client-id"
os.environ["GENUKA_CLIENT_SECRET"] = "test-client-secret"
os.environ["GENUKA_REDIRECT_URI"] = "http://testserver/auth/callback"
os.environ["GENUKA_DEFAULT_REDIRECT"] = "/"
os.environ["GENUKA_ENCRYPT_TOKENS"] = "true"
os.environ["CALLBACK_FAILURE_MODE"] = "raise"

import httpx
import pytest
from fastapi.testclient import TestClient

from genuka_auth.api.deps import get_genuka_client
from genuka_auth.core import signatures
from genuka_auth.core.config import settings
from genuka_auth.db.base import Base
from genuka_auth.db.session import SessionLocal, engine
from genuka_auth.main import api
from genuka_auth.services.genuka import GenukaClient
from genuka_auth.services.session import SessionService

SECRET = "test-client-secret"
COMPANY_ID = "01JD0000000000000000000C1"
REDIRECT_TO_ENCODED = "https%3A%2F%2Fapp.example.com%2Fdashboard"


class FakeGenuka:
    """In-process stand-in for the Genuka API, mounted on httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.used_codes: set[str] = set()
        self.token_status = 200
        self.token_body: Dict[str, Any] = {
            "access_token": "access-1",
            "refresh_token": "refresh-1",
            "expires_in_minutes": 120,
        }
        self.company_status = 200
        self.company_body: Dict[str, Any] = {
            "id": COMPANY_ID,
            "name": "Boutique C1",
            "handle": "boutique-c1",
            "description": "Vêtements",
            "logoUrl": "https://cdn.genuka.test/logo.png",
            "metadata": {"contact": "+237600000000"},
        }
        self.refresh_status = 200
        self.refresh_body: Dict[str, Any] = {
            "access_token": "access-2",
            "refresh_token": "refresh-2",
            "expires_in_minutes": 60,
        }

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/oauth/token":
            form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            code = form.get("code", "")
            if code in self.used_codes:
                return httpx.Response(400, json={"error": "invalid_grant"})
            self.used_codes.add(code)
            return httpx.Response(self.token_status, json=self.token_body)
        if path == "/oauth/refresh":
            return httpx.Response(self.refresh_status, json=self.refresh_body)
        if path == f"/{settings.GENUKA_API_VERSION}/admin/company":
            return httpx.Response(self.company_status, json=self.company_body)
        return httpx.Response(404, json={"error": "not found"})


def signed_query(
    code: str = "abc",
    company_id: str = COMPANY_ID,
    redirect_to: str = REDIRECT_TO_ENCODED,
    timestamp: Optional[int] = None,
    secret: str = SECRET,
) -> Dict[str, str]:
    params = {
        "code": code,
        "company_id": company_id,
        "redirect_to": redirect_to,
        "timestamp": str(int(time.time()) if timestamp is None else timestamp),
    }
    params["hmac"] = signatures.sign(params, secret)
    return params


def webhook_body(event: Dict[str, Any]) -> bytes:
    return json.dumps(event).encode()


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_genuka() -> FakeGenuka:
    return FakeGenuka()


@pytest.fixture
def genuka_client(fake_genuka: FakeGenuka):
    http = httpx.Client(transport=httpx.MockTransport(fake_genuka))
    client = GenukaClient(settings, http=http)
    yield client
    http.close()


@pytest.fixture
def sessions() -> SessionService:
    return SessionService(settings)


@pytest.fixture
def client(genuka_client: GenukaClient):
    api.dependency_overrides[get_genuka_client] = lambda: genuka_client
    with_client = TestClient(api, follow_redirects=False)
    yield with_client
    with_client.close()
    api.dependency_overrides.clear()
