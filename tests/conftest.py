"""
Shared fixtures for the tests.

No test touches the network: ``requests.request`` is patched and responses
are built as real ``requests.Response`` objects.
"""

import json
from typing import Any, Optional
from unittest.mock import patch

import pytest
import requests

from infomed.api_client import APIClient
from infomed.schemas import AdminProfile
from infomed.storage import CredentialStore, MemoryStorage

BASE_URL = "http://api.test/api"

ADMIN_DATA = {"_id": "64f0c0ffee", "name": "Alice Admin", "email": "alice@example.com"}
TOKEN = "jwt-token-123"

REASONS = {
    200: "OK",
    201: "Created",
    204: "No Content",
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def make_response(status_code: int = 200, body: Any = None, text: Optional[str] = None) -> requests.Response:
    """Build a requests.Response with a JSON body, a raw text body or none."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = REASONS.get(status_code, "")
    response.url = BASE_URL
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = b""
    response.encoding = "utf-8"
    return response


def auth_envelope(admin: Optional[dict] = None, token: Optional[str] = TOKEN) -> dict:
    """Body of a successful login/signup."""
    data = {}
    if admin is not None:
        data["admin"] = admin
    if token is not None:
        data["token"] = token
    return {"success": True, "data": data}


# ==========================================
# Storage fixtures
# ==========================================

@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage) -> CredentialStore:
    return CredentialStore(storage)


@pytest.fixture
def logged_in_store(store) -> CredentialStore:
    """Credential store holding a persisted session."""
    store.save(TOKEN, AdminProfile.model_validate(ADMIN_DATA))
    return store


# ==========================================
# HTTP fixtures
# ==========================================

@pytest.fixture
def mock_request():
    """Patch the HTTP layer; set return_value/side_effect per test."""
    with patch("infomed.api_client.requests.request") as mocked:
        yield mocked


@pytest.fixture
def api(store) -> APIClient:
    return APIClient(BASE_URL, store)
