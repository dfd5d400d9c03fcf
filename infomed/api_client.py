"""
API Client wrapper for the InfoMed API.

Provides a unified interface for making HTTP requests to the backend
with uniform error handling and bearer token management. A 401 from any
call is raised as a session-level event that subscribers can react to.
"""

import time
from typing import Any, Callable, Optional

import requests

from infomed.core.logging import get_logger
from infomed.storage import CredentialStore

logger = get_logger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong"


class APIError(Exception):
    """Base exception for API errors, normalized to {message, status, errors}."""

    def __init__(self, message: str, status_code: Optional[int] = None, errors: Any = None):
        self.message = message
        self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Uniform error shape."""
        data = {"message": self.message, "status": self.status_code}
        if self.errors is not None:
            data["errors"] = self.errors
        return data


class NetworkError(APIError):
    """No response was received (connection refused, timeout, DNS)."""


class RemoteError(APIError):
    """The server answered with a non-2xx status."""


class SessionExpiredError(RemoteError):
    """The server answered 401: the persisted session is no longer valid."""

    def __init__(self, message: str = "Session expired. Please log in again.", errors: Any = None):
        super().__init__(message, 401, errors)


class MalformedResponseError(APIError):
    """The server answered 2xx but the body is missing what the caller needs."""


SessionExpiredListener = Callable[[SessionExpiredError], None]


def _error_message(response: requests.Response) -> tuple[str, Any]:
    """Extract the server-provided message and field errors from a failed response."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason or f"HTTP error {response.status_code}", None

    if not isinstance(data, dict):
        return str(data), None

    message = data.get("message") or data.get("detail") or data.get("error")
    if isinstance(message, list):
        message = "; ".join(e.get("msg", str(e)) if isinstance(e, dict) else str(e) for e in message)
    return str(message or response.reason or DEFAULT_ERROR_MESSAGE), data.get("errors")


class APIClient:
    """
    HTTP client for the InfoMed API.

    Features:
        - Bearer token injection from the persisted credential store
        - Body unwrapping on success
        - Failures normalized into the APIError hierarchy
        - 401 handling: credentials cleared once, subscribers notified
        - Optional retries for transient errors (502, 503, timeouts)
    """

    DEFAULT_TIMEOUT = 10
    RETRY_STATUSES = (502, 503)

    def __init__(
        self,
        base_url: str,
        store: CredentialStore,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = 0,
        retry_delay: float = 0.5,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL for the API, including the /api prefix
            store: Credential store the bearer token is read from
            timeout: Seconds before a request is abandoned
            retries: Extra attempts for 502/503 and timeouts
            retry_delay: Base delay between attempts
        """
        self.base_url = base_url.rstrip("/")
        self.store = store
        self.timeout = timeout
        self.retries = retries
        self.retry_delay = retry_delay
        self._listeners: list[SessionExpiredListener] = []

        self.auth = AuthAPI(self)
        self.info = InfoAPI(self)
        self.translation = TranslationAPI(self)

    def subscribe(self, listener: SessionExpiredListener) -> None:
        """Register a callback for the session-expired signal."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SessionExpiredListener) -> None:
        """Remove a previously registered callback."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _get_url(self, endpoint: str) -> str:
        """Build full URL for an endpoint."""
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _get_headers(self) -> dict:
        """Build request headers."""
        headers = {"Content-Type": "application/json"}
        token = self.store.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _expire_session(self, error: SessionExpiredError) -> None:
        self.store.clear()
        logger.warning("Session rejected by the API (401); credentials cleared")
        for listener in list(self._listeners):
            listener(error)

    def _handle_response(self, response: requests.Response) -> dict:
        """
        Process API response and handle errors.

        Raises:
            SessionExpiredError: For 401 responses
            RemoteError: For other non-2xx responses
            MalformedResponseError: For 2xx responses without a JSON object
        """
        if response.status_code == 401:
            message, errors = _error_message(response)
            error = SessionExpiredError(message, errors)
            self._expire_session(error)
            raise error

        if response.status_code >= 400:
            message, errors = _error_message(response)
            raise RemoteError(message, response.status_code, errors)

        if response.status_code == 204 or not response.content:
            return {}

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                "Invalid response from server", response.status_code
            ) from e

        if not isinstance(data, dict):
            raise MalformedResponseError("Invalid response from server", response.status_code)
        return data

    def _request(self, method: str, endpoint: str, **kwargs) -> dict:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint relative to the base URL
            **kwargs: Additional arguments for requests

        Returns:
            Parsed JSON body

        Raises:
            APIError: For every failure
        """
        url = self._get_url(endpoint)
        headers = self._get_headers()
        kwargs.setdefault("timeout", self.timeout)

        last_error: Optional[APIError] = None
        for attempt in range(self.retries + 1):
            try:
                response = requests.request(
                    method=method,
                    url=url,
                    headers=headers,
                    **kwargs,
                )
            except requests.exceptions.Timeout:
                last_error = NetworkError("Request timed out")
                if attempt < self.retries:
                    time.sleep(self.retry_delay)
                    continue
                break
            except requests.exceptions.RequestException as e:
                logger.warning(f"{method} {url} failed: {e}")
                last_error = NetworkError(
                    "Could not connect to the server. Check that the backend is running."
                )
                break

            if response.status_code in self.RETRY_STATUSES and attempt < self.retries:
                time.sleep(self.retry_delay * (attempt + 1))
                continue

            logger.debug(f"{method} {url} -> {response.status_code}")
            return self._handle_response(response)

        raise last_error

    def get(self, endpoint: str, params: Optional[dict] = None, **kwargs) -> dict:
        """Make a GET request."""
        return self._request("GET", endpoint, params=params, **kwargs)

    def post(self, endpoint: str, json: Optional[dict] = None, **kwargs) -> dict:
        """Make a POST request."""
        return self._request("POST", endpoint, json=json, **kwargs)

    def patch(self, endpoint: str, json: Optional[dict] = None, **kwargs) -> dict:
        """Make a PATCH request."""
        return self._request("PATCH", endpoint, json=json, **kwargs)

    def put(self, endpoint: str, json: Optional[dict] = None, **kwargs) -> dict:
        """Make a PUT request."""
        return self._request("PUT", endpoint, json=json, **kwargs)

    def delete(self, endpoint: str, **kwargs) -> dict:
        """Make a DELETE request."""
        return self._request("DELETE", endpoint, **kwargs)

    def health(self) -> dict:
        """Check the API health endpoint."""
        return self.get("health")


class AuthAPI:
    """Admin authentication endpoints."""

    def __init__(self, client: APIClient):
        self.client = client

    def signup(self, data: dict) -> dict:
        return self.client.post("auth/signup", json=data)

    def login(self, data: dict) -> dict:
        return self.client.post("auth/login", json=data)

    def me(self) -> dict:
        return self.client.get("auth/me")


class InfoAPI:
    """Medicine information record endpoints."""

    def __init__(self, client: APIClient):
        self.client = client

    def create(self, data: dict) -> dict:
        return self.client.post("info", json=data)

    def list(self, page: int = 1, limit: int = 10) -> dict:
        return self.client.get("info", params={"page": page, "limit": limit})

    def get_by_unique_id(self, unique_id: str) -> dict:
        return self.client.get(f"info/view/{unique_id}")

    def update(self, record_id: str, data: dict) -> dict:
        return self.client.put(f"info/{record_id}", json=data)

    def toggle(self, record_id: str) -> dict:
        return self.client.patch(f"info/{record_id}/toggle")

    def delete(self, record_id: str) -> dict:
        return self.client.delete(f"info/{record_id}")


class TranslationAPI:
    """Machine translation endpoints."""

    def __init__(self, client: APIClient):
        self.client = client

    def translate(self, data: dict) -> dict:
        return self.client.post("translate", json=data)

    def translate_batch(self, texts: list[str], target_lang: str) -> dict:
        return self.client.post("translate/batch", json={"texts": texts, "targetLang": target_lang})

    def languages(self) -> dict:
        return self.client.get("translate/languages")


def unwrap(body: dict) -> dict:
    """
    Return the payload of a ``{success, data, message}`` envelope.

    Raises:
        RemoteError: When the envelope reports ``success: false``
    """
    if body.get("success") is False:
        raise RemoteError(body.get("message") or DEFAULT_ERROR_MESSAGE, None, body.get("errors"))
    data = body.get("data")
    return data if isinstance(data, dict) else body
