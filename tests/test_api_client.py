"""
Unit tests for the HTTP client wrapper.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from infomed.api_client import (
    APIClient,
    APIError,
    MalformedResponseError,
    NetworkError,
    RemoteError,
    SessionExpiredError,
    unwrap,
)
from infomed.storage import ADMIN_KEY, TOKEN_KEY

from tests.conftest import BASE_URL, TOKEN, make_response


class TestHeaders:
    """Bearer token injection."""

    def test_attaches_bearer_token_when_persisted(self, mock_request, logged_in_store):
        """A persisted token goes into the Authorization header."""
        mock_request.return_value = make_response(200, {"success": True})
        api = APIClient(BASE_URL, logged_in_store)

        api.get("info")

        headers = mock_request.call_args.kwargs["headers"]
        assert headers["Authorization"] == f"Bearer {TOKEN}"
        assert headers["Content-Type"] == "application/json"

    def test_omits_authorization_without_token(self, mock_request, api):
        """Without a token the header is absent."""
        mock_request.return_value = make_response(200, {"success": True})

        api.get("info")

        assert "Authorization" not in mock_request.call_args.kwargs["headers"]

    def test_builds_url_from_base(self, mock_request, api):
        """Endpoints are joined to the base URL with a single slash."""
        mock_request.return_value = make_response(200, {})

        api.get("/auth/me")

        assert mock_request.call_args.kwargs["url"] == f"{BASE_URL}/auth/me"
        assert mock_request.call_args.kwargs["timeout"] == APIClient.DEFAULT_TIMEOUT


class TestSuccessfulResponses:
    """Body unwrapping on 2xx."""

    def test_returns_parsed_body(self, mock_request, api):
        body = {"success": True, "data": {"infoRecords": []}}
        mock_request.return_value = make_response(200, body)

        assert api.get("info") == body

    def test_no_content_returns_empty_dict(self, mock_request, api):
        mock_request.return_value = make_response(204)

        assert api.delete("info/1") == {}

    def test_non_json_body_is_malformed(self, mock_request, api):
        mock_request.return_value = make_response(200, text="<html>proxy page</html>")

        with pytest.raises(MalformedResponseError):
            api.get("info")

    def test_json_array_body_is_malformed(self, mock_request, api):
        mock_request.return_value = make_response(200, [1, 2, 3])

        with pytest.raises(MalformedResponseError):
            api.get("info")


class TestErrorNormalization:
    """Every failure becomes an APIError with {message, status, errors}."""

    def test_remote_error_uses_server_message(self, mock_request, api):
        """Non-2xx carries the server message and field errors."""
        mock_request.return_value = make_response(
            400,
            {"success": False, "message": "Validation failed", "errors": [{"field": "price"}]},
        )

        with pytest.raises(RemoteError) as exc_info:
            api.post("info", json={})

        assert exc_info.value.to_dict() == {
            "message": "Validation failed",
            "status": 400,
            "errors": [{"field": "price"}],
        }

    def test_remote_error_with_text_body(self, mock_request, api):
        mock_request.return_value = make_response(500, text="upstream exploded")

        with pytest.raises(RemoteError) as exc_info:
            api.get("info")

        assert exc_info.value.message == "upstream exploded"
        assert exc_info.value.status_code == 500

    def test_remote_error_without_message_falls_back_to_reason(self, mock_request, api):
        mock_request.return_value = make_response(404, {"success": False})

        with pytest.raises(RemoteError) as exc_info:
            api.get("info/view/missing")

        assert exc_info.value.message == "Not Found"

    def test_connection_error_is_network_error(self, mock_request, api):
        mock_request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(NetworkError) as exc_info:
            api.get("info")

        assert exc_info.value.status_code is None
        assert "connect" in exc_info.value.message

    def test_timeout_is_network_error(self, mock_request, api):
        mock_request.side_effect = requests.exceptions.Timeout()

        with pytest.raises(NetworkError) as exc_info:
            api.get("info")

        assert exc_info.value.message == "Request timed out"
        assert mock_request.call_count == 1

    def test_all_errors_share_base_class(self):
        for cls in (NetworkError, RemoteError, SessionExpiredError, MalformedResponseError):
            assert issubclass(cls, APIError)


class TestSessionExpiry:
    """401 handling is a cross-cutting policy of the client."""

    def test_401_clears_credentials_and_notifies(self, mock_request, logged_in_store, storage):
        mock_request.return_value = make_response(401, {"success": False, "message": "Token expired"})
        api = APIClient(BASE_URL, logged_in_store)
        listener = MagicMock()
        api.subscribe(listener)

        with pytest.raises(SessionExpiredError) as exc_info:
            api.get("info")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Token expired"
        assert TOKEN_KEY not in storage.data
        assert ADMIN_KEY not in storage.data
        listener.assert_called_once_with(exc_info.value)

    def test_401_clears_exactly_once(self, mock_request, logged_in_store):
        mock_request.return_value = make_response(401, {"message": "nope"})
        api = APIClient(BASE_URL, logged_in_store)

        with patch.object(logged_in_store, "clear", wraps=logged_in_store.clear) as spy:
            with pytest.raises(SessionExpiredError):
                api.patch("info/1/toggle")

        spy.assert_called_once()

    def test_unsubscribed_listener_is_not_called(self, mock_request, api):
        mock_request.return_value = make_response(401, {"message": "nope"})
        listener = MagicMock()
        api.subscribe(listener)
        api.unsubscribe(listener)

        with pytest.raises(SessionExpiredError):
            api.get("auth/me")

        listener.assert_not_called()

    def test_subscribe_is_idempotent(self, mock_request, api):
        mock_request.return_value = make_response(401, {"message": "nope"})
        listener = MagicMock()
        api.subscribe(listener)
        api.subscribe(listener)

        with pytest.raises(SessionExpiredError):
            api.get("auth/me")

        assert listener.call_count == 1


class TestRetries:
    """Retries are off by default and opt-in via settings."""

    def test_no_retry_by_default(self, mock_request, api):
        mock_request.return_value = make_response(503, {"message": "busy"})

        with pytest.raises(RemoteError):
            api.get("info")

        assert mock_request.call_count == 1

    def test_retries_transient_status(self, mock_request, store):
        mock_request.side_effect = [
            make_response(503, {"message": "busy"}),
            make_response(200, {"success": True}),
        ]
        api = APIClient(BASE_URL, store, retries=1, retry_delay=0)

        with patch("infomed.api_client.time.sleep"):
            assert api.get("info") == {"success": True}

        assert mock_request.call_count == 2


class TestEndpoints:
    """Endpoint groups map onto the remote contract."""

    def test_list_records_sends_pagination(self, mock_request, api):
        mock_request.return_value = make_response(200, {"success": True})

        api.info.list(page=2, limit=10)

        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == f"{BASE_URL}/info"
        assert kwargs["params"] == {"page": 2, "limit": 10}

    @pytest.mark.parametrize(
        "call, method, path",
        [
            (lambda api: api.info.toggle("r1"), "PATCH", "info/r1/toggle"),
            (lambda api: api.info.delete("r1"), "DELETE", "info/r1"),
            (lambda api: api.info.update("r1", {"price": "2"}), "PUT", "info/r1"),
            (lambda api: api.info.get_by_unique_id("u1"), "GET", "info/view/u1"),
            (lambda api: api.auth.me(), "GET", "auth/me"),
            (lambda api: api.translation.languages(), "GET", "translate/languages"),
            (lambda api: api.health(), "GET", "health"),
        ],
    )
    def test_method_and_path(self, mock_request, api, call, method, path):
        mock_request.return_value = make_response(200, {})

        call(api)

        assert mock_request.call_args.kwargs["method"] == method
        assert mock_request.call_args.kwargs["url"] == f"{BASE_URL}/{path}"

    def test_translate_batch_payload(self, mock_request, api):
        mock_request.return_value = make_response(200, {"success": True})

        api.translation.translate_batch(["Take twice daily"], "fr")

        assert mock_request.call_args.kwargs["json"] == {
            "texts": ["Take twice daily"],
            "targetLang": "fr",
        }


class TestUnwrap:
    """Envelope handling."""

    def test_returns_data(self):
        assert unwrap({"success": True, "data": {"admin": {}}}) == {"admin": {}}

    def test_body_without_envelope_is_returned(self):
        assert unwrap({"admin": {}, "token": "t"}) == {"admin": {}, "token": "t"}

    def test_success_false_raises_with_message(self):
        with pytest.raises(RemoteError) as exc_info:
            unwrap({"success": False, "message": "Invalid credentials"})

        assert exc_info.value.message == "Invalid credentials"
