from unittest import mock

import pytest
import requests

from portal.core.services.backend import (
    BackendAuthenticationError,
    BackendClient,
    BackendError,
)


def http_response(status_code=200, payload=None, json_error=False):
    response = mock.Mock(spec=requests.Response)
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def http():
    return mock.Mock(spec=requests.Session)


@pytest.fixture
def backend(http):
    return BackendClient(base_url="http://backend.test/", timeout=3, session=http)


def test_defaults_come_from_settings():
    default = BackendClient(session=mock.Mock())
    assert default.base_url == "http://backend.test"
    assert default.timeout == 5.0


class TestLogin:
    def test_returns_token(self, backend, http):
        http.request.return_value = http_response(200, {"token": "abc"})

        assert backend.login("admin@example.org", "secret") == "abc"
        http.request.assert_called_once_with(
            "POST",
            "http://backend.test/api/login",
            timeout=3,
            json={"email": "admin@example.org", "password": "secret"},
        )

    @pytest.mark.parametrize("status_code", [400, 401])
    def test_rejected_credentials(self, backend, http, status_code):
        http.request.return_value = http_response(status_code, {"message": "Invalid credentials"})
        with pytest.raises(BackendAuthenticationError):
            backend.login("admin@example.org", "wrong")

    def test_server_error(self, backend, http):
        http.request.return_value = http_response(503, {})
        with pytest.raises(BackendError) as excinfo:
            backend.login("admin@example.org", "secret")
        assert not isinstance(excinfo.value, BackendAuthenticationError)

    @pytest.mark.parametrize("payload", [["x"], "token", None])
    def test_non_object_body(self, backend, http, payload):
        http.request.return_value = http_response(200, payload)
        with pytest.raises(BackendError, match="did not include a token"):
            backend.login("admin@example.org", "secret")

    def test_missing_token(self, backend, http):
        http.request.return_value = http_response(200, {"user": {}})
        with pytest.raises(BackendError):
            backend.login("admin@example.org", "secret")

    def test_connection_error(self, backend, http):
        http.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(BackendError):
            backend.login("admin@example.org", "secret")


class TestFetchMyPermissions:
    def test_parses_envelope(self, backend, http):
        http.request.return_value = http_response(200, {
            "data": {"permissions": ["branches:read", "events:manage", "bogus:thing"], "role": "coordinator"}
        })

        snapshot = backend.fetch_my_permissions("tok")

        assert snapshot.role == "coordinator"
        assert snapshot.permissions.tokens() == ["branches:read", "events:manage"]
        _, kwargs = http.request.call_args
        assert kwargs["headers"]["Authorization"] == "Bearer tok"

    @pytest.mark.parametrize("payload", [{}, {"data": None}, {"data": []}, ["branches:read"]])
    def test_invalid_format(self, backend, http, payload):
        http.request.return_value = http_response(200, payload)
        with pytest.raises(BackendError, match="Invalid response format"):
            backend.fetch_my_permissions("tok")

    def test_http_error(self, backend, http):
        http.request.return_value = http_response(401, {})
        with pytest.raises(BackendError):
            backend.fetch_my_permissions("tok")

    def test_non_json_body(self, backend, http):
        http.request.return_value = http_response(200, json_error=True)
        with pytest.raises(BackendError):
            backend.fetch_my_permissions("tok")

    def test_missing_permissions_key(self, backend, http):
        http.request.return_value = http_response(200, {"data": {"role": "staff"}})
        snapshot = backend.fetch_my_permissions("tok")
        assert not snapshot.permissions
        assert snapshot.role == "staff"


class TestCheckPermission:
    def test_granted(self, backend, http):
        http.request.return_value = http_response(200, {"data": {"has_permission": True}})
        assert backend.check_permission("tok", "events", "read") is True
        _, kwargs = http.request.call_args
        assert kwargs["json"] == {"resource": "events", "action": "read"}

    def test_denied(self, backend, http):
        http.request.return_value = http_response(200, {"data": {"has_permission": False}})
        assert backend.check_permission("tok", "events", "read") is False

    @pytest.mark.parametrize("response", [
        http_response(500, {}),
        http_response(200, {"unexpected": True}),
        http_response(200, json_error=True),
    ])
    def test_failures_evaluate_to_false(self, backend, http, response):
        http.request.return_value = response
        assert backend.check_permission("tok", "events", "read") is False

    def test_network_failure_evaluates_to_false(self, backend, http):
        http.request.side_effect = requests.Timeout("slow")
        assert backend.check_permission("tok", "events", "read") is False
