"""Client for the backend API endpoints the portal depends on."""
import logging
from typing import Any, Optional

import requests
from django.conf import settings

from portal.platform.rbac.types import PermissionSet, PermissionSnapshot

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The backend could not be reached or answered with an unusable payload."""


class BackendAuthenticationError(BackendError):
    """The backend rejected the supplied credentials."""


class BackendClient:
    LOGIN_PATH = "/api/login"
    MY_PERMISSIONS_PATH = "/api/rbac/my-permissions"
    CHECK_PERMISSION_PATH = "/api/rbac/check-permission"

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None, session=None):
        rbac_settings = getattr(settings, "RBAC", {})
        self.base_url = (base_url or rbac_settings.get("API_BASE_URL", "")).rstrip("/")
        self.timeout = timeout if timeout is not None else rbac_settings.get("API_TIMEOUT", 10)
        self.http = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _auth_headers(token: str) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return self.http.request(method, self._url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise BackendError(f"{method} {path} failed: {exc}") from exc

    @staticmethod
    def _json(response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(f"{path} returned a non-JSON body") from exc

    # -------------------------------------------------------
    # Auth
    # -------------------------------------------------------
    def login(self, email: str, password: str) -> str:
        """Exchange credentials for an access token."""
        response = self._request("POST", self.LOGIN_PATH, json={"email": email, "password": password})

        if response.status_code in (400, 401):
            raise BackendAuthenticationError("Invalid credentials")
        if response.status_code != 200:
            raise BackendError(f"Login failed with HTTP {response.status_code}")

        payload = self._json(response, self.LOGIN_PATH)
        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            raise BackendError("Login response did not include a token")
        return token

    # -------------------------------------------------------
    # RBAC
    # -------------------------------------------------------
    def fetch_my_permissions(self, token: str) -> PermissionSnapshot:
        response = self._request("GET", self.MY_PERMISSIONS_PATH, headers=self._auth_headers(token))
        if response.status_code != 200:
            raise BackendError(f"Permission fetch failed with HTTP {response.status_code}")

        payload = self._json(response, self.MY_PERMISSIONS_PATH)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise BackendError("Invalid response format")

        return PermissionSnapshot(
            permissions=PermissionSet.from_tokens(data.get("permissions") or []),
            role=data.get("role") or "",
        )

    def check_permission(self, token: str, resource: str, action: str) -> bool:
        """Authoritative server-side check. Any failure evaluates to False."""
        try:
            response = self._request(
                "POST",
                self.CHECK_PERMISSION_PATH,
                json={"resource": resource, "action": action},
                headers=self._auth_headers(token),
            )
            if response.status_code != 200:
                logger.warning(f"Backend permission check returned HTTP {response.status_code}")
                return False
            payload = self._json(response, self.CHECK_PERMISSION_PATH)
        except BackendError as exc:
            logger.warning(f"Backend permission check failed: {exc}")
            return False

        data = payload.get("data") if isinstance(payload, dict) else None
        return bool(isinstance(data, dict) and data.get("has_permission"))
