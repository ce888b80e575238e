"""
Session storage for the backend-issued token and the permission snapshot.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from django.conf import settings
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError

from portal.core.services.backend import BackendError
from portal.platform.rbac.service import RoleService
from portal.platform.rbac.types import PermissionSnapshot

logger = logging.getLogger(__name__)


def get_token_backend() -> TokenBackend:
    jwt_settings = getattr(settings, "SIMPLE_JWT", {})
    return TokenBackend(
        jwt_settings.get("ALGORITHM", "HS256"),
        signing_key=jwt_settings.get("SIGNING_KEY", settings.SECRET_KEY),
        leeway=jwt_settings.get("LEEWAY", 0),
    )


class SessionStore:
    """Wraps ``request.session``; the only writer of auth/RBAC session keys."""

    TOKEN_KEY = "auth_token"
    SNAPSHOT_KEY = "rbac_snapshot"

    def __init__(self, session):
        self.session = session

    # -------------------------------------------------------
    # Token
    # -------------------------------------------------------
    def get_token(self) -> Optional[str]:
        return self.session.get(self.TOKEN_KEY)

    def store_token(self, token: str) -> None:
        self.session[self.TOKEN_KEY] = token

    def verified_claims(self) -> Optional[Dict[str, Any]]:
        """Claims of the stored token, or None when it is absent or fails verification."""
        token = self.get_token()
        if not token:
            return None
        try:
            return get_token_backend().decode(token, verify=True)
        except TokenBackendError as exc:
            logger.debug(f"Stored token rejected: {exc}")
            return None

    def token_claims(self) -> Dict[str, Any]:
        return self.verified_claims() or {}

    def is_session_valid(self) -> bool:
        """A token is stored, its signature checks out and it has not expired."""
        return self.verified_claims() is not None

    def invalidate(self) -> bool:
        """
        Drop a stored token that no longer verifies, together with the
        permission snapshot. Returns True when the session was cleared.
        """
        if self.get_token() is None or self.is_session_valid():
            return False
        logger.info("Stored token is expired or invalid; clearing the session")
        self.clear()
        return True

    # -------------------------------------------------------
    # Permission snapshot
    # -------------------------------------------------------
    def load_snapshot(self) -> PermissionSnapshot:
        return PermissionSnapshot.from_session(self.session.get(self.SNAPSHOT_KEY))

    def store_snapshot(self, snapshot: PermissionSnapshot) -> None:
        self.session[self.SNAPSHOT_KEY] = snapshot.to_session()

    def role_service(self) -> RoleService:
        return RoleService(self.load_snapshot())

    def clear(self) -> None:
        self.session.flush()


def invalidate_session(request) -> bool:
    """
    Clear a session whose stored token no longer verifies, and the
    request's RoleService with it.
    """
    if not SessionStore(request.session).invalidate():
        return False
    role_service = getattr(request, "role_service", None)
    if role_service is not None:
        role_service.clear()
    return True


def sync_permissions(request, client) -> PermissionSnapshot:
    """
    Fetch the principal's permissions from the backend and replace the
    cached snapshot wholesale.

    A failed fetch leaves an empty permission set (every check denies);
    the role then comes from the token claims alone.
    """
    store = SessionStore(request.session)
    claims = store.token_claims()

    try:
        snapshot = client.fetch_my_permissions(store.get_token())
    except BackendError as exc:
        logger.warning(f"Permission fetch failed, continuing with an empty permission set: {exc}")
        snapshot = PermissionSnapshot.empty()

    snapshot = replace(
        snapshot,
        role=snapshot.role or claims.get("role_name") or "",
        role_id=claims.get("role_id"),
    )
    store.store_snapshot(snapshot)
    request.role_service.replace(snapshot)
    return snapshot
