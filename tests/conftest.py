import time

import pytest
from rest_framework_simplejwt.backends import TokenBackend

from portal.platform.accounts.session import SessionStore
from portal.platform.rbac.service import RoleService
from portal.platform.rbac.types import PermissionSet, PermissionSnapshot

SIGNING_KEY = "test-jwt-signing-key-for-the-portal-suite"


def snapshot_of(*tokens, role="", role_id=None):
    return PermissionSnapshot(PermissionSet.from_tokens(tokens), role=role, role_id=role_id)


@pytest.fixture
def make_token():
    """Issue a backend-style access token signed with the test key."""
    def _make(lifetime=3600, signing_key=SIGNING_KEY, **claims):
        payload = {
            "user_id": 7,
            "role_name": "admin",
            "role_id": 2,
            "exp": int(time.time()) + lifetime,
        }
        payload.update(claims)
        return TokenBackend("HS256", signing_key=signing_key).encode(payload)
    return _make


@pytest.fixture
def role_service():
    def _build(*tokens, role=""):
        return RoleService(snapshot_of(*tokens, role=role))
    return _build


@pytest.fixture
def sign_in(client, make_token):
    """
    Put a valid token and a permission snapshot in the test client's
    session, as a completed login would.
    """
    def _sign_in(*tokens, role="admin", token=None):
        session = client.session
        session[SessionStore.TOKEN_KEY] = token or make_token(role_name=role)
        session[SessionStore.SNAPSHOT_KEY] = snapshot_of(*tokens, role=role).to_session()
        session.save()
        return client
    return _sign_in
