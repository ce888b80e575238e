"""
Route checkpoints.

Each guard is a synchronous decision over (route config, route state,
injected session/permission state) and returns Allow or Deny; denials are
never raised. ``from_request`` wires a guard to the current request.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional
from urllib.parse import urlsplit

from django.conf import settings

from .constants import (
    DenialReason,
    DEFAULT_FORBIDDEN_URL,
    DEFAULT_LOGIN_URL,
    REASON_PARAM,
    REQUIRED_PARAM,
    REQUIRED_PERMISSIONS_SEPARATOR,
    RETURN_URL_PARAM,
)
from .service import RoleService
from .types import ALLOW, AuthorizationDecision, Deny

logger = logging.getLogger(__name__)


def rbac_setting(key: str, default):
    return getattr(settings, "RBAC", {}).get(key, default)


@dataclass(frozen=True)
class RouteState:
    """The navigation attempt: the originally requested URL (path + query)."""

    url: str

    @property
    def path(self) -> str:
        return urlsplit(self.url).path


class BaseGuard:
    """Common interface of route checkpoints."""

    def can_activate(self, route, state: RouteState) -> AuthorizationDecision:
        raise NotImplementedError

    @classmethod
    def from_request(cls, request) -> "BaseGuard":
        raise NotImplementedError


class AuthGuard(BaseGuard):
    """
    Require a valid session.

    Denials redirect to the login entry point with the requested URL as
    ``returnUrl``; a denial while already on the login path carries no
    redirect. ``on_invalid_session`` is called before every denial.
    """

    def __init__(
        self,
        is_session_valid: Callable[[], bool],
        login_url: str = DEFAULT_LOGIN_URL,
        on_invalid_session: Optional[Callable[[], object]] = None,
    ):
        self.is_session_valid = is_session_valid
        self.login_url = login_url
        self.on_invalid_session = on_invalid_session

    @classmethod
    def from_request(cls, request) -> "AuthGuard":
        from portal.platform.accounts.session import SessionStore, invalidate_session

        return cls(
            is_session_valid=SessionStore(request.session).is_session_valid,
            login_url=rbac_setting("LOGIN_URL", DEFAULT_LOGIN_URL),
            on_invalid_session=lambda: invalidate_session(request),
        )

    def _is_login_path(self, state: RouteState) -> bool:
        return state.path.rstrip("/") == urlsplit(self.login_url).path.rstrip("/")

    def can_activate(self, route, state: RouteState) -> AuthorizationDecision:
        if self.is_session_valid():
            return ALLOW

        if self.on_invalid_session is not None:
            self.on_invalid_session()

        if self._is_login_path(state):
            return Deny(reason=DenialReason.UNAUTHENTICATED.value)

        return Deny(
            reason=DenialReason.UNAUTHENTICATED.value,
            redirect_to=self.login_url,
            params=((RETURN_URL_PARAM, state.url),),
        )


class PermissionGuard(BaseGuard):
    """
    Enforce the resource/action requirement declared on the route.

    Routes without a requirement are allowed; an empty permission snapshot
    denies everything else.
    """

    def __init__(self, role_service: RoleService, forbidden_url: str = DEFAULT_FORBIDDEN_URL):
        self.role_service = role_service
        self.forbidden_url = forbidden_url

    @classmethod
    def from_request(cls, request) -> "PermissionGuard":
        return cls(
            role_service=request.role_service,
            forbidden_url=rbac_setting("FORBIDDEN_URL", DEFAULT_FORBIDDEN_URL),
        )

    def can_activate(self, route, state: RouteState) -> AuthorizationDecision:
        permissions, require_all = route.requirement.resolve()

        if not permissions:
            logger.warning(
                f"[PermissionGuard] No permissions declared for route {route.name!r}. Allowing access."
            )
            return ALLOW

        if require_all:
            has_access = self.role_service.has_all_permissions(permissions)
        else:
            has_access = self.role_service.has_any_permission(permissions)

        if has_access:
            return ALLOW

        required = tuple(permission.token for permission in permissions)
        logger.info(
            f"[PermissionGuard] Access denied: required={list(required)}, require_all={require_all}, "
            f"current={self.role_service.get_current_permissions().tokens()}, path={state.url}"
        )

        reason = DenialReason.INSUFFICIENT_PERMISSIONS.value
        return Deny(
            reason=reason,
            redirect_to=route.redirect_to or self.forbidden_url,
            params=(
                (RETURN_URL_PARAM, state.url),
                (REASON_PARAM, reason),
                (REQUIRED_PARAM, REQUIRED_PERMISSIONS_SEPARATOR.join(required)),
            ),
            required_permissions=required,
        )


class RoleGuard(BaseGuard):
    """Allow the route when the principal holds any of the declared roles."""

    def __init__(self, role_service: RoleService, forbidden_url: str = DEFAULT_FORBIDDEN_URL):
        self.role_service = role_service
        self.forbidden_url = forbidden_url

    @classmethod
    def from_request(cls, request) -> "RoleGuard":
        return cls(
            role_service=request.role_service,
            forbidden_url=rbac_setting("FORBIDDEN_URL", DEFAULT_FORBIDDEN_URL),
        )

    def can_activate(self, route, state: RouteState) -> AuthorizationDecision:
        if not route.roles:
            logger.warning(f"[RoleGuard] No roles declared for route {route.name!r}. Allowing access.")
            return ALLOW

        if self.role_service.has_any_role(route.roles):
            return ALLOW

        logger.info(
            f"[RoleGuard] Access denied: required={list(route.roles)}, "
            f"current={self.role_service.get_current_role()!r}, path={state.url}"
        )

        reason = DenialReason.INSUFFICIENT_ROLE.value
        return Deny(
            reason=reason,
            redirect_to=route.redirect_to or self.forbidden_url,
            params=(
                (RETURN_URL_PARAM, state.url),
                (REASON_PARAM, reason),
            ),
        )


def run_checkpoints(
    guards: Iterable[BaseGuard], route, state: RouteState
) -> AuthorizationDecision:
    """
    Evaluate guards in order; the first denial ends the navigation attempt.
    """
    for guard in guards:
        decision = guard.can_activate(route, state)
        if not decision.allowed:
            return decision
    return ALLOW

