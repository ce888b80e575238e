"""
RBAC middleware.

RoleServiceMiddleware attaches ``request.role_service`` lazily, the way
Django attaches ``request.user``. RouteGuardMiddleware runs the route's
checkpoint chain before the view is entered.
"""

import logging

from django.http import HttpResponseRedirect
from django.utils.functional import SimpleLazyObject
from rest_framework import status

from portal.utils.response import json_response

from .constants import DenialReason
from .guards import RouteState, run_checkpoints
from .routing import ROUTE_CONFIG_KWARG

logger = logging.getLogger(__name__)


def get_role_service(request):
    if not hasattr(request, "_cached_role_service"):
        from portal.platform.accounts.session import SessionStore

        request._cached_role_service = SessionStore(request.session).role_service()
    return request._cached_role_service


class RoleServiceMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not hasattr(request, "session"):
            raise RuntimeError(
                "RoleServiceMiddleware requires SessionMiddleware to be installed before it."
            )
        request.role_service = SimpleLazyObject(lambda: get_role_service(request))
        return self.get_response(request)


class RouteGuardMiddleware:
    """
    Evaluate AuthGuard / PermissionGuard / RoleGuard for routes declared
    with ``portal.platform.rbac.routing.route``. Undeclared routes pass.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_view(self, request, view_func, view_args, view_kwargs):
        route_config = view_kwargs.get(ROUTE_CONFIG_KWARG)
        if route_config is None or not route_config.guards:
            return None

        state = RouteState(url=request.get_full_path())
        guards = [guard_class.from_request(request) for guard_class in route_config.guards]
        decision = run_checkpoints(guards, route_config, state)

        if decision.allowed:
            return None

        redirect_url = decision.redirect_url
        if redirect_url:
            return HttpResponseRedirect(redirect_url)

        # Denied without a redirect target (already on the login path)
        if decision.reason == DenialReason.UNAUTHENTICATED.value:
            return json_response(
                status_code=status.HTTP_401_UNAUTHORIZED,
                status="failure",
                error_code="AUTH_ERROR",
                error_message="A valid session is required.",
            )
        return json_response(
            status_code=status.HTTP_403_FORBIDDEN,
            status="failure",
            data={"reason": decision.reason, "required": list(decision.required_permissions)},
            error_code="PERMISSION_DENIED",
            error_message="You do not have permission to open this page.",
        )
