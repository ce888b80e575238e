import logging

from django.middleware.csrf import get_token
from django.utils.decorators import method_decorator
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.csrf import csrf_protect
from rest_framework import permissions, status
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from portal.core.services.backend import (
    BackendAuthenticationError,
    BackendClient,
    BackendError,
)
from portal.platform.accounts.serializers import (
    ForbiddenSerializer,
    LoginEntrySerializer,
    LoginSerializer,
)
from portal.platform.accounts.session import SessionStore, sync_permissions
from portal.platform.rbac.constants import (
    DEFAULT_LOGIN_URL,
    REASON_PARAM,
    REQUIRED_PARAM,
    REQUIRED_PERMISSIONS_SEPARATOR,
    RETURN_URL_PARAM,
)
from portal.platform.rbac.guards import rbac_setting
from portal.utils.response import api_response, json_response

logger = logging.getLogger(__name__)


def csrf_failure(request, reason=""):
    """CSRF_FAILURE_VIEW: the rejection in the standard envelope."""
    logger.warning(f"CSRF check failed for {request.path}: {reason}")
    return json_response(
        status_code=status.HTTP_403_FORBIDDEN,
        status="failure",
        error_code="CSRF_FAILED",
        error_message="CSRF verification failed. Fetch /auth/login and resend the token.",
    )


def safe_return_url(request, return_url: str) -> str:
    """Only same-host destinations are honoured; the login page itself is never one."""
    login_url = rbac_setting("LOGIN_URL", DEFAULT_LOGIN_URL)
    if not return_url or return_url.split("?", 1)[0].rstrip("/") == login_url.rstrip("/"):
        return "/"
    if not url_has_allowed_host_and_scheme(
        return_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return "/"
    return return_url


@method_decorator(csrf_protect, name="dispatch")
class LoginView(APIView):
    """
    Login entry point.

    GET describes the entry point (the destination to return to) and hands
    out the CSRF token; POST signs in through the backend and primes the
    permission snapshot. POSTs here and on logout are CSRF-checked.
    """

    permission_classes = [permissions.AllowAny]

    @extend_schema(tags=["Auth"], summary="Login entry point", responses=LoginEntrySerializer)
    def get(self, request):
        store = SessionStore(request.session)
        payload = {
            "returnUrl": request.query_params.get(RETURN_URL_PARAM, ""),
            "authenticated": store.is_session_valid(),
            "csrfToken": get_token(request),
        }
        return api_response(200, "success", payload)

    @extend_schema(tags=["Auth"], summary="Sign in", request=LoginSerializer)
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data["email"]
        client = BackendClient()

        try:
            token = client.login(email, serializer.validated_data["password"])
        except BackendAuthenticationError:
            logger.info(f"Sign-in rejected for {email}")
            return api_response(
                status.HTTP_401_UNAUTHORIZED, "failure", {},
                "INVALID_CREDENTIALS",
                "Invalid email or password."
            )
        except BackendError as exc:
            logger.exception(f"Sign-in failed for {email}: {exc}")
            return api_response(
                status.HTTP_502_BAD_GATEWAY, "failure", {},
                "BACKEND_UNAVAILABLE",
                "The sign-in service is unavailable. Please try again later."
            )

        # New principal, new session key
        request.session.cycle_key()
        SessionStore(request.session).store_token(token)
        snapshot = sync_permissions(request, client)

        logger.info(f"Signed in {email} as {snapshot.role or 'unknown role'}")
        payload = {
            "redirectTo": safe_return_url(request, serializer.validated_data.get("returnUrl", "")),
            "role": snapshot.role,
            "permissions": snapshot.permissions.tokens(),
        }
        return api_response(200, "success", payload)


@method_decorator(csrf_protect, name="dispatch")
class LogoutView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(tags=["Auth"], summary="Sign out")
    def post(self, request):
        request.role_service.clear()
        SessionStore(request.session).clear()
        logger.info("Session cleared on logout")
        return api_response(200, "success", {"redirectTo": rbac_setting("LOGIN_URL", DEFAULT_LOGIN_URL)})


class ForbiddenView(APIView):
    """Forbidden entry point: echoes the denial context carried by the redirect."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(tags=["Auth"], summary="Access denied context", responses=ForbiddenSerializer)
    def get(self, request):
        required = request.query_params.get(REQUIRED_PARAM, "")
        payload = {
            "returnUrl": request.query_params.get(RETURN_URL_PARAM, ""),
            "reason": request.query_params.get(REASON_PARAM, ""),
            "required": [token for token in required.split(REQUIRED_PERMISSIONS_SEPARATOR) if token],
        }
        return api_response(200, "success", payload)
