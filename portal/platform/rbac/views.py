"""
Session permission endpoints: diagnostics, refresh and ad-hoc checks.
"""

import logging

from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from portal.core.services.backend import BackendClient
from portal.platform.accounts.session import SessionStore, sync_permissions
from portal.utils.response import api_response

from .permissions import HasValidSession
from .serializers import PermissionCheckSerializer, PermissionSnapshotSerializer

logger = logging.getLogger(__name__)


def snapshot_payload(role_service) -> dict:
    snapshot = role_service.snapshot
    return {
        "role": snapshot.role,
        "roleId": snapshot.role_id,
        "permissions": snapshot.permissions.tokens(),
        "grants": snapshot.permissions.as_dict(),
    }


class MyPermissionsView(APIView):
    permission_classes = [HasValidSession]

    @extend_schema(tags=["RBAC"], summary="Current permission snapshot", responses=PermissionSnapshotSerializer)
    def get(self, request):
        return api_response(200, "success", snapshot_payload(request.role_service))


class RefreshPermissionsView(APIView):
    """Refetch the principal's permissions and replace the cached snapshot."""

    permission_classes = [HasValidSession]

    @extend_schema(tags=["RBAC"], summary="Refresh permission snapshot", responses=PermissionSnapshotSerializer)
    def post(self, request):
        sync_permissions(request, BackendClient())
        return api_response(200, "success", snapshot_payload(request.role_service))


class CheckPermissionView(APIView):
    permission_classes = [HasValidSession]

    @extend_schema(tags=["RBAC"], summary="Check a permission", request=PermissionCheckSerializer)
    def post(self, request):
        serializer = PermissionCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        resource = serializer.validated_data["resource"]
        action = serializer.validated_data["action"]
        payload = {
            "resource": resource,
            "action": action,
            "hasPermission": request.role_service.has_permission(resource, action),
        }

        if serializer.validated_data["verify"]:
            token = SessionStore(request.session).get_token()
            payload["backendHasPermission"] = BackendClient().check_permission(token, resource, action)

        return api_response(200, "success", payload)
