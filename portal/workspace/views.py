"""
Admin page descriptors.

Each page answers with what the client needs to render it: its title and
path, the requirement it was opened under, and per-action capability flags
for the resources it shows (create/update/delete buttons and the like).
"""

import logging
from typing import Dict, Iterable

from rest_framework import permissions
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from portal.platform.rbac.constants import ActionType, ResourceType
from portal.platform.rbac.routing import ROUTE_CONFIG_KWARG
from portal.utils.response import api_response

logger = logging.getLogger(__name__)


def capability_flags(role_service, resources: Iterable[ResourceType]) -> Dict[str, Dict[str, bool]]:
    """``{"branches": {"create": True, "read": True, ...}, ...}``"""
    return {
        resource.value: {
            action.value: role_service.has_permission(resource, action)
            for action in ActionType
        }
        for resource in resources
    }


class AdminPageView(APIView):
    """
    Descriptor of a guarded admin page.

    ``resources`` lists the resources the page exposes actions on; when
    empty they are taken from the route's permission requirement.
    """

    # Access is decided by the route checkpoints before the view runs
    permission_classes = [permissions.AllowAny]
    resources = ()

    def page_resources(self, route_config):
        if self.resources:
            return [ResourceType(resource) for resource in self.resources]

        declared, _ = route_config.requirement.resolve()
        seen = []
        for permission in declared:
            if permission.resource not in seen:
                seen.append(permission.resource)
        return seen

    @extend_schema(tags=["Pages"], summary="Admin page descriptor")
    def get(self, request, **kwargs):
        route_config = kwargs[ROUTE_CONFIG_KWARG]
        role_service = request.role_service

        payload = {
            "name": route_config.name,
            "title": route_config.title,
            "path": request.path,
            "required": list(route_config.required_tokens),
            "requireAll": route_config.require_all,
            "role": role_service.get_current_role(),
            "capabilities": capability_flags(role_service, self.page_resources(route_config)),
        }
        return api_response(200, "success", payload)
