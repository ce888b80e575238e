"""
Role-Based Access Control (RBAC) for the admin portal.
Resource/action permission evaluation and the route checkpoints that gate
every administrative page.
"""

# Guards, routing and middleware touch Django settings and are imported
# where needed, not at package level:
#   from portal.platform.rbac.service import RoleService
#   from portal.platform.rbac.guards import AuthGuard, PermissionGuard, RoleGuard
#   from portal.platform.rbac.routing import route, RouteConfig

from .constants import (
    ResourceType,
    ActionType,
    RoleType,
    DenialReason,
)
from .types import (
    Permission,
    PermissionSet,
    PermissionSnapshot,
    NoRequirement,
    SingleRequirement,
    CompositeRequirement,
    Allow,
    Deny,
)

__all__ = [
    "ResourceType",
    "ActionType",
    "RoleType",
    "DenialReason",
    "Permission",
    "PermissionSet",
    "PermissionSnapshot",
    "NoRequirement",
    "SingleRequirement",
    "CompositeRequirement",
    "Allow",
    "Deny",
]
