"""
RBAC Constants - Resource, Action and Role Definitions
Values match the wire format used by the backend permission endpoints.
"""

from enum import Enum


class ResourceType(str, Enum):
    """Protected entity categories"""
    USERS = "users"
    ROLES = "roles"
    PERMISSIONS = "permissions"
    BRANCHES = "branches"
    AREAS = "areas"
    EVENTS = "events"
    DONATIONS = "donations"
    VOLUNTEERS = "volunteers"
    SPECIAL_GUESTS = "special_guests"
    MEDIA = "media"
    PROMOTIONS = "promotions"
    MASTER_DATA = "master_data"


class ActionType(str, Enum):
    """Operations on a resource"""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"
    MANAGE = "manage"  # Full control, implies every other action on the resource


class RoleType(str, Enum):
    """Roles issued by the backend"""
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    COORDINATOR = "coordinator"
    STAFF = "staff"


ADMIN_ROLES = (RoleType.SUPER_ADMIN, RoleType.ADMIN)
COORDINATOR_OR_HIGHER_ROLES = (RoleType.SUPER_ADMIN, RoleType.ADMIN, RoleType.COORDINATOR)

# Separator inside a permission token, e.g. "branches:create"
PERMISSION_TOKEN_SEPARATOR = ":"
# Separator of the `required` query parameter on forbidden redirects
REQUIRED_PERMISSIONS_SEPARATOR = ","


class DenialReason(str, Enum):
    """Machine-readable reasons attached to denials"""
    UNAUTHENTICATED = "unauthenticated"
    INSUFFICIENT_PERMISSIONS = "insufficient_permissions"
    INSUFFICIENT_ROLE = "insufficient_role"


DEFAULT_LOGIN_URL = "/auth/login"
DEFAULT_FORBIDDEN_URL = "/pages/error-403"

# Query parameters carried by checkpoint redirects
RETURN_URL_PARAM = "returnUrl"
REASON_PARAM = "reason"
REQUIRED_PARAM = "required"
