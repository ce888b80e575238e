"""
RoleService - permission and role evaluation for the current principal.

The service owns one reference to an immutable PermissionSnapshot. The
reference is only ever swapped as a whole (``replace`` / ``clear``), so
readers always see a complete snapshot without taking the lock.
"""

import logging
import threading
from typing import Any, Iterable, Optional

from .constants import (
    ActionType,
    ResourceType,
    RoleType,
    ADMIN_ROLES,
    COORDINATOR_OR_HIGHER_ROLES,
)
from .types import Permission, PermissionSet, PermissionSnapshot

logger = logging.getLogger(__name__)


def _role_value(role) -> str:
    return role.value if isinstance(role, RoleType) else str(role)


class RoleService:
    """
    Evaluate permission and role checks against the cached snapshot.

    An unpopulated service holds the empty snapshot, so every permission
    query answers False.
    """

    def __init__(self, snapshot: Optional[PermissionSnapshot] = None):
        self._lock = threading.Lock()
        self._snapshot = snapshot or PermissionSnapshot.empty()

    # -------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------
    @property
    def snapshot(self) -> PermissionSnapshot:
        return self._snapshot

    def replace(self, snapshot: PermissionSnapshot) -> None:
        """Swap in a freshly fetched snapshot."""
        with self._lock:
            self._snapshot = snapshot
        logger.debug(
            f"Permission snapshot replaced: role={snapshot.role!r}, "
            f"permissions={len(snapshot.permissions)}"
        )

    def clear(self) -> None:
        """Drop all permission and role data (logout / session invalidation)."""
        with self._lock:
            self._snapshot = PermissionSnapshot.empty()

    # -------------------------------------------------------
    # Permission checks
    # -------------------------------------------------------
    def has_permission(self, resource: Any, action: Any) -> bool:
        """
        True if the principal holds ``action`` on ``resource``, or MANAGE
        on ``resource``. Unknown resources/actions evaluate to False.
        """
        try:
            resource = ResourceType(resource)
            action = ActionType(action)
        except ValueError:
            return False
        return self._snapshot.permissions.allows(resource, action)

    def has_any_permission(self, checks: Iterable[Any]) -> bool:
        """True if at least one check passes. Empty input is False."""
        return any(self._check(check) for check in checks)

    def has_all_permissions(self, checks: Iterable[Any]) -> bool:
        """
        True if every check passes.

        Empty input is vacuously True; route requirements never produce an
        empty list (see CompositeRequirement).
        """
        return all(self._check(check) for check in checks)

    def _check(self, check: Any) -> bool:
        if isinstance(check, Permission):
            return self.has_permission(check.resource, check.action)
        if isinstance(check, dict):
            return self.has_permission(check.get("resource"), check.get("action"))
        resource, action = check
        return self.has_permission(resource, action)

    def get_current_permissions(self) -> PermissionSet:
        """Read-only view for diagnostics and denial reporting."""
        return self._snapshot.permissions

    # -------------------------------------------------------
    # Role checks
    # -------------------------------------------------------
    def get_current_role(self) -> str:
        return self._snapshot.role

    def get_current_role_id(self) -> Optional[int]:
        return self._snapshot.role_id

    def has_role(self, role) -> bool:
        return bool(self._snapshot.role) and self._snapshot.role == _role_value(role)

    def has_any_role(self, roles: Iterable) -> bool:
        return any(self.has_role(role) for role in roles)

    def has_all_roles(self, roles: Iterable) -> bool:
        return all(self.has_role(role) for role in roles)

    def is_super_admin(self) -> bool:
        return self.has_role(RoleType.SUPER_ADMIN)

    def is_admin(self) -> bool:
        return self.has_any_role(ADMIN_ROLES)

    def is_coordinator_or_higher(self) -> bool:
        return self.has_any_role(COORDINATOR_OR_HIGHER_ROLES)
