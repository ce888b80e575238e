"""
RBAC value types.

Permissions, the principal's permission set, route requirements and the
decisions produced by route checkpoints. Everything here is immutable;
the only mutable RBAC state is the snapshot reference held by RoleService.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    Any,
    ClassVar,
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)
from urllib.parse import urlencode

from .constants import ActionType, ResourceType, PERMISSION_TOKEN_SEPARATOR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Permission:
    """A (resource, action) pair. Strings are coerced to the enums."""

    resource: ResourceType
    action: ActionType

    def __post_init__(self):
        object.__setattr__(self, "resource", ResourceType(self.resource))
        object.__setattr__(self, "action", ActionType(self.action))

    @property
    def token(self) -> str:
        return f"{self.resource.value}{PERMISSION_TOKEN_SEPARATOR}{self.action.value}"

    @classmethod
    def from_token(cls, token: str) -> "Permission":
        """Parse ``"branches:create"``. Raises ValueError on malformed or unknown tokens."""
        resource, separator, action = token.strip().partition(PERMISSION_TOKEN_SEPARATOR)
        if not separator:
            raise ValueError(f"Invalid permission token: {token!r}")
        return cls(resource, action)

    @classmethod
    def coerce(cls, value: Any) -> "Permission":
        """
        Accept the declaration forms used in route tables:
        a Permission, a token string, a ``{"resource", "action"}`` mapping
        or a ``(resource, action)`` pair.
        """
        if isinstance(value, Permission):
            return value
        if isinstance(value, str):
            return cls.from_token(value)
        if isinstance(value, Mapping):
            return cls(value["resource"], value["action"])
        resource, action = value
        return cls(resource, action)

    def __str__(self) -> str:
        return self.token


class PermissionSet:
    """
    Immutable mapping of resource -> actions held by the principal.

    ``MANAGE`` on a resource satisfies any action on that resource.
    """

    __slots__ = ("_grants",)

    def __init__(self, grants: Optional[Mapping[Any, Iterable[Any]]] = None):
        normalized: Dict[ResourceType, FrozenSet[ActionType]] = {}
        for resource, actions in (grants or {}).items():
            action_set = frozenset(ActionType(action) for action in actions)
            if action_set:
                normalized[ResourceType(resource)] = action_set
        self._grants = MappingProxyType(normalized)

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> "PermissionSet":
        """Build from backend tokens; unknown or malformed tokens are skipped."""
        grants: Dict[ResourceType, set] = {}
        for token in tokens:
            try:
                permission = Permission.from_token(token)
            except (ValueError, AttributeError):
                logger.warning(f"Skipping unknown permission token: {token!r}")
                continue
            grants.setdefault(permission.resource, set()).add(permission.action)
        return cls(grants)

    def allows(self, resource: Any, action: Any) -> bool:
        actions = self._grants.get(resource)
        if not actions:
            return False
        return action in actions or ActionType.MANAGE in actions

    def tokens(self) -> List[str]:
        return sorted(permission.token for permission in self)

    def as_dict(self) -> Dict[str, List[str]]:
        return {
            resource.value: sorted(action.value for action in actions)
            for resource, actions in self._grants.items()
        }

    def __iter__(self) -> Iterator[Permission]:
        for resource, actions in self._grants.items():
            for action in actions:
                yield Permission(resource, action)

    def __len__(self) -> int:
        return sum(len(actions) for actions in self._grants.values())

    def __bool__(self) -> bool:
        return bool(self._grants)

    def __contains__(self, permission: object) -> bool:
        if not isinstance(permission, Permission):
            return False
        return permission.action in self._grants.get(permission.resource, frozenset())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissionSet):
            return NotImplemented
        return dict(self._grants) == dict(other._grants)

    def __hash__(self) -> int:
        return hash(frozenset(self._grants.items()))

    def __repr__(self) -> str:
        return f"PermissionSet({self.as_dict()!r})"


@dataclass(frozen=True)
class PermissionSnapshot:
    """The unit RoleService swaps on every fetch: permissions plus role."""

    permissions: PermissionSet = field(default_factory=PermissionSet)
    role: str = ""
    role_id: Optional[int] = None

    @classmethod
    def empty(cls) -> "PermissionSnapshot":
        return cls()

    def to_session(self) -> Dict[str, Any]:
        return {
            "permissions": self.permissions.tokens(),
            "role": self.role,
            "role_id": self.role_id,
        }

    @classmethod
    def from_session(cls, data: Optional[Mapping[str, Any]]) -> "PermissionSnapshot":
        if not data:
            return cls.empty()
        return cls(
            permissions=PermissionSet.from_tokens(data.get("permissions") or []),
            role=data.get("role") or "",
            role_id=data.get("role_id"),
        )


# ─────────────────────────────────────────
# Route requirements
# ─────────────────────────────────────────

@dataclass(frozen=True)
class NoRequirement:
    """The route declares no permission requirement."""

    def resolve(self) -> Tuple[Tuple[Permission, ...], bool]:
        return (), False


@dataclass(frozen=True)
class SingleRequirement:
    permission: Permission

    def __post_init__(self):
        object.__setattr__(self, "permission", Permission.coerce(self.permission))

    def resolve(self) -> Tuple[Tuple[Permission, ...], bool]:
        return (self.permission,), False


@dataclass(frozen=True)
class CompositeRequirement:
    """ANY-of-N by default, ALL-of-N when ``require_all`` is set."""

    permissions: Tuple[Permission, ...]
    require_all: bool = False

    def __post_init__(self):
        permissions = tuple(Permission.coerce(permission) for permission in self.permissions)
        if not permissions:
            raise ValueError("A composite requirement needs at least one permission")
        object.__setattr__(self, "permissions", permissions)

    def resolve(self) -> Tuple[Tuple[Permission, ...], bool]:
        return self.permissions, self.require_all


PermissionRequirement = Union[NoRequirement, SingleRequirement, CompositeRequirement]

NO_REQUIREMENT = NoRequirement()


def requirement_from_declaration(
    permission: Any = None,
    permissions: Optional[Iterable[Any]] = None,
    require_all: bool = False,
) -> PermissionRequirement:
    """
    Turn route declaration arguments into a typed requirement.

    An empty ``permissions`` list resolves to NoRequirement.
    """
    if permission is not None and permissions is not None:
        raise ValueError("Declare either `permission` or `permissions`, not both")
    if permission is not None:
        return SingleRequirement(Permission.coerce(permission))
    if permissions:
        return CompositeRequirement(tuple(permissions), require_all=require_all)
    return NO_REQUIREMENT


# ─────────────────────────────────────────
# Checkpoint decisions
# ─────────────────────────────────────────

class _Decision:
    allowed: ClassVar[bool]

    def __bool__(self):
        raise TypeError(f"{type(self).__name__} has no truth value; check `.allowed`")


@dataclass(frozen=True)
class Allow(_Decision):
    allowed: ClassVar[bool] = True


@dataclass(frozen=True)
class Deny(_Decision):
    """
    A denied navigation.

    ``redirect_to`` is None when no redirect must be issued; ``params`` is
    the ordered query context carried by the redirect.
    """

    reason: str
    redirect_to: Optional[str] = None
    params: Tuple[Tuple[str, str], ...] = ()
    required_permissions: Tuple[str, ...] = ()
    allowed: ClassVar[bool] = False

    @property
    def redirect_url(self) -> Optional[str]:
        if self.redirect_to is None:
            return None
        if not self.params:
            return self.redirect_to
        return f"{self.redirect_to}?{urlencode(self.params, safe='/:,')}"


ALLOW = Allow()

AuthorizationDecision = Union[Allow, Deny]
