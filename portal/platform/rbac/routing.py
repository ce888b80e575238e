"""
Typed route metadata.

Every guarded URL pattern carries a RouteConfig, built once when the URL
table is constructed. The config reaches the checkpoint middleware as the
``route_config`` view kwarg.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Tuple, Type

from django.core.exceptions import ImproperlyConfigured
from django.urls import path

from .constants import RoleType
from .guards import AuthGuard, BaseGuard, PermissionGuard, RoleGuard
from .types import (
    NO_REQUIREMENT,
    NoRequirement,
    PermissionRequirement,
    requirement_from_declaration,
)

logger = logging.getLogger(__name__)

ROUTE_CONFIG_KWARG = "route_config"

# canActivate chains used by the route table
AUTHENTICATED = (AuthGuard,)
PERMISSION_PROTECTED = (AuthGuard, PermissionGuard)
ROLE_PROTECTED = (AuthGuard, RoleGuard)


@dataclass(frozen=True)
class RouteConfig:
    path: str
    name: str
    title: str = ""
    guards: Tuple[Type[BaseGuard], ...] = ()
    requirement: PermissionRequirement = field(default=NO_REQUIREMENT)
    roles: Tuple[str, ...] = ()
    redirect_to: Optional[str] = None

    def __post_init__(self):
        guards = tuple(self.guards)
        if guards and any(guard is not AuthGuard for guard in guards) and guards[0] is not AuthGuard:
            raise ImproperlyConfigured(
                f"Route {self.name!r}: AuthGuard must run before {guards[0].__name__}"
            )
        object.__setattr__(self, "guards", guards)
        object.__setattr__(
            self,
            "roles",
            tuple(role.value if isinstance(role, RoleType) else str(role) for role in self.roles),
        )

    @property
    def required_tokens(self) -> Tuple[str, ...]:
        permissions, _ = self.requirement.resolve()
        return tuple(permission.token for permission in permissions)

    @property
    def require_all(self) -> bool:
        return self.requirement.resolve()[1]

    @property
    def is_misconfigured(self) -> bool:
        """A checkpoint is attached but has nothing declared to check."""
        if PermissionGuard in self.guards and isinstance(self.requirement, NoRequirement):
            return True
        return RoleGuard in self.guards and not self.roles


def route(
    route_path: str,
    view,
    *,
    name: str,
    title: str = "",
    guards: Iterable[Type[BaseGuard]] = PERMISSION_PROTECTED,
    permission: Any = None,
    permissions: Optional[Iterable[Any]] = None,
    require_all: bool = False,
    roles: Iterable[Any] = (),
    redirect_to: Optional[str] = None,
):
    """
    Declare a guarded URL pattern.

    ``permission`` declares a single requirement; ``permissions`` plus
    ``require_all`` declare an ANY/ALL composite.
    """
    try:
        requirement = requirement_from_declaration(
            permission=permission,
            permissions=None if permissions is None else list(permissions),
            require_all=require_all,
        )
    except ValueError as exc:
        raise ImproperlyConfigured(f"Route {name!r}: {exc}") from exc

    config = RouteConfig(
        path="/" + route_path.lstrip("/"),
        name=name,
        title=title,
        guards=tuple(guards),
        requirement=requirement,
        roles=tuple(roles),
        redirect_to=redirect_to,
    )
    if config.is_misconfigured:
        logger.warning(f"Route {name!r} declares a checkpoint without a requirement; it will allow every session")

    return path(route_path, view, {ROUTE_CONFIG_KWARG: config}, name=name)
