import logging

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.urls import resolve

from portal.platform.rbac.guards import AuthGuard, PermissionGuard, RoleGuard
from portal.platform.rbac.routing import (
    AUTHENTICATED,
    PERMISSION_PROTECTED,
    ROUTE_CONFIG_KWARG,
    RouteConfig,
    route,
)
from portal.platform.rbac.types import CompositeRequirement, NoRequirement, SingleRequirement


def view(request, **kwargs):
    return None


def test_route_attaches_typed_config():
    pattern = route("branch/add", view, name="branch-add", title="Add Branch", permission="branches:create")
    config = pattern.default_args[ROUTE_CONFIG_KWARG]

    assert config.path == "/branch/add"
    assert config.guards == PERMISSION_PROTECTED
    assert isinstance(config.requirement, SingleRequirement)
    assert config.required_tokens == ("branches:create",)
    assert config.require_all is False


def test_composite_declaration():
    pattern = route(
        "admin-panel", view, name="admin-panel",
        permissions=["users:manage", "branches:manage"], require_all=True,
    )
    config = pattern.default_args[ROUTE_CONFIG_KWARG]

    assert isinstance(config.requirement, CompositeRequirement)
    assert config.required_tokens == ("users:manage", "branches:manage")
    assert config.require_all is True


def test_empty_permission_list_is_no_requirement(caplog):
    with caplog.at_level(logging.WARNING, logger="portal.platform.rbac.routing"):
        pattern = route("open", view, name="open", permissions=[], require_all=True)

    config = pattern.default_args[ROUTE_CONFIG_KWARG]
    assert isinstance(config.requirement, NoRequirement)
    assert config.is_misconfigured
    assert "without a requirement" in caplog.text


def test_conflicting_declarations_are_rejected():
    with pytest.raises(ImproperlyConfigured):
        route("events", view, name="events", permission="events:list", permissions=["events:read"])


def test_unknown_permission_is_rejected():
    with pytest.raises(ImproperlyConfigured):
        route("events", view, name="events", permission="events:launch")


def test_auth_guard_must_run_first():
    with pytest.raises(ImproperlyConfigured):
        RouteConfig(path="/events", name="events", guards=(PermissionGuard, AuthGuard))


def test_roles_are_normalized():
    config = RouteConfig(path="/settings", name="settings", guards=(AuthGuard, RoleGuard), roles=("super_admin",))
    assert config.roles == ("super_admin",)
    assert not config.is_misconfigured


def test_role_guard_without_roles_is_misconfigured():
    config = RouteConfig(path="/settings", name="settings", guards=(AuthGuard, RoleGuard))
    assert config.is_misconfigured


def test_authenticated_only_route_is_not_misconfigured():
    config = RouteConfig(path="/dashboard", name="dashboard", guards=AUTHENTICATED)
    assert not config.is_misconfigured


def test_portal_route_table():
    match = resolve("/branch/add")
    config = match.kwargs[ROUTE_CONFIG_KWARG]
    assert config.name == "branch-add"
    assert config.required_tokens == ("branches:create",)

    settings_config = resolve("/settings").kwargs[ROUTE_CONFIG_KWARG]
    assert settings_config.guards == (AuthGuard, RoleGuard)
    assert settings_config.roles == ("super_admin",)
    assert settings_config.redirect_to == "/pages/error-403"
