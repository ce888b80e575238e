import pytest

from portal.platform.rbac.constants import ActionType, ResourceType, RoleType
from portal.platform.rbac.service import RoleService
from portal.platform.rbac.types import Permission, PermissionSet, PermissionSnapshot


class TestPermissionChecks:
    def test_unpopulated_service_denies_everything(self):
        service = RoleService()
        assert not service.has_permission(ResourceType.BRANCHES, ActionType.READ)
        assert not service.has_any_permission([("branches", "read")])
        assert not service.get_current_permissions()

    def test_exact_grant(self, role_service):
        service = role_service("branches:create")
        assert service.has_permission(ResourceType.BRANCHES, ActionType.CREATE)
        assert not service.has_permission(ResourceType.BRANCHES, ActionType.DELETE)

    def test_manage_implies_other_actions(self, role_service):
        service = role_service("events:manage")
        assert service.has_permission("events", "delete")
        assert service.has_permission("events", "list")
        assert not service.has_permission("donations", "read")

    def test_unknown_resource_or_action_is_denied(self, role_service):
        service = role_service("events:manage")
        assert not service.has_permission("rockets", "read")
        assert not service.has_permission("events", "fly")
        assert not service.has_permission(None, None)

    def test_super_admin_role_alone_grants_nothing(self, role_service):
        service = role_service(role="super_admin")
        assert service.is_super_admin()
        assert not service.has_permission("users", "read")

    def test_any(self, role_service):
        service = role_service("media:read")
        checks = [Permission("events", "read"), {"resource": "media", "action": "read"}]
        assert service.has_any_permission(checks)
        assert not service.has_any_permission([("events", "read")])

    def test_all(self, role_service):
        service = role_service("users:manage", "branches:read")
        assert not service.has_all_permissions([("users", "manage"), ("branches", "manage")])
        assert service.has_all_permissions([("users", "delete"), ("branches", "read")])

    def test_empty_check_lists(self, role_service):
        service = role_service("users:read")
        assert service.has_any_permission([]) is False
        assert service.has_all_permissions([]) is True

    def test_queries_are_idempotent(self, role_service):
        service = role_service("areas:list")
        results = {service.has_permission("areas", "list") for _ in range(5)}
        assert results == {True}


class TestLifecycle:
    def test_replace_swaps_the_whole_snapshot(self, role_service):
        service = role_service("events:read", role="staff")
        service.replace(PermissionSnapshot(PermissionSet.from_tokens(["areas:list"]), role="coordinator"))

        assert not service.has_permission("events", "read")
        assert service.has_permission("areas", "list")
        assert service.get_current_role() == "coordinator"

    def test_clear(self, role_service):
        service = role_service("events:manage", role="admin")
        service.clear()
        assert not service.has_permission("events", "read")
        assert service.get_current_role() == ""
        assert service.snapshot == PermissionSnapshot.empty()


class TestRoles:
    @pytest.mark.parametrize("role,admin,coordinator_or_higher", [
        ("super_admin", True, True),
        ("admin", True, True),
        ("coordinator", False, True),
        ("staff", False, False),
        ("", False, False),
    ])
    def test_role_tiers(self, role_service, role, admin, coordinator_or_higher):
        service = role_service(role=role)
        assert service.is_admin() is admin
        assert service.is_coordinator_or_higher() is coordinator_or_higher

    def test_role_checks(self, role_service):
        service = role_service(role="coordinator")
        assert service.has_role(RoleType.COORDINATOR)
        assert service.has_role("coordinator")
        assert service.has_any_role([RoleType.ADMIN, "coordinator"])
        assert not service.has_all_roles([RoleType.ADMIN, RoleType.COORDINATOR])

    def test_no_role_matches_nothing(self, role_service):
        assert not role_service().has_role("")

    def test_role_id(self):
        service = RoleService(PermissionSnapshot(role="admin", role_id=2))
        assert service.get_current_role_id() == 2
