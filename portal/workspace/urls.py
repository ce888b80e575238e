"""
Admin page route table.

Every page is declared with its checkpoint chain and requirement; the
RouteGuardMiddleware enforces them before the page view runs.
"""

from portal.platform.rbac.constants import ActionType, ResourceType, RoleType
from portal.platform.rbac.routing import (
    AUTHENTICATED,
    ROLE_PROTECTED,
    route,
)
from portal.platform.rbac.types import Permission

from .views import AdminPageView

R = ResourceType
A = ActionType

page = AdminPageView.as_view()

# Resources surfaced in the navigation menu
MENU_RESOURCES = (R.EVENTS, R.AREAS, R.MASTER_DATA, R.BRANCHES, R.USERS)

urlpatterns = [
    # -------------------------
    # Dashboard
    # -------------------------
    route("", AdminPageView.as_view(resources=MENU_RESOURCES), name="home",
          title="Dashboard", guards=AUTHENTICATED),
    route("dashboard", AdminPageView.as_view(resources=MENU_RESOURCES), name="dashboard",
          title="Dashboard", guards=AUTHENTICATED),

    # -------------------------
    # Branches
    # -------------------------
    route("branch", page, name="branch-list", title="Branches",
          permission=Permission(R.BRANCHES, A.LIST)),
    route("branch/add", page, name="branch-add", title="Add Branch",
          permission=Permission(R.BRANCHES, A.CREATE)),
    route("branch/edit/<int:branch_id>", page, name="branch-edit", title="Edit Branch",
          permission=Permission(R.BRANCHES, A.UPDATE)),
    route("branch/view/<int:branch_id>", page, name="branch-view", title="Branch Details",
          permission=Permission(R.BRANCHES, A.READ)),
    route("branch/gallery", page, name="branch-gallery", title="Branch Gallery",
          permissions=[Permission(R.BRANCHES, A.READ), Permission(R.MEDIA, A.READ)], require_all=True),
    route("branch/branchAssistance", page, name="branch-assistance", title="Branch Assistance",
          permission=Permission(R.BRANCHES, A.READ)),

    # -------------------------
    # Events
    # -------------------------
    route("events", page, name="events-list", title="Events",
          permission=Permission(R.EVENTS, A.LIST)),
    route("events/add", page, name="events-add", title="Add Event",
          permission=Permission(R.EVENTS, A.CREATE)),
    route("events/view", page, name="events-view", title="Event Details",
          permission=Permission(R.EVENTS, A.READ)),
    route("events/gallery", page, name="events-gallery", title="Event Gallery",
          permissions=[Permission(R.EVENTS, A.READ), Permission(R.MEDIA, A.READ)]),

    # -------------------------
    # Areas / districts / contacts
    # -------------------------
    route("areas", page, name="areas-list", title="Areas",
          permission=Permission(R.AREAS, A.LIST)),
    route("areas/add", page, name="areas-add", title="Add Area",
          permission=Permission(R.AREAS, A.CREATE)),
    route("districts", page, name="districts-list", title="Districts",
          permission=Permission(R.MASTER_DATA, A.READ)),
    route("contacts", page, name="contacts", title="Contacts",
          permission=Permission(R.USERS, A.LIST)),

    # -------------------------
    # Reports and administration
    # -------------------------
    route("reports", page, name="reports", title="Reports",
          permissions=[Permission(R.EVENTS, A.READ), Permission(R.DONATIONS, A.READ)]),
    route("admin-panel", page, name="admin-panel", title="Administration",
          permissions=[Permission(R.USERS, A.MANAGE), Permission(R.BRANCHES, A.MANAGE)], require_all=True),
    route("settings", AdminPageView.as_view(resources=(R.ROLES, R.PERMISSIONS)), name="settings",
          title="Permissions Management", guards=ROLE_PROTECTED,
          roles=[RoleType.SUPER_ADMIN], redirect_to="/pages/error-403"),
]
