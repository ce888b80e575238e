from django.urls import path, include
from rest_framework import permissions

from drf_spectacular.views import (
    SpectacularSwaggerView,
    SpectacularRedocView,
)
from config.schema_view import PortalSchemaView

# ================================
# URL PATTERNS
# ================================
urlpatterns = [

    # -------------------------
    # Login / logout / forbidden entry points
    # -------------------------
    path("", include("portal.platform.accounts.urls")),

    # -------------------------
    # Session permissions
    # Base: /api/
    # -------------------------
    path("api/", include("portal.platform.rbac.urls")),

    # -------------------------
    # OpenAPI / Swagger / Redoc
    # -------------------------
    path("api/schema/", PortalSchemaView.as_view(), name="schema"),
    path(
        "api/schema/swagger-ui/",
        SpectacularSwaggerView.as_view(url_name="schema", permission_classes=[permissions.AllowAny]),
        name="swagger-ui",
    ),
    path(
        "api/schema/redoc/",
        SpectacularRedocView.as_view(url_name="schema", permission_classes=[permissions.AllowAny]),
        name="redoc",
    ),

    # -------------------------
    # Admin pages (guarded route table)
    # -------------------------
    path("", include("portal.workspace.urls")),
]
