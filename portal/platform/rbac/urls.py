from django.urls import path

from .views import CheckPermissionView, MyPermissionsView, RefreshPermissionsView

urlpatterns = [
    path("session/permissions", MyPermissionsView.as_view(), name="session-permissions"),
    path("session/permissions/refresh", RefreshPermissionsView.as_view(), name="session-permissions-refresh"),
    path("session/permissions/check", CheckPermissionView.as_view(), name="session-permissions-check"),
]
