"""
DRF Permission Classes for RBAC
"""

from rest_framework import permissions
from rest_framework.exceptions import NotAuthenticated

from portal.platform.accounts.session import SessionStore, invalidate_session


class HasValidSession(permissions.BasePermission):
    """
    Require a valid backend session token.

    Usage:
        permission_classes = [HasValidSession]
    """

    message = "A valid session is required."

    def has_permission(self, request, view):
        if not SessionStore(request.session).is_session_valid():
            invalidate_session(request)
            raise NotAuthenticated(self.message)
        return True
