"""
OpenAPI schema endpoint for the portal API
"""
import logging

from drf_spectacular.views import SpectacularAPIView
from rest_framework import status, permissions

from portal.utils.response import api_response

logger = logging.getLogger(__name__)


class PortalSchemaView(SpectacularAPIView):
    """
    Public schema endpoint. Generation failures (usually a view whose
    serializer cannot be introspected) come back in the standard envelope
    instead of a bare 500 page.
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request, *args, **kwargs):
        try:
            return super().get(request, *args, **kwargs)
        except Exception as exc:
            logger.exception(f"OpenAPI schema generation failed: {exc}")
            return api_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "failure", {},
                "SCHEMA_GENERATION_ERROR",
                "Failed to generate the API schema. Check server logs for details."
            )
