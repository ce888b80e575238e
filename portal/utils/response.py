# utils/response.py
from django.http import JsonResponse
from rest_framework.response import Response


def api_payload(status_code=0, status="success", data=None, error_code=None, error_message=None) -> dict:
    """
    Standard API envelope shared by DRF views and plain Django responses.
    """
    return {
        "statusCode": status_code,
        "status": status,
        "data": data or {},
        "errorCode": error_code,
        "errorMessage": error_message
    }


def _http_status(status_code: int) -> int:
    return status_code if status_code >= 100 else 200


def api_response(status_code=0, status="success", data=None, error_code=None, error_message=None):
    """
    Standardized API response
    """
    return Response(
        api_payload(status_code, status, data, error_code, error_message),
        status=_http_status(status_code),
    )


def json_response(status_code=0, status="success", data=None, error_code=None, error_message=None):
    """
    Same envelope for code paths that run outside DRF (middleware).
    """
    return JsonResponse(
        api_payload(status_code, status, data, error_code, error_message),
        status=_http_status(status_code),
    )
