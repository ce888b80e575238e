import pytest
from rest_framework.exceptions import NotAuthenticated, NotFound, PermissionDenied, ValidationError

from portal.utils.exception_handler import custom_exception_handler, format_validation_error


def handle(exc):
    return custom_exception_handler(exc, {"view": None})


@pytest.mark.parametrize("exc,status_code,error_code", [
    (NotAuthenticated(), 401, "AUTH_ERROR"),
    (PermissionDenied("Nope"), 403, "PERMISSION_DENIED"),
    (ValidationError({"email": ["Enter a valid email address."]}), 400, "VALIDATION_ERROR"),
    (NotFound(), 404, "API_EXCEPTION"),
    (RuntimeError("boom"), 500, "SERVER_ERROR"),
])
def test_errors_use_the_api_envelope(exc, status_code, error_code):
    response = handle(exc)

    assert response.status_code == status_code
    assert response.data["status"] == "failure"
    assert response.data["statusCode"] == status_code
    assert response.data["errorCode"] == error_code


def test_validation_messages_are_readable():
    detail = ValidationError({"return_url": ["Not a valid string"], "email": ["Required"]}).detail
    assert format_validation_error(detail) == "Return Url: Not a valid string. Email: Required"
