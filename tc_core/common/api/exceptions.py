# tc_core/common/api/exceptions.py

from __future__ import annotations

import logging
import uuid
from typing import Any

from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Request failed."


def ensure_request_id(request) -> str:
    """
    Request id echoed in every error body so a report from the UI can be
    matched with the server log line.
    """
    if request is None:
        return uuid.uuid4().hex
    rid = getattr(request, "request_id", None)
    if not rid:
        rid = request.META.get("HTTP_X_REQUEST_ID") or uuid.uuid4().hex
        request.request_id = rid
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    """
    {"success": false, "error": {code, message, details, request_id}}

    The front end branches on `success` and shows `error.message` verbatim.
    """
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": ensure_request_id(request),
        },
    }


class ConflictError(APIException):
    """
    409 for a business rule that blocks the action, e.g. rejecting an
    already approved company.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"


def _error_code(exc: APIException, http_status: int) -> str:
    # domain exceptions (InvitationRejected, CapacityExceeded) carry their own reason
    reason = getattr(exc, "reason", None)
    if reason:
        return reason

    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)) or http_status == status.HTTP_401_UNAUTHORIZED:
        return "not_authenticated"
    if isinstance(exc, PermissionDenied) or http_status == status.HTTP_403_FORBIDDEN:
        return "permission_denied"
    if http_status == status.HTTP_404_NOT_FOUND:
        return "not_found"
    return getattr(exc, "default_code", None) or "error"


def _message_and_details(data: Any) -> tuple[str, Any]:
    """
    {"detail": msg}          -> (msg, None)
    {"detail": msg, **rest}  -> (msg, rest)
    [msg]                    -> (msg, None)
    field errors             -> (generic message, field errors)
    """
    if isinstance(data, dict) and "detail" in data:
        rest = {k: v for k, v in data.items() if k != "detail"}
        return str(data["detail"]), rest or None
    if isinstance(data, list) and len(data) == 1:
        return str(data[0]), None
    return GENERIC_MESSAGE, data


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    response = drf_exception_handler(exc, context)

    if response is None:
        logger.error(
            "Unhandled API error (request_id=%s)",
            ensure_request_id(request),
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return Response(
            build_error_envelope(request=request, code="server_error", message="Unexpected server error."),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    message, details = _message_and_details(response.data)
    response.data = build_error_envelope(
        request=request,
        code=_error_code(exc, response.status_code),
        message=message,
        details=details,
    )
    return response
