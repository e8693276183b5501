# tc_core/invitations/exceptions.py
from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import APIException


class RejectionReason:
    NOT_FOUND = "not_found"
    DEACTIVATED = "deactivated"
    EXPIRED = "expired"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    VALIDATION_ERROR = "validation_error"


REASON_MESSAGES = {
    RejectionReason.NOT_FOUND: "Invitation code not found.",
    RejectionReason.DEACTIVATED: "This invitation code has been deactivated.",
    RejectionReason.EXPIRED: "This invitation code has expired.",
    RejectionReason.USAGE_LIMIT_REACHED: "This invitation code has reached its usage limit.",
    RejectionReason.CAPACITY_EXCEEDED: "The group has no free places left.",
    RejectionReason.VALIDATION_ERROR: "Invalid invitation request.",
}

_REASON_STATUS = {
    RejectionReason.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RejectionReason.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}


class InvitationRejected(APIException):
    """
    Raised when an invitation cannot be used (or issued).
    `reason` becomes the error code in the API envelope.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Invitation rejected."
    default_code = "invitation_rejected"

    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        self.status_code = _REASON_STATUS.get(reason, status.HTTP_409_CONFLICT)
        super().__init__(detail=message or REASON_MESSAGES.get(reason, self.default_detail), code=reason)
