# tc_core/groups/exceptions.py
from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import APIException


class CapacityExceeded(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The group has no free places left."
    default_code = "capacity_exceeded"
    reason = "capacity_exceeded"
