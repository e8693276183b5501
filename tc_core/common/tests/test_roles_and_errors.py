import pytest
from django.contrib.auth.models import Group
from django.core.management import call_command
from rest_framework.exceptions import NotFound
from rest_framework.test import APIRequestFactory

from tc_core.common.api.exceptions import ConflictError, api_exception_handler
from tc_core.common.permissions import ALL_ROLES, user_roles, is_staff_user
from tc_core.conftest import make_user
from tc_core.groups.exceptions import CapacityExceeded

pytestmark = pytest.mark.django_db


def test_ensure_roles_creates_all_groups():
    call_command("ensure_roles")
    call_command("ensure_roles")

    assert set(Group.objects.values_list("name", flat=True)) == set(ALL_ROLES)


def test_role_resolution():
    superuser = make_user("root@tc.test", is_superuser=True)
    plain = make_user("plain@tc.test")
    office = make_user("office@tc.test", roles=["OFFICE_WORKER"])

    assert user_roles(superuser) == {"ADMIN"}
    assert user_roles(plain) == {"STUDENT"}
    assert is_staff_user(office) is True
    assert is_staff_user(plain) is False


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (ConflictError("Only pending companies can be approved."), 409, "conflict"),
        (CapacityExceeded(), 409, "capacity_exceeded"),
        (NotFound("Group not found."), 404, "not_found"),
    ],
)
def test_error_envelope(exc, status, code):
    request = APIRequestFactory().get("/api/anything/")

    res = api_exception_handler(exc, {"request": request})

    assert res.status_code == status
    assert res.data["success"] is False
    assert res.data["error"]["code"] == code
    assert res.data["error"]["message"] == str(exc.detail)
    assert res.data["error"]["request_id"]


def test_unhandled_error_becomes_500_envelope():
    request = APIRequestFactory().get("/api/anything/")

    res = api_exception_handler(RuntimeError("boom"), {"request": request})

    assert res.status_code == 500
    assert res.data["error"]["code"] == "server_error"
    assert res.data["error"]["message"] == "Unexpected server error."
