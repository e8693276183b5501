from datetime import timedelta

import pytest
from rest_framework.test import APIClient

from tc_core.conftest import client_for, make_company, make_group, make_invitation, make_user
from tc_core.groups.models import GroupMembership
from tc_core.iam.models import UserProfile
from tc_core.invitations.models import InvitationCode

pytestmark = pytest.mark.django_db


@pytest.fixture
def company_manager(company):
    manager = make_user("manager@acme.test", roles=["COMPANY"])
    UserProfile.objects.create(user=manager, company=company)
    return manager


# -------------------------
# Public check / validate / use
# -------------------------

def test_check_valid_company_code(company):
    make_invitation(code="ABC-1234", company=company, max_uses=50, current_uses=49)

    res = APIClient().post("/api/public/company-invitations/check/", {"invitationCode": "abc-1234"}, format="json")

    assert res.status_code == 200
    body = res.json()
    assert body["isValid"] is True
    assert body["reason"] is None
    assert body["companyName"] == company.company_name
    assert body["groupName"] is None
    assert body["remainingUses"] == 1
    assert body["expiresAt"]


@pytest.mark.parametrize(
    "kwargs, reason",
    [
        ({"is_active": False}, "deactivated"),
        ({"expires_in": timedelta(days=-1)}, "expired"),
        ({"max_uses": 2, "current_uses": 2}, "usage_limit_reached"),
    ],
)
def test_check_reports_reason_with_200(company, kwargs, reason):
    make_invitation(code="BAD-0001", company=company, **kwargs)

    res = APIClient().post("/api/public/company-invitations/check/", {"invitationCode": "BAD-0001"}, format="json")

    assert res.status_code == 200
    body = res.json()
    assert body["isValid"] is False
    assert body["reason"] == reason
    assert body["message"]


def test_check_unknown_code(db):
    res = APIClient().post("/api/public/company-invitations/check/", {"invitationCode": "NOPE-0000"}, format="json")
    assert res.status_code == 200
    assert res.json()["reason"] == "not_found"


def test_check_requires_a_code(db):
    res = APIClient().post("/api/public/company-invitations/check/", {"invitationCode": ""}, format="json")

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "validation_error"
    assert body["error"]["request_id"]


def test_check_does_not_consume_the_code(company):
    inv = make_invitation(code="ABC-1234", company=company)
    client = APIClient()
    for _ in range(3):
        client.post("/api/public/company-invitations/check/", {"invitationCode": "ABC-1234"}, format="json")

    inv.refresh_from_db()
    assert inv.current_uses == 0


def test_validate_group_code_returns_group_and_capacity(group):
    make_invitation(code="GRP-0001", group=group)
    GroupMembership.objects.create(group=group, user=make_user("m1@tc.test"))

    res = APIClient().get("/api/public/groups/invitation/grp-0001/validate/")

    assert res.status_code == 200
    body = res.json()
    assert body["valid"] is True
    assert body["group"]["id"] == group.id
    assert body["group"]["registrationOpen"] is True
    assert body["group"]["capacity"]["currentParticipants"] == 1
    assert body["group"]["capacity"]["availableSpots"] == 19
    assert body["group"]["company"]["name"] == group.company.company_name


def test_validate_group_endpoint_ignores_company_codes(company):
    make_invitation(code="ABC-1234", company=company)

    res = APIClient().get("/api/public/groups/invitation/ABC-1234/validate/")

    assert res.status_code == 200
    assert res.json() == {"valid": False, "reason": "not_found", "error": "Invitation code not found."}


def test_use_group_invitation(group, student):
    inv = make_invitation(code="GRP-0001", group=group)

    res = APIClient().post(
        "/api/public/groups/use-invitation/",
        {"invitationCode": "GRP-0001", "userId": student.id},
        format="json",
    )

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["groupId"] == group.id
    assert body["companyId"] == group.company_id
    inv.refresh_from_db()
    assert inv.current_uses == 1


def test_use_group_invitation_when_group_is_full(company, student):
    group = make_group(company=company, max_participants=1)
    GroupMembership.objects.create(group=group, user=make_user("first@tc.test"))
    make_invitation(code="GRP-FULL", group=group)

    res = APIClient().post(
        "/api/public/groups/use-invitation/",
        {"invitationCode": "GRP-FULL", "userId": student.id},
        format="json",
    )

    assert res.status_code == 409
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "capacity_exceeded"
    assert body["error"]["message"]


def test_use_unknown_code_is_404_envelope(student):
    res = APIClient().post(
        "/api/public/groups/use-invitation/",
        {"invitationCode": "NOPE-0000", "userId": student.id},
        format="json",
    )

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "not_found"


# -------------------------
# Company invitation management
# -------------------------

def test_staff_creates_company_invitation(company, office_user):
    res = client_for(office_user).post(
        "/api/company-invitations/",
        {"companyId": company.id, "maxUses": 10, "validForDays": 7},
        format="json",
    )

    assert res.status_code == 201
    inv = res.json()["invitation"]
    assert inv["scope"] == "company"
    assert inv["companyId"] == company.id
    assert inv["companyName"] == company.company_name
    assert inv["maxUses"] == 10
    assert inv["currentUses"] == 0
    assert inv["remainingUses"] == 10
    assert inv["isUsable"] is True
    assert inv["createdByName"] == office_user.username


def test_create_rejects_out_of_range_max_uses(company, api_client):
    res = api_client.post("/api/company-invitations/", {"companyId": company.id, "maxUses": 5000}, format="json")

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "validation_error"
    assert not InvitationCode.objects.exists()


def test_company_manager_creates_for_own_company_only(company, company_manager):
    other = make_company(tax_number="111222333", name="Other Co")
    client = client_for(company_manager)

    own = client.post("/api/company-invitations/", {"companyId": company.id}, format="json")
    foreign = client.post("/api/company-invitations/", {"companyId": other.id}, format="json")

    assert own.status_code == 201
    assert foreign.status_code == 403
    assert foreign.json()["error"]["code"] == "permission_denied"


def test_student_cannot_create_invitations(company, student):
    res = client_for(student).post("/api/company-invitations/", {"companyId": company.id}, format="json")
    assert res.status_code == 403


def test_anonymous_cannot_create_invitations(company):
    res = APIClient().post("/api/company-invitations/", {"companyId": company.id}, format="json")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "not_authenticated"


def test_list_company_invitations(company, company_manager):
    make_invitation(code="AAA-0001", company=company)
    make_invitation(code="AAA-0002", company=company, is_active=False)
    make_invitation(code="BBB-0001", company=make_company(tax_number="444555666", name="Else"))

    res = client_for(company_manager).get(f"/api/company-invitations/company/{company.id}/")

    assert res.status_code == 200
    codes = {i["invitationCode"] for i in res.json()["invitations"]}
    assert codes == {"AAA-0001", "AAA-0002"}


def test_deactivate_company_invitation(company, api_client):
    inv = make_invitation(code="ABC-1234", company=company)

    res = api_client.put(f"/api/company-invitations/{inv.id}/deactivate/")
    again = api_client.put(f"/api/company-invitations/{inv.id}/deactivate/")

    assert res.status_code == 200
    assert res.json()["invitation"]["isActive"] is False
    assert again.status_code == 200
    check = APIClient().post("/api/public/company-invitations/check/", {"invitationCode": "ABC-1234"}, format="json")
    assert check.json()["reason"] == "deactivated"


def test_deactivate_foreign_invitation_is_forbidden(company_manager):
    other = make_company(tax_number="777888999", name="Rival")
    inv = make_invitation(code="RIV-0001", company=other)

    res = client_for(company_manager).put(f"/api/company-invitations/{inv.id}/deactivate/")

    assert res.status_code == 403
    inv.refresh_from_db()
    assert inv.is_active is True
