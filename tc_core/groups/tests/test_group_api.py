import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from tc_core.conftest import client_for, make_company, make_group, make_invitation, make_user
from tc_core.groups.models import GroupMembership, GroupStatus
from tc_core.groups.services import GroupService
from tc_core.iam.models import UserProfile
from tc_core.invitations.models import InvitationCode

pytestmark = pytest.mark.django_db


@pytest.fixture
def company_manager(company):
    manager = make_user("manager@acme.test", roles=["COMPANY"])
    UserProfile.objects.create(user=manager, company=company)
    return manager


def test_groups_require_authentication(db):
    res = APIClient().get("/api/groups/")
    assert res.status_code == 401


def test_create_and_list_groups(api_client, company):
    res = api_client.post(
        "/api/groups/",
        {"name": "Spring C", "companyId": company.id, "maxParticipants": 12, "status": "active"},
        format="json",
    )
    assert res.status_code == 201
    created = res.json()
    assert created["maxParticipants"] == 12
    assert created["currentParticipants"] == 0
    assert created["hasCapacity"] is True
    assert created["companyName"] == company.company_name

    listing = api_client.get("/api/groups/", {"companyId": company.id})
    assert listing.status_code == 200
    assert listing.json()["count"] == 1
    assert listing.json()["results"][0]["id"] == created["id"]


def test_create_rejects_zero_capacity(api_client):
    res = api_client.post("/api/groups/", {"name": "Empty", "maxParticipants": 0}, format="json")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "validation_error"


def test_company_manager_sees_only_own_groups(company, company_manager):
    own = make_group(name="Own", company=company)
    foreign = make_group(name="Foreign", company=make_company(tax_number="222333444", name="Else"))
    client = client_for(company_manager)

    listing = client.get("/api/groups/")
    hidden = client.get(f"/api/groups/{foreign.id}/")

    assert [g["id"] for g in listing.json()["results"]] == [own.id]
    assert hidden.status_code == 404


def test_company_manager_cannot_create_groups(company_manager):
    res = client_for(company_manager).post("/api/groups/", {"name": "Nope"}, format="json")
    assert res.status_code == 403


def test_capacity_endpoint(api_client, group):
    GroupMembership.objects.create(group=group, user=make_user("p@tc.test"))

    res = api_client.get(f"/api/groups/{group.id}/capacity/")

    assert res.status_code == 200
    cap = res.json()["capacity"]
    assert cap["currentParticipants"] == 1
    assert cap["availableSpots"] == 19
    assert cap["hasCapacity"] is True


def test_group_invitation_blocked_at_full_capacity(api_client, company):
    group = make_group(company=company, max_participants=20)
    GroupService.add_users(group_id=group.id, user_ids=[make_user(f"p{i}@tc.test").id for i in range(20)])

    res = api_client.post(f"/api/groups/{group.id}/invitations/", {"maxUses": 5}, format="json")

    assert res.status_code == 409
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "capacity_exceeded"
    assert not InvitationCode.objects.filter(group=group).exists()


def test_company_manager_issues_and_lists_group_invitations(company_manager, group):
    client = client_for(company_manager)

    created = client.post(f"/api/groups/{group.id}/invitations/", {"description": "Night shift"}, format="json")
    listing = client.get(f"/api/groups/{group.id}/invitations/")

    assert created.status_code == 201
    inv = created.json()["invitation"]
    assert inv["scope"] == "group"
    assert inv["groupId"] == group.id
    assert inv["companyId"] == group.company_id
    assert inv["description"] == "Night shift"
    assert [i["id"] for i in listing.json()["invitations"]] == [inv["id"]]


def test_deactivate_group_invitation(api_client, group):
    inv = make_invitation(code="GRP-0001", group=group)

    res = api_client.put(f"/api/groups/invitations/{inv.id}/deactivate/")

    assert res.status_code == 200
    assert res.json()["invitation"]["isActive"] is False


def test_add_and_remove_users(api_client, company):
    group = make_group(company=company, max_participants=2)
    a, b = make_user("a@tc.test"), make_user("b@tc.test")

    added = api_client.post(f"/api/groups/{group.id}/users/", {"userIds": [a.id, b.id]}, format="json")
    assert added.status_code == 200
    assert added.json()["group"]["status"] == GroupStatus.FULL
    assert {u["userId"] for u in added.json()["users"]} == {a.id, b.id}

    removed = api_client.delete(f"/api/groups/{group.id}/users/{a.id}/")
    assert removed.status_code == 204
    group.refresh_from_db()
    assert group.status == GroupStatus.ACTIVE


def test_add_users_over_capacity_is_conflict(api_client, company):
    group = make_group(company=company, max_participants=1)
    users = [make_user("a@tc.test"), make_user("b@tc.test")]

    res = api_client.post(f"/api/groups/{group.id}/users/", {"userIds": [u.id for u in users]}, format="json")

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "capacity_exceeded"
    assert not GroupMembership.objects.filter(group=group).exists()


def test_set_status(api_client, group):
    res = api_client.put(f"/api/groups/{group.id}/status/", {"status": "closed"}, format="json")

    assert res.status_code == 200
    assert res.json()["group"]["status"] == "closed"


def test_patch_clears_deadline(api_client, company):
    group = make_group(company=company, registration_deadline=timezone.now())

    res = api_client.patch(f"/api/groups/{group.id}/", {"registrationDeadline": None, "name": "Renamed"}, format="json")

    assert res.status_code == 200
    assert res.json()["registrationDeadline"] is None
    assert res.json()["name"] == "Renamed"


def test_available_users_excludes_members_and_staff(api_client, company, office_user):
    group = make_group(company=company)
    member, former = make_user("member@tc.test"), make_user("former@tc.test")
    free = make_user("free@tc.test", first_name="Freya")
    GroupService.add_users(group_id=group.id, user_ids=[member.id, former.id])
    GroupService.remove_user(group_id=group.id, user_id=former.id)

    res = api_client.get(f"/api/groups/{group.id}/available-users/")

    assert res.status_code == 200
    assert {u["id"] for u in res.json()["results"]} == {former.id, free.id}

    found = api_client.get(f"/api/groups/{group.id}/available-users/", {"search": "freya"})
    assert [u["id"] for u in found.json()["results"]] == [free.id]


def test_company_manager_cannot_list_available_users(company_manager, group):
    res = client_for(company_manager).get(f"/api/groups/{group.id}/available-users/")

    assert res.status_code == 403
