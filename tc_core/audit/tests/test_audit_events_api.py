import pytest
from rest_framework.test import APIClient

from tc_core.audit.models import AuditEvent
from tc_core.audit.services import AuditService
from tc_core.companies.services import CompanyService
from tc_core.conftest import client_for

pytestmark = pytest.mark.django_db


def test_log_writes_event(user):
    record = AuditService.log(
        event_code="invitation.created",
        entity_type="InvitationCode",
        entity_id=7,
        actor_user_id=user.id,
    )

    assert record.metadata == {}
    event = AuditEvent.objects.get()
    assert (event.event_code, event.entity_id, event.actor_user_id) == ("invitation.created", 7, user.id)


def test_admin_lists_events_newest_first(api_client, user, pending_company):
    CompanyService.approve(company_id=pending_company.id, actor_user_id=user.id)
    AuditService.log(event_code="group.created", entity_type="TrainingGroup", entity_id=1, actor_user_id=user.id)

    res = api_client.get("/api/audit/events/")

    assert res.status_code == 200
    results = res.json()["results"]
    assert [e["eventCode"] for e in results] == ["group.created", "company.approved"]
    assert results[0]["timestamp"]


def test_filters(api_client, user, pending_company):
    CompanyService.approve(company_id=pending_company.id, actor_user_id=user.id)
    AuditService.log(event_code="group.created", entity_type="TrainingGroup", entity_id=1, actor_user_id=None)

    by_type = api_client.get("/api/audit/events/", {"entityType": "Company", "entityId": pending_company.id})
    by_actor = api_client.get("/api/audit/events/", {"actorUserId": user.id})
    bad = api_client.get("/api/audit/events/", {"entityId": "abc"})

    assert [e["eventCode"] for e in by_type.json()["results"]] == ["company.approved"]
    assert by_actor.json()["count"] == 1
    assert bad.status_code == 400


def test_audit_is_admin_only(office_user):
    assert client_for(office_user).get("/api/audit/events/").status_code == 403
    assert APIClient().get("/api/audit/events/").status_code == 401
