import pytest
from rest_framework.exceptions import NotFound, ValidationError

from tc_core.audit.models import AuditEvent
from tc_core.common.api.exceptions import ConflictError
from tc_core.companies.models import CompanyStatus
from tc_core.companies.services import CompanyService

pytestmark = pytest.mark.django_db

REGISTRATION = {
    "company_name": "Fast Freight",
    "tax_number": "200300400",
    "address": "5 Port Road, Varna",
    "manager_name": "Georgi Dimitrov",
    "phone_number": "0899001122",
    "email": "Office@FastFreight.test",
    "contact_person_name": "Elena Koleva",
}


def test_register_creates_pending_company():
    company = CompanyService.register(**REGISTRATION)

    assert company.status == CompanyStatus.PENDING
    assert company.email == "office@fastfreight.test"
    assert AuditEvent.objects.filter(event_code="company.registered", entity_id=company.id).exists()


def test_register_rejects_duplicate_tax_number():
    CompanyService.register(**REGISTRATION)

    with pytest.raises(ValidationError):
        CompanyService.register(**{**REGISTRATION, "company_name": "Copycat"})


@pytest.mark.parametrize(
    "field, value",
    [("tax_number", "12345"), ("phone_number", "0888"), ("address", "abc"), ("email", "")],
)
def test_register_validates_fields(field, value):
    with pytest.raises(ValidationError):
        CompanyService.register(**{**REGISTRATION, field: value})


def test_approve_pending_company(pending_company, user):
    company = CompanyService.approve(company_id=pending_company.id, actor_user_id=user.id)

    assert company.status == CompanyStatus.ACTIVE
    assert company.reviewed_by_id == user.id
    assert company.reviewed_at is not None


def test_approve_twice_is_noop(pending_company, user):
    first = CompanyService.approve(company_id=pending_company.id, actor_user_id=user.id)
    second = CompanyService.approve(company_id=pending_company.id, actor_user_id=user.id)

    assert second.status == CompanyStatus.ACTIVE
    assert second.reviewed_at == first.reviewed_at
    assert AuditEvent.objects.filter(event_code="company.approved", entity_id=pending_company.id).count() == 1


def test_reject_with_reason(pending_company, user):
    company = CompanyService.reject(company_id=pending_company.id, actor_user_id=user.id, reason="  Unknown tax number ")

    assert company.status == CompanyStatus.INACTIVE
    assert company.rejection_reason == "Unknown tax number"


def test_reject_twice_is_noop(pending_company, user):
    CompanyService.reject(company_id=pending_company.id, actor_user_id=user.id, reason="first")
    again = CompanyService.reject(company_id=pending_company.id, actor_user_id=user.id, reason="second")

    assert again.rejection_reason == "first"
    assert AuditEvent.objects.filter(event_code="company.rejected", entity_id=pending_company.id).count() == 1


def test_cannot_approve_rejected_company(pending_company):
    CompanyService.reject(company_id=pending_company.id)

    with pytest.raises(ConflictError):
        CompanyService.approve(company_id=pending_company.id)


def test_cannot_reject_approved_company(company):
    with pytest.raises(ConflictError):
        CompanyService.reject(company_id=company.id)


def test_unknown_company():
    with pytest.raises(NotFound):
        CompanyService.approve(company_id=999999)
