import re
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from tc_core.audit.models import AuditEvent
from tc_core.conftest import make_group, make_user
from tc_core.groups.models import GroupMembership, GroupStatus
from tc_core.groups.services import GroupService
from tc_core.invitations.codes import CODE_ALPHABET, generate_code, generate_unique_code, normalize_code
from tc_core.invitations.exceptions import InvitationRejected
from tc_core.invitations.models import InvitationScope
from tc_core.invitations.services import InvitationService

pytestmark = pytest.mark.django_db

CODE_RE = re.compile(r"^[A-Z2-9]{4}-[A-Z2-9]{4}$")


def test_generated_codes_avoid_ambiguous_characters():
    for _ in range(50):
        code = generate_code()
        assert CODE_RE.match(code)
        assert not set(code.replace("-", "")) & set("0O1I")
    assert set(CODE_ALPHABET).isdisjoint("0O1I")


def test_generate_unique_code_gives_up_after_attempts():
    with pytest.raises(RuntimeError):
        generate_unique_code(lambda code: True, attempts=3)


def test_normalize_code():
    assert normalize_code("  ab12-cd34 ") == "AB12-CD34"
    assert normalize_code(None) == ""


def test_company_invitation_uses_defaults(company, user):
    inv = InvitationService.create_company_invitation(company_id=company.id, actor_user_id=user.id)

    assert CODE_RE.match(inv.code)
    assert inv.scope == InvitationScope.COMPANY
    assert inv.company_id == company.id
    assert inv.group_id is None
    assert inv.max_uses == 50
    assert inv.current_uses == 0
    assert inv.is_active is True
    assert inv.created_by_id == user.id
    delta = inv.expires_at - timezone.now()
    assert timedelta(days=29, hours=23) < delta <= timedelta(days=30)
    assert AuditEvent.objects.filter(event_code="invitation.created", entity_id=inv.id).exists()


def test_company_invitation_requires_active_company(pending_company):
    with pytest.raises(ValidationError):
        InvitationService.create_company_invitation(company_id=pending_company.id)


def test_company_invitation_for_unknown_company():
    with pytest.raises(NotFound):
        InvitationService.create_company_invitation(company_id=999999)


@pytest.mark.parametrize("max_uses", [0, 1001])
def test_max_uses_out_of_range(company, max_uses):
    with pytest.raises(ValidationError):
        InvitationService.create_company_invitation(company_id=company.id, max_uses=max_uses)


@pytest.mark.parametrize("days", [0, 366])
def test_validity_out_of_range(company, days):
    with pytest.raises(ValidationError):
        InvitationService.create_company_invitation(company_id=company.id, valid_for_days=days)


def test_group_invitation_with_explicit_expiry(group):
    expires = timezone.now() + timedelta(days=3)

    inv = InvitationService.create_group_invitation(
        group_id=group.id, max_uses=5, expires_at=expires, description="  Spring intake "
    )

    assert inv.scope == InvitationScope.GROUP
    assert inv.group_id == group.id
    assert inv.company_id is None
    assert inv.expires_at == expires
    assert inv.description == "Spring intake"


def test_group_invitation_expiry_must_be_in_future(group):
    with pytest.raises(ValidationError):
        InvitationService.create_group_invitation(group_id=group.id, expires_at=timezone.now() - timedelta(minutes=1))


def test_group_invitation_blocked_when_group_is_full(company):
    group = make_group(company=company, max_participants=20)
    users = [make_user(f"p{i}@tc.test") for i in range(20)]
    GroupService.add_users(group_id=group.id, user_ids=[u.id for u in users])
    group.refresh_from_db()
    assert group.status == GroupStatus.FULL

    with pytest.raises(InvitationRejected) as exc:
        InvitationService.create_group_invitation(group_id=group.id)

    assert exc.value.reason == "capacity_exceeded"
    assert not group.invitation_codes.exists()


def test_group_invitation_blocked_for_draft_group(company):
    group = make_group(company=company, status=GroupStatus.DRAFT)

    with pytest.raises(InvitationRejected) as exc:
        InvitationService.create_group_invitation(group_id=group.id)

    assert exc.value.reason == "validation_error"


def test_group_invitation_allowed_again_after_a_place_frees_up(company):
    group = make_group(company=company, max_participants=1)
    member = make_user("only@tc.test")
    GroupService.add_users(group_id=group.id, user_ids=[member.id])

    GroupService.remove_user(group_id=group.id, user_id=member.id)

    group.refresh_from_db()
    assert group.status == GroupStatus.ACTIVE
    assert not GroupMembership.objects.filter(group=group, is_active=True).exists()
    inv = InvitationService.create_group_invitation(group_id=group.id)
    assert inv.is_active is True


def test_deactivate_is_idempotent(company, user):
    inv = InvitationService.create_company_invitation(company_id=company.id)

    first = InvitationService.deactivate(invitation_id=inv.id, actor_user_id=user.id)
    stamp = first.deactivated_at
    second = InvitationService.deactivate(invitation_id=inv.id, actor_user_id=user.id)

    assert first.is_active is False
    assert second.deactivated_at == stamp
    assert AuditEvent.objects.filter(event_code="invitation.deactivated", entity_id=inv.id).count() == 1


def test_deactivate_unknown_invitation():
    with pytest.raises(NotFound):
        InvitationService.deactivate(invitation_id=424242)
