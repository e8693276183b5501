# tc_core/invitations/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from tc_core.invitations.models import InvitationCode, InvitationScope


def invitation_qs() -> QuerySet[InvitationCode]:
    return InvitationCode.objects.select_related("company", "group", "group__company", "created_by")


def find_by_code(code: str, *, scope: str | None = None) -> InvitationCode | None:
    """Exact lookup on the normalised (upper-case) code."""
    qs = invitation_qs().filter(code=code)
    if scope:
        qs = qs.filter(scope=scope)
    return qs.first()


def code_exists(code: str) -> bool:
    return InvitationCode.objects.filter(code=code).exists()


def list_company_invitations(*, company_id: int) -> QuerySet[InvitationCode]:
    return invitation_qs().filter(scope=InvitationScope.COMPANY, company_id=company_id).order_by("-created_at")


def list_group_invitations(*, group_id: int) -> QuerySet[InvitationCode]:
    return invitation_qs().filter(scope=InvitationScope.GROUP, group_id=group_id).order_by("-created_at")
