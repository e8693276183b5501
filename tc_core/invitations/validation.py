# tc_core/invitations/validation.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.utils import timezone

from tc_core.invitations.codes import normalize_code
from tc_core.invitations.exceptions import REASON_MESSAGES, InvitationRejected, RejectionReason
from tc_core.invitations.models import InvitationCode, InvitationScope
from tc_core.invitations.selectors import find_by_code


@dataclass(frozen=True)
class InvitationTarget:
    scope: str
    target_id: int
    name: str
    company_id: Optional[int] = None
    company_name: Optional[str] = None


@dataclass(frozen=True)
class InvitationCheck:
    valid: bool
    reason: Optional[str] = None
    invitation: Optional[InvitationCode] = None
    target: Optional[InvitationTarget] = None

    @property
    def message(self) -> str:
        if self.valid:
            return "Invitation code is valid."
        return REASON_MESSAGES.get(self.reason, "Invalid invitation code.")


def resolve_target(invitation: InvitationCode) -> InvitationTarget:
    if invitation.scope == InvitationScope.COMPANY:
        company = invitation.company
        return InvitationTarget(
            scope=invitation.scope,
            target_id=company.id,
            name=company.company_name,
            company_id=company.id,
            company_name=company.company_name,
        )

    group = invitation.group
    company = group.company
    return InvitationTarget(
        scope=invitation.scope,
        target_id=group.id,
        name=group.name,
        company_id=company.id if company else None,
        company_name=company.company_name if company else None,
    )


def classify(invitation: InvitationCode, now: datetime) -> Optional[str]:
    """
    First failing rule, in fixed order, or None when the code is usable.
    """
    if not invitation.is_active:
        return RejectionReason.DEACTIVATED
    if invitation.is_expired(now):
        return RejectionReason.EXPIRED
    if invitation.current_uses >= invitation.max_uses:
        return RejectionReason.USAGE_LIMIT_REACHED
    return None


def check_invitation(invitation: InvitationCode | None, *, now: datetime | None = None) -> InvitationCheck:
    if invitation is None:
        return InvitationCheck(valid=False, reason=RejectionReason.NOT_FOUND)

    now = now or timezone.now()
    reason = classify(invitation, now)
    if reason is not None:
        return InvitationCheck(valid=False, reason=reason, invitation=invitation)

    return InvitationCheck(valid=True, invitation=invitation, target=resolve_target(invitation))


def validate(code: str, *, scope: str | None = None, now: datetime | None = None) -> InvitationCheck:
    """
    Advisory, read-only check of an invitation code.

    Safe to call on every keystroke: it never writes. An empty code is a
    malformed request, not an invalid code, and raises.
    """
    normalized = normalize_code(code)
    if not normalized:
        raise InvitationRejected(RejectionReason.VALIDATION_ERROR, "Invitation code is required.")

    return check_invitation(find_by_code(normalized, scope=scope), now=now)
