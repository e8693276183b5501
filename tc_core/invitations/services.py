# tc_core/invitations/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from tc_core.audit.services import AuditService
from tc_core.companies.models import Company, CompanyStatus
from tc_core.groups.capacity import capacity_for
from tc_core.groups.models import GroupMembership, GroupStatus, MembershipSource
from tc_core.groups.services import lock_group, sync_capacity_status
from tc_core.iam.services.membership import link_company
from tc_core.invitations.codes import generate_unique_code, normalize_code
from tc_core.invitations.exceptions import InvitationRejected, RejectionReason
from tc_core.invitations.models import MAX_USES_LIMIT, InvitationCode, InvitationRedemption, InvitationScope
from tc_core.invitations.selectors import code_exists
from tc_core.invitations.validation import classify

logger = logging.getLogger(__name__)

MAX_VALID_DAYS = 365


def _check_max_uses(max_uses: Optional[int]) -> int:
    if max_uses is None:
        max_uses = settings.INVITATION_DEFAULT_MAX_USES
    if not 1 <= max_uses <= MAX_USES_LIMIT:
        raise ValidationError({"maxUses": f"Must be between 1 and {MAX_USES_LIMIT}."})
    return max_uses


def _expiry(*, now: datetime, valid_for_days: Optional[int], expires_at: Optional[datetime] = None) -> datetime:
    if expires_at is not None:
        if expires_at <= now:
            raise ValidationError({"expiresAt": "Must be in the future."})
        return expires_at

    if valid_for_days is None:
        valid_for_days = settings.INVITATION_DEFAULT_VALID_DAYS
    if not 1 <= valid_for_days <= MAX_VALID_DAYS:
        raise ValidationError({"validForDays": f"Must be between 1 and {MAX_VALID_DAYS}."})
    return now + timedelta(days=valid_for_days)


class InvitationService:
    """
    Issuing and revoking invitation codes.
    """

    @staticmethod
    @transaction.atomic
    def create_company_invitation(
        *,
        company_id: int,
        max_uses: Optional[int] = None,
        valid_for_days: Optional[int] = None,
        actor_user_id: Optional[int] = None,
    ) -> InvitationCode:
        company = Company.objects.filter(id=company_id).first()
        if company is None:
            raise NotFound("Company not found.")
        if company.status != CompanyStatus.ACTIVE:
            raise ValidationError({"companyId": "Invitations can only be issued for approved companies."})

        now = timezone.now()
        invitation = InvitationCode.objects.create(
            code=generate_unique_code(code_exists),
            scope=InvitationScope.COMPANY,
            company=company,
            max_uses=_check_max_uses(max_uses),
            expires_at=_expiry(now=now, valid_for_days=valid_for_days),
            created_by_id=actor_user_id,
        )

        AuditService.log(
            event_code="invitation.created",
            entity_type="InvitationCode",
            entity_id=invitation.id,
            actor_user_id=actor_user_id,
            metadata={"scope": invitation.scope, "company_id": company.id, "max_uses": invitation.max_uses},
        )
        logger.info("Created company invitation code %s for company %s", invitation.code, company.id)
        return invitation

    @staticmethod
    @transaction.atomic
    def create_group_invitation(
        *,
        group_id: int,
        max_uses: Optional[int] = None,
        expires_at: Optional[datetime] = None,
        valid_for_days: Optional[int] = None,
        description: str = "",
        actor_user_id: Optional[int] = None,
    ) -> InvitationCode:
        group = lock_group(group_id)

        cap = capacity_for(group)
        if not cap.has_capacity:
            logger.warning("Refused invitation for full group %s (%s/%s)", group.id, cap.current_participants, cap.max_participants)
            raise InvitationRejected(
                RejectionReason.CAPACITY_EXCEEDED,
                "The group is full, no new invitation codes can be issued.",
            )
        if group.status != GroupStatus.ACTIVE:
            raise InvitationRejected(
                RejectionReason.VALIDATION_ERROR,
                f"Invitation codes can only be issued for active groups (group is {group.status}).",
            )

        now = timezone.now()
        invitation = InvitationCode.objects.create(
            code=generate_unique_code(code_exists),
            scope=InvitationScope.GROUP,
            group=group,
            max_uses=_check_max_uses(max_uses),
            expires_at=_expiry(now=now, valid_for_days=valid_for_days, expires_at=expires_at),
            description=(description or "").strip(),
            created_by_id=actor_user_id,
        )

        AuditService.log(
            event_code="invitation.created",
            entity_type="InvitationCode",
            entity_id=invitation.id,
            actor_user_id=actor_user_id,
            metadata={"scope": invitation.scope, "group_id": group.id, "max_uses": invitation.max_uses},
        )
        logger.info("Created group invitation code %s for group %s", invitation.code, group.id)
        return invitation

    @staticmethod
    @transaction.atomic
    def deactivate(*, invitation_id: int, actor_user_id: Optional[int] = None) -> InvitationCode:
        try:
            invitation = InvitationCode.objects.select_for_update().get(id=invitation_id)
        except InvitationCode.DoesNotExist:
            raise NotFound("Invitation not found.")

        # idempotent no-op
        if not invitation.is_active:
            return invitation

        invitation.is_active = False
        invitation.deactivated_at = timezone.now()
        invitation.save(update_fields=["is_active", "deactivated_at", "updated_at"])

        AuditService.log(
            event_code="invitation.deactivated",
            entity_type="InvitationCode",
            entity_id=invitation.id,
            actor_user_id=actor_user_id,
            metadata={"code": invitation.code, "current_uses": invitation.current_uses},
        )
        logger.info("Deactivated invitation code %s", invitation.code)
        return invitation


@dataclass(frozen=True)
class RedemptionResult:
    success: bool
    invitation_id: int
    group_id: Optional[int]
    group_name: Optional[str]
    company_id: Optional[int]
    company_name: Optional[str]
    message: str


class EnrollmentLinker:
    """
    Consumes an invitation code for one user and attaches them to its target.

    Everything happens in one transaction: the code and group rows are locked,
    the code is re-validated from scratch, and `current_uses` is bumped with a
    conditional UPDATE that can never overshoot `max_uses`. Any rejection
    rolls back every write made so far.
    """

    @staticmethod
    def redeem(
        *,
        code: str,
        user_id: int,
        scope: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RedemptionResult:
        normalized = normalize_code(code)
        if not normalized:
            raise InvitationRejected(RejectionReason.VALIDATION_ERROR, "Invitation code is required.")

        try:
            return EnrollmentLinker._redeem(code=normalized, user_id=user_id, scope=scope, now=now or timezone.now())
        except InvitationRejected as exc:
            logger.info("Invitation %s rejected for user %s: %s", normalized, user_id, exc.reason)
            raise

    @staticmethod
    @transaction.atomic
    def _redeem(*, code: str, user_id: int, scope: Optional[str], now: datetime) -> RedemptionResult:
        qs = InvitationCode.objects.select_for_update().filter(code=code)
        if scope:
            qs = qs.filter(scope=scope)
        invitation = qs.first()
        if invitation is None:
            raise InvitationRejected(RejectionReason.NOT_FOUND)

        reason = classify(invitation, now)
        if reason is not None:
            raise InvitationRejected(reason)

        if not get_user_model().objects.filter(id=user_id).exists():
            raise InvitationRejected(RejectionReason.VALIDATION_ERROR, "User not found.")

        if InvitationRedemption.objects.filter(invitation=invitation, user_id=user_id).exists():
            raise InvitationRejected(RejectionReason.VALIDATION_ERROR, "You have already used this invitation code.")

        group = None
        company = invitation.company
        if invitation.scope == InvitationScope.GROUP:
            group = lock_group(invitation.group_id)
            company = group.company

            if GroupMembership.objects.filter(group=group, user_id=user_id, is_active=True).exists():
                raise InvitationRejected(RejectionReason.VALIDATION_ERROR, "You are already a member of this group.")

            cap = capacity_for(group)
            if group.status == GroupStatus.FULL or not cap.has_capacity:
                logger.warning("Group %s full at redemption of %s (%s/%s)", group.id, code, cap.current_participants, cap.max_participants)
                raise InvitationRejected(RejectionReason.CAPACITY_EXCEEDED)
            if group.status != GroupStatus.ACTIVE:
                raise InvitationRejected(
                    RejectionReason.VALIDATION_ERROR,
                    "This group is not accepting registrations.",
                )
            if group.registration_deadline is not None and now >= group.registration_deadline:
                raise InvitationRejected(RejectionReason.VALIDATION_ERROR, "Registration for this group has closed.")

        updated = InvitationCode.objects.filter(
            id=invitation.id,
            is_active=True,
            expires_at__gt=now,
            current_uses__lt=F("max_uses"),
        ).update(current_uses=F("current_uses") + 1, updated_at=now)

        if updated == 0:
            # lost a race since the check above; report what the row says now
            invitation.refresh_from_db()
            raise InvitationRejected(classify(invitation, now) or RejectionReason.USAGE_LIMIT_REACHED)

        InvitationRedemption.objects.create(invitation=invitation, user_id=user_id)

        if group is not None:
            membership, created = GroupMembership.objects.get_or_create(
                group=group,
                user_id=user_id,
                defaults={"source": MembershipSource.INVITATION, "invitation": invitation},
            )
            if not created:
                membership.is_active = True
                membership.source = MembershipSource.INVITATION
                membership.invitation = invitation
                membership.save(update_fields=["is_active", "source", "invitation", "updated_at"])
            sync_capacity_status(group)

        company_linked = False
        if company is not None:
            # an existing company link is kept, same as a manual add to the group
            company_linked = link_company(user_id=user_id, company_id=company.id)
            if not company_linked:
                logger.info("User %s keeps their company; invitation %s targets company %s", user_id, code, company.id)

        AuditService.log(
            event_code="invitation.redeemed",
            entity_type="InvitationCode",
            entity_id=invitation.id,
            actor_user_id=user_id,
            metadata={
                "scope": invitation.scope,
                "group_id": group.id if group else None,
                "company_id": company.id if company else None,
                "company_linked": company_linked,
            },
        )
        logger.info("Invitation %s redeemed by user %s", code, user_id)

        if group is not None:
            message = f"You have joined the group {group.name}."
        elif company_linked:
            message = f"You have been linked to {company.company_name}."
        else:
            message = "Invitation accepted. Your account stays linked to its current company."

        return RedemptionResult(
            success=True,
            invitation_id=invitation.id,
            group_id=group.id if group else None,
            group_name=group.name if group else None,
            company_id=company.id if company else None,
            company_name=company.company_name if company else None,
            message=message,
        )
