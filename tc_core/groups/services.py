# tc_core/groups/services.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from tc_core.audit.services import AuditService
from tc_core.companies.models import Company, CompanyStatus
from tc_core.courses.models import Course
from tc_core.groups.capacity import capacity_for, count_participants
from tc_core.groups.exceptions import CapacityExceeded
from tc_core.groups.models import GroupMembership, GroupStatus, MembershipSource, TrainingGroup
from tc_core.iam.services.membership import link_company

logger = logging.getLogger(__name__)

# Statuses staff may still add people to.
OPEN_FOR_MEMBERS = {GroupStatus.DRAFT, GroupStatus.ACTIVE, GroupStatus.FULL}


def lock_group(group_id: int) -> TrainingGroup:
    try:
        return TrainingGroup.objects.select_for_update().get(id=group_id)
    except TrainingGroup.DoesNotExist:
        raise NotFound("Group not found.")


def sync_capacity_status(group: TrainingGroup) -> bool:
    """
    Keep the stored status in line with the live participant count.
    Only active <-> full is automatic. Caller must hold the group row lock.
    """
    cap = capacity_for(group)
    new_status = None
    if group.status == GroupStatus.ACTIVE and not cap.has_capacity:
        new_status = GroupStatus.FULL
    elif group.status == GroupStatus.FULL and cap.has_capacity:
        new_status = GroupStatus.ACTIVE

    if new_status is None:
        return False

    old_status = group.status
    group.status = new_status
    group.save(update_fields=["status", "updated_at"])
    logger.info("Group %s status %s -> %s (%s/%s)", group.id, old_status, new_status, cap.current_participants, cap.max_participants)
    return True


class GroupService:
    """
    TrainingGroup write-model: lifecycle and manual membership.
    """

    @staticmethod
    def _resolve_company(company_id: Optional[int]) -> Optional[Company]:
        if company_id is None:
            return None
        company = Company.objects.filter(id=company_id).first()
        if company is None:
            raise ValidationError({"companyId": "Company not found."})
        if company.status != CompanyStatus.ACTIVE:
            raise ValidationError({"companyId": "Company is not active."})
        return company

    @staticmethod
    def _resolve_course(course_id: Optional[int]) -> Optional[Course]:
        if course_id is None:
            return None
        course = Course.objects.filter(id=course_id).first()
        if course is None:
            raise ValidationError({"courseId": "Course not found."})
        return course

    @staticmethod
    @transaction.atomic
    def create_group(
        *,
        name: str,
        description: str = "",
        company_id: Optional[int] = None,
        course_id: Optional[int] = None,
        max_participants: Optional[int] = None,
        status: str = GroupStatus.DRAFT,
        registration_deadline: Optional[datetime] = None,
        actor_user_id: Optional[int] = None,
    ) -> TrainingGroup:
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": "This field is required."})

        if max_participants is None:
            max_participants = settings.GROUP_DEFAULT_MAX_PARTICIPANTS
        if max_participants < 1:
            raise ValidationError({"maxParticipants": "Must be at least 1."})

        if status not in (GroupStatus.DRAFT, GroupStatus.ACTIVE):
            raise ValidationError({"status": "New groups start as draft or active."})

        group = TrainingGroup.objects.create(
            name=name,
            description=(description or "").strip(),
            company=GroupService._resolve_company(company_id),
            course=GroupService._resolve_course(course_id),
            max_participants=max_participants,
            status=status,
            registration_deadline=registration_deadline,
            created_by_id=actor_user_id,
        )

        AuditService.log(
            event_code="group.created",
            entity_type="TrainingGroup",
            entity_id=group.id,
            actor_user_id=actor_user_id,
            metadata={"status": group.status, "max_participants": group.max_participants},
        )
        return group

    @staticmethod
    @transaction.atomic
    def update_group(
        *,
        group_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        course_id: Optional[int] = None,
        max_participants: Optional[int] = None,
        registration_deadline: Optional[datetime] = None,
        clear_deadline: bool = False,
    ) -> TrainingGroup:
        group = lock_group(group_id)
        fields: list[str] = []

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError({"name": "This field may not be blank."})
            group.name = name
            fields.append("name")

        if description is not None:
            group.description = description.strip()
            fields.append("description")

        if course_id is not None:
            group.course = GroupService._resolve_course(course_id)
            fields.append("course")

        if max_participants is not None:
            current = count_participants(group.id)
            if max_participants < 1:
                raise ValidationError({"maxParticipants": "Must be at least 1."})
            if max_participants < current:
                raise ValidationError(
                    {"maxParticipants": f"Group already has {current} participants."}
                )
            group.max_participants = max_participants
            fields.append("max_participants")

        if clear_deadline:
            group.registration_deadline = None
            fields.append("registration_deadline")
        elif registration_deadline is not None:
            group.registration_deadline = registration_deadline
            fields.append("registration_deadline")

        if fields:
            fields.append("updated_at")
            group.save(update_fields=fields)

        sync_capacity_status(group)
        return group

    @staticmethod
    @transaction.atomic
    def set_status(*, group_id: int, status: str, actor_user_id: Optional[int] = None) -> TrainingGroup:
        if status not in GroupStatus.values:
            raise ValidationError({"status": f"Invalid status. Allowed: {list(GroupStatus.values)}"})

        group = lock_group(group_id)

        # idempotent no-op
        if group.status == status:
            return group

        if status == GroupStatus.FULL:
            raise ValidationError({"status": "A group becomes full automatically when its places run out."})

        old_status = group.status
        group.status = status
        group.save(update_fields=["status", "updated_at"])

        # re-opening a group that has no places left lands on full
        sync_capacity_status(group)

        AuditService.log(
            event_code="group.status_changed",
            entity_type="TrainingGroup",
            entity_id=group.id,
            actor_user_id=actor_user_id,
            metadata={"from": old_status, "to": group.status},
        )
        return group

    @staticmethod
    @transaction.atomic
    def add_users(
        *,
        group_id: int,
        user_ids: Iterable[int],
        actor_user_id: Optional[int] = None,
    ) -> list[GroupMembership]:
        """
        Add people to a group by hand. All-or-nothing: if the batch does not
        fit, nobody is added. Users that are already active members are skipped.
        """
        group = lock_group(group_id)

        if group.status not in OPEN_FOR_MEMBERS:
            raise ValidationError({"status": f"Cannot add users to a {group.status} group."})

        wanted = list(dict.fromkeys(int(u) for u in user_ids))
        if not wanted:
            raise ValidationError({"userIds": "At least one user is required."})

        User = get_user_model()
        found = set(User.objects.filter(id__in=wanted).values_list("id", flat=True))
        missing = [u for u in wanted if u not in found]
        if missing:
            raise ValidationError({"userIds": f"Unknown users: {missing}"})

        already = set(
            GroupMembership.objects.filter(group=group, user_id__in=wanted, is_active=True).values_list("user_id", flat=True)
        )
        to_add = [u for u in wanted if u not in already]

        cap = capacity_for(group)
        if len(to_add) > cap.available_spots:
            logger.warning(
                "Rejected adding %s users to group %s: %s places left",
                len(to_add),
                group.id,
                cap.available_spots,
            )
            raise CapacityExceeded(
                f"Only {cap.available_spots} places left in this group, cannot add {len(to_add)} users."
            )

        added: list[GroupMembership] = []
        for user_id in to_add:
            membership, created = GroupMembership.objects.get_or_create(
                group=group,
                user_id=user_id,
                defaults={"source": MembershipSource.MANUAL},
            )
            if not created:
                membership.is_active = True
                membership.save(update_fields=["is_active", "updated_at"])
            if group.company_id:
                link_company(user_id=user_id, company_id=group.company_id)
            added.append(membership)

        sync_capacity_status(group)

        if added:
            AuditService.log(
                event_code="group.members_added",
                entity_type="TrainingGroup",
                entity_id=group.id,
                actor_user_id=actor_user_id,
                metadata={"user_ids": [m.user_id for m in added]},
            )
        return added

    @staticmethod
    @transaction.atomic
    def remove_user(*, group_id: int, user_id: int, actor_user_id: Optional[int] = None) -> GroupMembership:
        group = lock_group(group_id)

        membership = GroupMembership.objects.filter(group=group, user_id=user_id).first()
        if membership is None:
            raise NotFound("User is not a member of this group.")

        # idempotent no-op
        if not membership.is_active:
            return membership

        membership.is_active = False
        membership.save(update_fields=["is_active", "updated_at"])

        sync_capacity_status(group)

        AuditService.log(
            event_code="group.member_removed",
            entity_type="TrainingGroup",
            entity_id=group.id,
            actor_user_id=actor_user_id,
            metadata={"user_id": user_id},
        )
        return membership
