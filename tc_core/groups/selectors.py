# tc_core/groups/selectors.py
from __future__ import annotations

from django.db.models import Count, Q, QuerySet

from tc_core.groups.models import GroupMembership, TrainingGroup


def group_qs() -> QuerySet[TrainingGroup]:
    return TrainingGroup.objects.select_related("company", "course").annotate(
        participant_count=Count("memberships", filter=Q(memberships__is_active=True))
    )


def list_groups(
    *,
    company_id: int | None = None,
    status: str | None = None,
    search: str | None = None,
) -> QuerySet[TrainingGroup]:
    qs = group_qs()
    if company_id is not None:
        qs = qs.filter(company_id=company_id)
    if status:
        qs = qs.filter(status=status)
    if search:
        qs = qs.filter(name__icontains=search.strip())
    return qs.order_by("-created_at")


def get_group(*, group_id: int) -> TrainingGroup:
    return group_qs().get(id=group_id)


def list_group_members(*, group_id: int) -> QuerySet[GroupMembership]:
    return (
        GroupMembership.objects.select_related("user", "user__tc_profile")
        .filter(group_id=group_id, is_active=True)
        .order_by("user__last_name", "user__first_name")
    )
