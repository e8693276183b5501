# tc_core/iam/selectors.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Q, QuerySet

from tc_core.common.permissions import ROLE_COMPANY, ROLE_INSTRUCTOR, STAFF_ROLES
from tc_core.groups.models import GroupMembership

# Accounts that manage training rather than attend it.
NON_PARTICIPANT_ROLES = STAFF_ROLES | {ROLE_COMPANY, ROLE_INSTRUCTOR}


def user_qs() -> QuerySet:
    return (
        get_user_model()
        .objects.select_related("tc_profile", "tc_profile__company")
        .prefetch_related("groups")
    )


def get_user(*, user_id: int):
    return user_qs().get(id=user_id)


def list_available_users(*, group_id: int, search: str | None = None) -> QuerySet:
    """
    Active participant accounts that are not active members of the group.
    A user removed from the group earlier shows up again.
    """
    members = GroupMembership.objects.filter(group_id=group_id, is_active=True).values("user_id")
    qs = (
        user_qs()
        .filter(is_active=True, is_superuser=False)
        .exclude(id__in=members)
        .exclude(groups__name__in=NON_PARTICIPANT_ROLES)
    )
    if search:
        term = search.strip()
        qs = qs.filter(Q(first_name__icontains=term) | Q(last_name__icontains=term) | Q(email__icontains=term))
    return qs.order_by("last_name", "first_name", "id")
