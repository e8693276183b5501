# tc_core/iam/services/membership.py
from __future__ import annotations

from tc_core.common.permissions import ROLE_COMPANY, STAFF_ROLES, user_roles
from tc_core.groups.models import GroupMembership
from tc_core.iam.models import UserProfile


def ensure_profile(user_id: int) -> UserProfile:
    profile, _ = UserProfile.objects.get_or_create(user_id=user_id)
    return profile


def company_of(user_id: int) -> int | None:
    return UserProfile.objects.filter(user_id=user_id).values_list("company_id", flat=True).first()


def link_company(*, user_id: int, company_id: int) -> bool:
    """
    Attach a user to a company if they have none yet.

    Returns True when the link was made or already existed, False when the
    user already belongs to a different company (left untouched).
    """
    profile = ensure_profile(user_id)
    if profile.company_id == company_id:
        return True
    if profile.company_id is not None:
        return False

    profile.company_id = company_id
    profile.save(update_fields=["company", "updated_at"])
    return True


def list_user_groups(user_id: int) -> list[dict]:
    """
    Active training-group memberships for the /me response.
    """
    qs = (
        GroupMembership.objects.select_related("group", "group__company")
        .filter(user_id=user_id, is_active=True)
        .order_by("group__name")
    )
    return [
        {
            "groupId": m.group_id,
            "groupName": m.group.name,
            "status": m.group.status,
            "companyId": m.group.company_id,
            "source": m.source,
        }
        for m in qs
    ]


def can_manage_company(user, company_id: int | None) -> bool:
    """
    Staff manage every company; a COMPANY account only its own.
    """
    roles = user_roles(user)
    if roles & STAFF_ROLES:
        return True
    if ROLE_COMPANY not in roles or company_id is None:
        return False
    return company_of(user.id) == company_id
