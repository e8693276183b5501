# tc_core/common/permissions.py

from __future__ import annotations

from rest_framework.permissions import BasePermission

# Roles are Django auth Group names.
ROLE_ADMIN = "ADMIN"
ROLE_OFFICE_WORKER = "OFFICE_WORKER"
ROLE_COMPANY = "COMPANY"
ROLE_INSTRUCTOR = "INSTRUCTOR"
ROLE_STUDENT = "STUDENT"

ALL_ROLES = (ROLE_ADMIN, ROLE_OFFICE_WORKER, ROLE_COMPANY, ROLE_INSTRUCTOR, ROLE_STUDENT)
STAFF_ROLES = frozenset({ROLE_ADMIN, ROLE_OFFICE_WORKER})


def user_roles(user) -> set[str]:
    """
    Role names of a user.

    Superusers are ADMIN whatever their groups say. An authenticated user
    with no role group is a STUDENT, the role self-registration grants.
    """
    if user is None or not user.is_authenticated:
        return set()
    if user.is_superuser:
        return {ROLE_ADMIN}

    roles = set(user.groups.values_list("name", flat=True))
    return roles or {ROLE_STUDENT}


def is_staff_user(user) -> bool:
    return bool(user_roles(user) & STAFF_ROLES)


def is_company_account(user) -> bool:
    """A COMPANY account without any staff role: sees its own company only."""
    roles = user_roles(user)
    return ROLE_COMPANY in roles and not roles & STAFF_ROLES


class RolePermission(BasePermission):
    """
    Per-action role check for ViewSets.

    Subclasses map each view action to the roles allowed to run it. ADMIN may
    run everything; an action missing from the map is denied.
    """
    message = "You do not have permission to perform this action."
    roles_by_action: dict[str, frozenset[str]] = {}

    def has_permission(self, request, view) -> bool:
        roles = user_roles(request.user)
        if not roles:
            return False
        if ROLE_ADMIN in roles:
            return True

        allowed = self.roles_by_action.get(getattr(view, "action", None))
        return bool(allowed and roles & allowed)


class CompanyPermission(RolePermission):
    """Company review is an office task."""
    roles_by_action = {
        "list": STAFF_ROLES,
        "retrieve": STAFF_ROLES,
        "pending": STAFF_ROLES,
        "approve": STAFF_ROLES,
        "reject": STAFF_ROLES,
    }


class InvitationPermission(RolePermission):
    """Company accounts issue codes for their own company; staff for any."""
    roles_by_action = {
        "create": STAFF_ROLES | {ROLE_COMPANY},
        "for_company": STAFF_ROLES | {ROLE_COMPANY},
        "deactivate": STAFF_ROLES | {ROLE_COMPANY},
    }


_GROUP_READERS = STAFF_ROLES | {ROLE_COMPANY, ROLE_INSTRUCTOR}


class GroupPermission(RolePermission):
    roles_by_action = {
        "list": _GROUP_READERS,
        "retrieve": _GROUP_READERS,
        "capacity": _GROUP_READERS,
        "create": STAFF_ROLES,
        "partial_update": STAFF_ROLES,
        "set_status": STAFF_ROLES,
        "invitations": STAFF_ROLES | {ROLE_COMPANY},
        "deactivate_invitation": STAFF_ROLES | {ROLE_COMPANY},
        "users": STAFF_ROLES,
        "available_users": STAFF_ROLES,
        "remove_user": STAFF_ROLES,
        "document_status": STAFF_ROLES | {ROLE_INSTRUCTOR},
    }


class UserPermission(RolePermission):
    """
    Staff manage every account and company accounts list their own people.
    Suspension is ADMIN only.
    """
    roles_by_action = {
        "list": STAFF_ROLES | {ROLE_COMPANY},
        "retrieve": STAFF_ROLES | {ROLE_COMPANY},
        "profile": frozenset(ALL_ROLES),
        "update_profile": STAFF_ROLES,
        "suspend": frozenset({ROLE_ADMIN}),
        "reactivate": frozenset({ROLE_ADMIN}),
    }


class AuditPermission(RolePermission):
    roles_by_action = {
        "list": frozenset({ROLE_ADMIN}),
    }
