# tc_core/iam/services/users.py
from __future__ import annotations

import logging
from typing import Any, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from tc_core.audit.services import AuditService
from tc_core.iam.services.membership import ensure_profile

logger = logging.getLogger(__name__)

USER_FIELDS = ("first_name", "last_name")
PROFILE_FIELDS = (
    "middle_name",
    "phone_number",
    "current_residency_address",
    "birth_place_address",
    "egn",
    "iban",
)


class UserService:
    """
    Account maintenance: profile edits (own or by staff) and suspension.
    """

    @staticmethod
    def _lock(user_id: int):
        try:
            return get_user_model().objects.select_for_update().get(id=user_id)
        except get_user_model().DoesNotExist:
            raise NotFound("User not found.")

    @staticmethod
    @transaction.atomic
    def update_profile(*, user_id: int, changes: dict[str, Any], actor_user_id: Optional[int] = None):
        """
        Apply snake_case field changes split over the auth user and its profile.
        Unknown keys are ignored; only fields that actually change are written.
        """
        user = UserService._lock(user_id)
        profile = ensure_profile(user.id)

        changed: list[str] = []
        user_updates = [f for f in USER_FIELDS if f in changes and getattr(user, f) != changes[f]]
        for f in user_updates:
            setattr(user, f, changes[f])
        if user_updates:
            user.save(update_fields=user_updates)
            changed += user_updates

        profile_updates = [f for f in PROFILE_FIELDS if f in changes and getattr(profile, f) != changes[f]]
        for f in profile_updates:
            setattr(profile, f, changes[f])
        if profile_updates:
            profile.save(update_fields=[*profile_updates, "updated_at"])
            changed += profile_updates

        if changed:
            AuditService.log(
                event_code="user.profile_updated",
                entity_type="User",
                entity_id=user.id,
                actor_user_id=actor_user_id,
                # values stay out of the trail; egn and iban are personal data
                metadata={"fields": sorted(changed)},
            )
            logger.info("Profile of user %s updated (%s)", user.id, ", ".join(sorted(changed)))
        return user

    @staticmethod
    @transaction.atomic
    def set_active(*, user_id: int, is_active: bool, actor_user_id: Optional[int] = None):
        """
        Suspend (is_active=False) or reactivate an account. A suspended user
        can no longer log in; memberships and documents are left as they are.
        """
        if not is_active and actor_user_id == user_id:
            raise ValidationError({"userId": "You cannot suspend your own account."})

        user = UserService._lock(user_id)
        if user.is_active == is_active:
            return user

        user.is_active = is_active
        user.save(update_fields=["is_active"])

        AuditService.log(
            event_code="user.reactivated" if is_active else "user.suspended",
            entity_type="User",
            entity_id=user.id,
            actor_user_id=actor_user_id,
        )
        logger.info("User %s %s", user.id, "reactivated" if is_active else "suspended")
        return user
