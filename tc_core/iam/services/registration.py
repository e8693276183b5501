# tc_core/iam/services/registration.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework.exceptions import ValidationError

from tc_core.common.permissions import ROLE_STUDENT
from tc_core.courses.services import EnrollmentService
from tc_core.iam.models import UserProfile
from tc_core.invitations.services import EnrollmentLinker, RedemptionResult

logger = logging.getLogger(__name__)


def split_full_name(full_name: str) -> tuple[str, str, str]:
    """
    "First [Middle ...] Last" -> (first, middle, last).
    A single word is taken as the first name.
    """
    parts = (full_name or "").split()
    if not parts:
        return "", "", ""
    if len(parts) == 1:
        return parts[0], "", ""
    return parts[0], " ".join(parts[1:-1]), parts[-1]


@dataclass(frozen=True)
class RegistrationResult:
    user_id: int
    email: str
    redemption: Optional[RedemptionResult] = None


@transaction.atomic
def register_user(
    *,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    middle_name: str = "",
    phone_number: str = "",
    course_id: Optional[int] = None,
    invitation_code: Optional[str] = None,
) -> RegistrationResult:
    """
    Create an account (user, profile, STUDENT role), optionally enroll it in a
    course and redeem an invitation code. One transaction: a rejected code
    leaves no account behind, so the person can fix the code and resubmit.
    """
    User = get_user_model()

    email = (email or "").strip().lower()
    first_name = (first_name or "").strip()
    last_name = (last_name or "").strip()

    errors = {}
    if not first_name:
        errors["firstName"] = "This field is required."
    if not last_name:
        errors["lastName"] = "This field is required."
    if not email:
        errors["email"] = "This field is required."
    elif User.objects.filter(username__iexact=email).exists():
        errors["email"] = "An account with this e-mail already exists."
    if errors:
        raise ValidationError(errors)

    candidate = User(username=email, email=email, first_name=first_name, last_name=last_name)
    try:
        validate_password(password, user=candidate)
    except DjangoValidationError as exc:
        raise ValidationError({"password": list(exc.messages)})

    user = User.objects.create_user(
        username=email,
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
    )
    UserProfile.objects.create(
        user=user,
        middle_name=(middle_name or "").strip(),
        phone_number=(phone_number or "").strip(),
    )
    student, _ = Group.objects.get_or_create(name=ROLE_STUDENT)
    user.groups.add(student)

    if course_id is not None:
        EnrollmentService.enroll(user_id=user.id, course_id=course_id)

    redemption = None
    if invitation_code and invitation_code.strip():
        redemption = EnrollmentLinker.redeem(code=invitation_code, user_id=user.id)

    logger.info("Registered user %s (invitation=%s)", user.id, bool(redemption))
    return RegistrationResult(user_id=user.id, email=email, redemption=redemption)
