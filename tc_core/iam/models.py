# tc_core/iam/models.py
from django.conf import settings
from django.db import models

from tc_core.common.models import TimeStampedModel


class UserProfile(TimeStampedModel):
    """
    Training-platform profile anchored to Django's AUTH_USER_MODEL.

    `company` is the company a person belongs to. It is set either by staff
    or by redeeming an invitation code, never overwritten with a different company.
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tc_profile")
    middle_name = models.CharField(max_length=150, blank=True, default="")
    phone_number = models.CharField(max_length=32, blank=True, default="")
    current_residency_address = models.CharField(max_length=255, blank=True, default="")
    birth_place_address = models.CharField(max_length=255, blank=True, default="")
    egn = models.CharField(max_length=10, blank=True, default="")  # Bulgarian personal number
    iban = models.CharField(max_length=34, blank=True, default="")
    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
    )

    class Meta:
        db_table = "iam_user_profile"
        indexes = [
            models.Index(fields=["company"]),
        ]

    def __str__(self) -> str:
        return f"{self.user.get_username()}"
