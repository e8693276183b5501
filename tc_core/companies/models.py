# tc_core/companies/models.py
from django.conf import settings
from django.db import models

from tc_core.common.models import TimeStampedModel


class CompanyStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class Company(TimeStampedModel):
    """
    Employer that sends people to training.

    Created as PENDING by public self-registration; only staff review moves it
    to ACTIVE (approve) or INACTIVE (reject). It never returns to PENDING.
    """

    company_name = models.CharField(max_length=255)
    tax_number = models.CharField(max_length=32, unique=True)  # business identifier (EIK/BULSTAT)
    address = models.CharField(max_length=500)
    manager_name = models.CharField(max_length=255)  # MOL
    phone_number = models.CharField(max_length=32)
    email = models.EmailField()
    contact_person_name = models.CharField(max_length=255)

    status = models.CharField(
        max_length=16,
        choices=CompanyStatus.choices,
        default=CompanyStatus.PENDING,
        db_index=True,
    )

    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_companies",
    )
    rejection_reason = models.TextField(blank=True, default="")

    class Meta:
        db_table = "companies_company"
        ordering = ("company_name",)
        indexes = [
            models.Index(fields=["status", "created_at"]),
        ]
        verbose_name_plural = "companies"

    def __str__(self) -> str:
        return f"{self.company_name} ({self.tax_number})"
