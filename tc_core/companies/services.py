# tc_core/companies/services.py
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from tc_core.audit.services import AuditService
from tc_core.common.api.exceptions import ConflictError
from tc_core.companies.models import Company, CompanyStatus

logger = logging.getLogger(__name__)

# Minimum lengths enforced by the public registration form.
MIN_LENGTHS = {
    "company_name": 2,
    "tax_number": 9,
    "address": 5,
    "manager_name": 2,
    "phone_number": 10,
    "contact_person_name": 2,
}


class CompanyService:
    """
    Company write-model: self-registration and the staff review workflow.

    pending -> active   (approve)
    pending -> inactive (reject, optional reason)

    Repeating the transition a company is already in is a no-op success;
    crossing over (approve a rejected company, reject an approved one) is a conflict.
    """

    @staticmethod
    def _lock(company_id: int) -> Company:
        try:
            return Company.objects.select_for_update().get(id=company_id)
        except Company.DoesNotExist:
            raise NotFound("Company not found.")

    @staticmethod
    @transaction.atomic
    def register(
        *,
        company_name: str,
        tax_number: str,
        address: str,
        manager_name: str,
        phone_number: str,
        email: str,
        contact_person_name: str,
    ) -> Company:
        values = {
            "company_name": (company_name or "").strip(),
            "tax_number": (tax_number or "").strip(),
            "address": (address or "").strip(),
            "manager_name": (manager_name or "").strip(),
            "phone_number": (phone_number or "").strip(),
            "contact_person_name": (contact_person_name or "").strip(),
        }

        errors = {}
        for field, minimum in MIN_LENGTHS.items():
            if len(values[field]) < minimum:
                errors[field] = f"Must be at least {minimum} characters."
        email = (email or "").strip().lower()
        if not email:
            errors["email"] = "This field is required."
        if errors:
            raise ValidationError(errors)

        if Company.objects.filter(tax_number=values["tax_number"]).exists():
            raise ValidationError({"tax_number": "A company with this tax number is already registered."})

        company = Company.objects.create(email=email, status=CompanyStatus.PENDING, **values)

        AuditService.log(
            event_code="company.registered",
            entity_type="Company",
            entity_id=company.id,
            actor_user_id=None,
            metadata={"tax_number": company.tax_number},
        )
        logger.info("Company registered for review: %s (id=%s)", company.company_name, company.id)
        return company

    @staticmethod
    @transaction.atomic
    def approve(*, company_id: int, actor_user_id: Optional[int] = None) -> Company:
        company = CompanyService._lock(company_id)

        # idempotent no-op
        if company.status == CompanyStatus.ACTIVE:
            return company

        if company.status != CompanyStatus.PENDING:
            raise ConflictError("Only pending companies can be approved.")

        company.status = CompanyStatus.ACTIVE
        company.reviewed_at = timezone.now()
        company.reviewed_by_id = actor_user_id
        company.save(update_fields=["status", "reviewed_at", "reviewed_by", "updated_at"])

        AuditService.log(
            event_code="company.approved",
            entity_type="Company",
            entity_id=company.id,
            actor_user_id=actor_user_id,
        )
        logger.info("Company approved: %s (id=%s)", company.company_name, company.id)
        return company

    @staticmethod
    @transaction.atomic
    def reject(*, company_id: int, actor_user_id: Optional[int] = None, reason: str = "") -> Company:
        company = CompanyService._lock(company_id)

        # idempotent no-op
        if company.status == CompanyStatus.INACTIVE:
            return company

        if company.status != CompanyStatus.PENDING:
            raise ConflictError("Only pending companies can be rejected.")

        company.status = CompanyStatus.INACTIVE
        company.reviewed_at = timezone.now()
        company.reviewed_by_id = actor_user_id
        company.rejection_reason = (reason or "").strip()
        company.save(update_fields=["status", "reviewed_at", "reviewed_by", "rejection_reason", "updated_at"])

        AuditService.log(
            event_code="company.rejected",
            entity_type="Company",
            entity_id=company.id,
            actor_user_id=actor_user_id,
            metadata={"reason": company.rejection_reason},
        )
        logger.info("Company rejected: %s (id=%s)", company.company_name, company.id)
        return company
