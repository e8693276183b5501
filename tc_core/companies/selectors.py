# tc_core/companies/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from tc_core.companies.models import Company, CompanyStatus


def list_companies(*, status: str | None = None, search: str | None = None) -> QuerySet[Company]:
    qs = Company.objects.all()
    if status:
        qs = qs.filter(status=status)
    if search:
        qs = qs.filter(company_name__icontains=search.strip())
    return qs.order_by("company_name")


def list_pending_companies() -> QuerySet[Company]:
    return Company.objects.filter(status=CompanyStatus.PENDING).order_by("created_at")


def get_company(*, company_id: int) -> Company:
    return Company.objects.get(id=company_id)
