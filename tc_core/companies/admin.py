# tc_core/companies/admin.py
from django.contrib import admin

from tc_core.companies.models import Company


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("company_name", "tax_number", "status", "manager_name", "email", "created_at")
    list_filter = ("status",)
    search_fields = ("company_name", "tax_number", "email")
    readonly_fields = ("reviewed_at", "reviewed_by", "created_at", "updated_at")
    ordering = ("company_name",)
