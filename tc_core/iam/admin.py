# tc_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from tc_core.iam.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "company", "phone_number", "created_at")
    list_filter = ("company",)
    search_fields = ("user__username", "user__email", "user__last_name")
    autocomplete_fields = ("user",)
    ordering = ("-created_at",)
