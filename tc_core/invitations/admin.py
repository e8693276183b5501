# tc_core/invitations/admin.py
from django.contrib import admin

from tc_core.invitations.models import InvitationCode, InvitationRedemption


@admin.register(InvitationCode)
class InvitationCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "scope", "company", "group", "current_uses", "max_uses", "expires_at", "is_active")
    list_filter = ("scope", "is_active")
    search_fields = ("code", "company__company_name", "group__name")
    # usage only moves through redemption
    readonly_fields = ("code", "current_uses", "deactivated_at", "created_by", "created_at", "updated_at")
    ordering = ("-created_at",)


@admin.register(InvitationRedemption)
class InvitationRedemptionAdmin(admin.ModelAdmin):
    list_display = ("invitation", "user", "redeemed_at")
    search_fields = ("invitation__code", "user__email")
    readonly_fields = ("invitation", "user", "redeemed_at")
