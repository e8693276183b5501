# tc_core/groups/admin.py
from django.contrib import admin

from tc_core.groups.models import GroupMembership, TrainingGroup


class GroupMembershipInline(admin.TabularInline):
    model = GroupMembership
    extra = 0
    fields = ("user", "is_active", "source", "invitation", "created_at")
    readonly_fields = ("source", "invitation", "created_at")
    autocomplete_fields = ("user",)


@admin.register(TrainingGroup)
class TrainingGroupAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "course", "status", "max_participants", "registration_deadline")
    list_filter = ("status", "company")
    search_fields = ("name",)
    inlines = [GroupMembershipInline]
