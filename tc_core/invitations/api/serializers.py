# tc_core/invitations/api/serializers.py
from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from tc_core.invitations.models import MAX_USES_LIMIT, InvitationCode


class InvitationSerializer(serializers.ModelSerializer):
    """
    Invitation with the display details the management tables need.
    Works for both scopes; the fields of the other scope are null.
    """
    invitationCode = serializers.CharField(source="code", read_only=True)
    companyId = serializers.SerializerMethodField()
    companyName = serializers.SerializerMethodField()
    groupId = serializers.IntegerField(source="group_id", read_only=True, allow_null=True)
    groupName = serializers.SerializerMethodField()
    maxUses = serializers.IntegerField(source="max_uses", read_only=True)
    currentUses = serializers.IntegerField(source="current_uses", read_only=True)
    usageCount = serializers.IntegerField(source="current_uses", read_only=True)
    remainingUses = serializers.IntegerField(source="remaining_uses", read_only=True)
    expiresAt = serializers.DateTimeField(source="expires_at", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    isExpired = serializers.SerializerMethodField()
    isUsable = serializers.SerializerMethodField()
    createdByName = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = InvitationCode
        fields = [
            "id",
            "invitationCode",
            "scope",
            "companyId",
            "companyName",
            "groupId",
            "groupName",
            "description",
            "maxUses",
            "currentUses",
            "usageCount",
            "remainingUses",
            "expiresAt",
            "isActive",
            "isExpired",
            "isUsable",
            "createdByName",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def _company(self, obj: InvitationCode):
        if obj.company_id:
            return obj.company
        if obj.group_id:
            return obj.group.company
        return None

    def get_companyId(self, obj: InvitationCode) -> int | None:
        company = self._company(obj)
        return company.id if company else None

    def get_companyName(self, obj: InvitationCode) -> str | None:
        company = self._company(obj)
        return company.company_name if company else None

    def get_groupName(self, obj: InvitationCode) -> str | None:
        return obj.group.name if obj.group_id else None

    def get_isExpired(self, obj: InvitationCode) -> bool:
        return obj.is_expired(timezone.now())

    def get_isUsable(self, obj: InvitationCode) -> bool:
        return obj.is_usable(timezone.now())

    def get_createdByName(self, obj: InvitationCode) -> str | None:
        user = obj.created_by
        if user is None:
            return None
        return user.get_full_name() or user.get_username()


class CompanyInvitationCreateSerializer(serializers.Serializer):
    companyId = serializers.IntegerField()
    maxUses = serializers.IntegerField(min_value=1, max_value=MAX_USES_LIMIT, required=False)
    validForDays = serializers.IntegerField(min_value=1, max_value=365, required=False)


class GroupInvitationCreateSerializer(serializers.Serializer):
    description = serializers.CharField(required=False, allow_blank=True, default="")
    maxUses = serializers.IntegerField(min_value=1, max_value=MAX_USES_LIMIT, required=False)
    expiresAt = serializers.DateTimeField(required=False)
    validForDays = serializers.IntegerField(min_value=1, max_value=365, required=False)


class InvitationCodeRequestSerializer(serializers.Serializer):
    invitationCode = serializers.CharField(trim_whitespace=True)


class UseInvitationRequestSerializer(serializers.Serializer):
    invitationCode = serializers.CharField(trim_whitespace=True)
    userId = serializers.IntegerField()


class InvitationCheckResponseSerializer(serializers.Serializer):
    isValid = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    companyName = serializers.CharField(allow_null=True, required=False)
    groupName = serializers.CharField(allow_null=True, required=False)
    remainingUses = serializers.IntegerField(required=False)
    expiresAt = serializers.DateTimeField(required=False)
    message = serializers.CharField()


class GroupInvitationValidateResponseSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    error = serializers.CharField(required=False)
    group = serializers.DictField(required=False)


class UseInvitationResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    groupId = serializers.IntegerField(allow_null=True)
    groupName = serializers.CharField(allow_null=True)
    companyId = serializers.IntegerField(allow_null=True)
    companyName = serializers.CharField(allow_null=True)
    message = serializers.CharField()
