# tc_core/iam/api/serializers.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from tc_core.common.permissions import user_roles

PROFILE_DEFAULTS = {
    "middle_name": "",
    "phone_number": "",
    "current_residency_address": "",
    "birth_place_address": "",
    "egn": "",
    "iban": "",
}


def _profile(user):
    # accounts created outside registration (createsuperuser) may have none
    return getattr(user, "tc_profile", None)


class UserSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source="first_name", read_only=True)
    lastName = serializers.CharField(source="last_name", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)
    profile = serializers.SerializerMethodField()
    roles = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = ["id", "email", "firstName", "lastName", "isActive", "createdAt", "roles", "profile"]
        read_only_fields = fields

    @extend_schema_field(serializers.ListField(child=serializers.CharField()))
    def get_roles(self, obj) -> list[str]:
        return sorted(user_roles(obj))

    @extend_schema_field(serializers.DictField())
    def get_profile(self, obj) -> dict:
        profile = _profile(obj)
        values = {f: getattr(profile, f) for f in PROFILE_DEFAULTS} if profile else dict(PROFILE_DEFAULTS)
        return {
            "middleName": values["middle_name"],
            "phoneNumber": values["phone_number"],
            "currentResidencyAddress": values["current_residency_address"],
            "birthPlaceAddress": values["birth_place_address"],
            "egn": values["egn"],
            "iban": values["iban"],
            "companyId": profile.company_id if profile else None,
            "companyName": profile.company.company_name if profile and profile.company else None,
        }


class ProfileUpdateSerializer(serializers.Serializer):
    """
    Partial profile edit. Keys are those of the profile form; omitted keys
    stay unchanged.
    """
    firstName = serializers.CharField(source="first_name", required=False, max_length=150)
    middleName = serializers.CharField(source="middle_name", required=False, allow_blank=True, max_length=150)
    lastName = serializers.CharField(source="last_name", required=False, max_length=150)
    phoneNumber = serializers.CharField(source="phone_number", required=False, allow_blank=True, max_length=32)
    currentResidencyAddress = serializers.CharField(
        source="current_residency_address", required=False, allow_blank=True, max_length=255
    )
    birthPlaceAddress = serializers.CharField(source="birth_place_address", required=False, allow_blank=True, max_length=255)
    egn = serializers.RegexField(r"^\d{10}$", required=False, allow_blank=True, error_messages={"invalid": "EGN must be 10 digits."})
    iban = serializers.CharField(required=False, allow_blank=True, max_length=42)

    def validate_iban(self, value: str) -> str:
        value = value.replace(" ", "").upper()
        if value and not (15 <= len(value) <= 34 and value[:2].isalpha() and value[2:4].isdigit() and value.isalnum()):
            raise serializers.ValidationError("Invalid IBAN.")
        return value


class UserResponseSerializer(serializers.Serializer):
    user = UserSerializer()
