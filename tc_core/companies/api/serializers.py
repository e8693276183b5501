# tc_core/companies/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from tc_core.companies.models import Company


class CompanySerializer(serializers.ModelSerializer):
    companyName = serializers.CharField(source="company_name", read_only=True)
    taxNumber = serializers.CharField(source="tax_number", read_only=True)
    managerName = serializers.CharField(source="manager_name", read_only=True)
    phoneNumber = serializers.CharField(source="phone_number", read_only=True)
    contactPersonName = serializers.CharField(source="contact_person_name", read_only=True)
    reviewedAt = serializers.DateTimeField(source="reviewed_at", read_only=True)
    rejectionReason = serializers.CharField(source="rejection_reason", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Company
        fields = [
            "id",
            "companyName",
            "taxNumber",
            "address",
            "managerName",
            "phoneNumber",
            "email",
            "contactPersonName",
            "status",
            "reviewedAt",
            "rejectionReason",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class CompanyRegisterSerializer(serializers.Serializer):
    companyName = serializers.CharField(max_length=255)
    taxNumber = serializers.CharField(max_length=32)
    address = serializers.CharField(max_length=500)
    managerName = serializers.CharField(max_length=255)
    phoneNumber = serializers.CharField(max_length=32)
    email = serializers.EmailField()
    contactPersonName = serializers.CharField(max_length=255)


class CompanyRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class CompanyReviewResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    company = CompanySerializer()
