# tc_core/iam/api/schema_serializers.py
"""
Response shapes of the IAM endpoints, for the OpenAPI schema only.
"""
from __future__ import annotations

from rest_framework import serializers


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    username = serializers.CharField(required=False, help_text="Same as email; either key is accepted.")
    password = serializers.CharField(write_only=True)


class LoginResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()
    access = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class MeUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField(allow_null=True)
    firstName = serializers.CharField()
    middleName = serializers.CharField(allow_blank=True)
    lastName = serializers.CharField()
    phoneNumber = serializers.CharField(allow_blank=True)
    roles = serializers.ListField(child=serializers.CharField())


class MeCompanySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    companyName = serializers.CharField()
    status = serializers.CharField()


class MeGroupSerializer(serializers.Serializer):
    groupId = serializers.IntegerField()
    groupName = serializers.CharField()
    status = serializers.CharField()
    companyId = serializers.IntegerField(allow_null=True)
    source = serializers.CharField()


class MeResponseSerializer(serializers.Serializer):
    user = MeUserSerializer()
    company = MeCompanySerializer(allow_null=True)
    groups = MeGroupSerializer(many=True)
    enrolledCourses = serializers.ListField(child=serializers.DictField())
