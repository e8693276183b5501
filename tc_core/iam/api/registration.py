# tc_core/iam/api/registration.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from tc_core.iam.services.registration import register_user, split_full_name


class RegisterRequestSerializer(serializers.Serializer):
    fullName = serializers.CharField(required=False, allow_blank=True)
    firstName = serializers.CharField(required=False, allow_blank=True)
    middleName = serializers.CharField(required=False, allow_blank=True, default="")
    lastName = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    phoneNumber = serializers.CharField(required=False, allow_blank=True, default="")
    courseId = serializers.IntegerField(required=False, allow_null=True)
    invitationCode = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        # the form may send a single "fullName" instead of split fields
        if attrs.get("fullName") and not attrs.get("firstName"):
            first, middle, last = split_full_name(attrs["fullName"])
            attrs["firstName"] = first
            attrs["middleName"] = attrs.get("middleName") or middle
            attrs["lastName"] = attrs.get("lastName") or last
        return attrs


class RegisterResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    userId = serializers.IntegerField()
    groupId = serializers.IntegerField(allow_null=True)
    companyId = serializers.IntegerField(allow_null=True)
    message = serializers.CharField()


class RegisterView(APIView):
    """
    Public sign-up. An invitation code, when given, is redeemed in the same
    transaction; a rejected code means no account is created.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Public"], request=RegisterRequestSerializer, responses={201: RegisterResponseSerializer})
    def post(self, request):
        ser = RegisterRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        result = register_user(
            first_name=data.get("firstName", ""),
            middle_name=data.get("middleName", ""),
            last_name=data.get("lastName", ""),
            email=data["email"],
            password=data["password"],
            phone_number=data.get("phoneNumber", ""),
            course_id=data.get("courseId"),
            invitation_code=data.get("invitationCode"),
        )

        redemption = result.redemption
        return Response(
            {
                "success": True,
                "userId": result.user_id,
                "groupId": redemption.group_id if redemption else None,
                "companyId": redemption.company_id if redemption else None,
                "message": redemption.message if redemption else "Registration successful.",
            },
            status=status.HTTP_201_CREATED,
        )
