# tc_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from tc_core.common.permissions import user_roles
from tc_core.courses.api.serializers import EnrollmentSerializer
from tc_core.courses.selectors import list_user_enrollments
from tc_core.iam.api.schema_serializers import MeResponseSerializer
from tc_core.iam.models import UserProfile
from tc_core.iam.services.membership import list_user_groups


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["IAM"], responses={200: MeResponseSerializer})
    def get(self, request):
        """
        Current user with company link, group memberships and enrollments.
        """
        user = request.user
        profile = UserProfile.objects.select_related("company").filter(user_id=user.id).first()
        company = profile.company if profile else None

        return Response(
            {
                "user": {
                    "id": user.id,
                    "email": user.email or None,
                    "firstName": user.first_name,
                    "middleName": profile.middle_name if profile else "",
                    "lastName": user.last_name,
                    "phoneNumber": profile.phone_number if profile else "",
                    "roles": sorted(user_roles(user)),
                },
                "company": (
                    {"id": company.id, "companyName": company.company_name, "status": company.status}
                    if company
                    else None
                ),
                "groups": list_user_groups(user.id),
                "enrolledCourses": EnrollmentSerializer(list_user_enrollments(user_id=user.id), many=True).data,
            },
            status=status.HTTP_200_OK,
        )
