# tc_core/courses/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from tc_core.courses.api.serializers import CourseSerializer
from tc_core.courses.selectors import list_active_courses


class PublicCourseListView(APIView):
    """Courses offered at registration."""
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Public"], responses={200: CourseSerializer(many=True)})
    def get(self, request):
        qs = list_active_courses(course_type=request.query_params.get("type") or None)
        return Response(CourseSerializer(qs, many=True).data, status=status.HTTP_200_OK)
