# tc_core/courses/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from tc_core.courses.models import Course, Enrollment


def list_active_courses(*, course_type: str | None = None) -> QuerySet[Course]:
    qs = Course.objects.filter(is_active=True)
    if course_type:
        qs = qs.filter(course_type=course_type)
    return qs.order_by("course_name")


def list_user_enrollments(*, user_id: int) -> QuerySet[Enrollment]:
    return Enrollment.objects.select_related("course").filter(user_id=user_id).order_by("-enrolled_at")
