# tc_core/courses/services.py
from __future__ import annotations

from django.db import transaction
from rest_framework.exceptions import ValidationError

from tc_core.courses.models import Course, Enrollment


class EnrollmentService:
    @staticmethod
    @transaction.atomic
    def enroll(*, user_id: int, course_id: int) -> Enrollment:
        course = Course.objects.filter(id=course_id, is_active=True).first()
        if course is None:
            raise ValidationError({"courseId": "Course not found or not open for enrollment."})

        # idempotent per (user, course)
        enrollment, _ = Enrollment.objects.get_or_create(user_id=user_id, course=course)
        return enrollment
