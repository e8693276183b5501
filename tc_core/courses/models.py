# tc_core/courses/models.py
from django.conf import settings
from django.db import models

from tc_core.common.models import TimeStampedModel


class CourseType(models.TextChoices):
    INITIAL = "initial", "Initial"
    REFRESHER = "refresher", "Refresher"


class Course(TimeStampedModel):
    course_name = models.CharField(max_length=255)
    course_type = models.CharField(max_length=16, choices=CourseType.choices, db_index=True)
    course_hours = models.PositiveIntegerField(default=0)
    course_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "courses_course"
        ordering = ("course_name",)

    def __str__(self) -> str:
        return f"{self.course_name} ({self.course_type})"


class Enrollment(TimeStampedModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="enrollments")
    course = models.ForeignKey(Course, on_delete=models.PROTECT, related_name="enrollments")
    enrolled_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "courses_enrollment"
        constraints = [
            models.UniqueConstraint(fields=["user", "course"], name="uq_enrollment_user_course"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} -> {self.course_id}"
