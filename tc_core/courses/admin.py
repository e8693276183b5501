# tc_core/courses/admin.py
from django.contrib import admin

from tc_core.courses.models import Course, Enrollment


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("course_name", "course_type", "course_hours", "course_price", "is_active")
    list_filter = ("course_type", "is_active")
    search_fields = ("course_name",)


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ("user", "course", "enrolled_at")
    list_filter = ("course",)
    search_fields = ("user__email", "user__last_name")
    autocomplete_fields = ("course",)
