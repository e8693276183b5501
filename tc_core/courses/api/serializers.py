# tc_core/courses/api/serializers.py
from rest_framework import serializers

from tc_core.courses.models import Course, Enrollment


class CourseSerializer(serializers.ModelSerializer):
    courseName = serializers.CharField(source="course_name", read_only=True)
    courseType = serializers.CharField(source="course_type", read_only=True)
    courseHours = serializers.IntegerField(source="course_hours", read_only=True)
    coursePrice = serializers.DecimalField(source="course_price", max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Course
        fields = ["id", "courseName", "courseType", "courseHours", "coursePrice"]
        read_only_fields = fields


class EnrollmentSerializer(serializers.ModelSerializer):
    course = CourseSerializer(read_only=True)
    enrolledAt = serializers.DateTimeField(source="enrolled_at", read_only=True)

    class Meta:
        model = Enrollment
        fields = ["id", "course", "enrolledAt"]
        read_only_fields = fields
