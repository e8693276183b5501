import pytest
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from tc_core.courses.models import Course, CourseType, Enrollment
from tc_core.courses.services import EnrollmentService

pytestmark = pytest.mark.django_db


def test_public_course_list_shows_active_only(course):
    Course.objects.create(course_name="Retired course", course_type=CourseType.INITIAL, is_active=False)
    Course.objects.create(course_name="Category C refresher", course_type=CourseType.REFRESHER, course_hours=35)

    res = APIClient().get("/api/public/courses/")

    assert res.status_code == 200
    names = [c["courseName"] for c in res.json()]
    assert names == ["Category C initial", "Category C refresher"]


def test_public_course_list_filters_by_type(course):
    Course.objects.create(course_name="Category C refresher", course_type=CourseType.REFRESHER)

    res = APIClient().get("/api/public/courses/", {"type": "refresher"})

    assert [c["courseType"] for c in res.json()] == ["refresher"]


def test_enroll_is_idempotent(student, course):
    EnrollmentService.enroll(user_id=student.id, course_id=course.id)
    EnrollmentService.enroll(user_id=student.id, course_id=course.id)

    assert Enrollment.objects.filter(user=student, course=course).count() == 1


def test_enroll_in_inactive_course(student):
    retired = Course.objects.create(course_name="Old", course_type=CourseType.INITIAL, is_active=False)

    with pytest.raises(ValidationError):
        EnrollmentService.enroll(user_id=student.id, course_id=retired.id)
