import pytest
from django.conf import settings
from rest_framework.test import APIClient

from tc_core.conftest import make_user
from tc_core.courses.services import EnrollmentService
from tc_core.groups.models import GroupMembership
from tc_core.iam.models import UserProfile

pytestmark = pytest.mark.django_db


def test_me_requires_auth(db):
    c = APIClient()
    res = c.get("/api/me/")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "not_authenticated"


def test_login_with_email_sets_cookies(db):
    make_user("driver@tc.test", password="pass12345")

    c = APIClient()
    res = c.post("/api/auth/login/", {"email": "Driver@TC.test", "password": "pass12345"}, format="json")

    assert res.status_code == 200
    assert res.json()["access"]
    access_cookie = settings.SIMPLE_JWT.get("AUTH_COOKIE")
    refresh_cookie = settings.SIMPLE_JWT.get("AUTH_COOKIE_REFRESH")
    assert access_cookie in res.cookies
    assert refresh_cookie in res.cookies
    assert res.cookies[access_cookie]["httponly"]


def test_login_with_wrong_password(db):
    make_user("driver@tc.test", password="pass12345")

    res = APIClient().post("/api/auth/login/", {"email": "driver@tc.test", "password": "nope"}, format="json")

    assert res.status_code == 401
    assert res.json()["success"] is False


def test_cookie_session_reaches_me(db):
    make_user("driver@tc.test", password="pass12345", first_name="Nikola")
    c = APIClient()
    c.post("/api/auth/login/", {"email": "driver@tc.test", "password": "pass12345"}, format="json")

    res = c.get("/api/me/")

    assert res.status_code == 200
    assert res.json()["user"]["firstName"] == "Nikola"
    assert res.json()["user"]["roles"] == ["STUDENT"]


def test_bearer_header_reaches_me(db):
    make_user("driver@tc.test", password="pass12345")
    access = APIClient().post(
        "/api/auth/login/", {"email": "driver@tc.test", "password": "pass12345"}, format="json"
    ).json()["access"]

    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    assert c.get("/api/me/").status_code == 200


def test_refresh_and_logout(db):
    make_user("driver@tc.test", password="pass12345")
    c = APIClient()
    c.post("/api/auth/login/", {"email": "driver@tc.test", "password": "pass12345"}, format="json")

    refreshed = c.post("/api/auth/refresh/")
    assert refreshed.status_code == 200

    out = c.post("/api/auth/logout/")
    assert out.status_code == 200
    assert out.cookies[settings.SIMPLE_JWT.get("AUTH_COOKIE")].value == ""


def test_me_includes_company_groups_and_courses(student, company, group, course):
    UserProfile.objects.create(user=student, company=company, phone_number="0888000111")
    GroupMembership.objects.create(group=group, user=student)
    EnrollmentService.enroll(user_id=student.id, course_id=course.id)

    c = APIClient()
    c.force_authenticate(user=student)
    body = c.get("/api/me/").json()

    assert body["user"]["email"] == "student@tc.test"
    assert body["user"]["phoneNumber"] == "0888000111"
    assert body["company"]["companyName"] == company.company_name
    assert [g["groupId"] for g in body["groups"]] == [group.id]
    assert body["enrolledCourses"][0]["course"]["id"] == course.id
