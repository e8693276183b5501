# tc_core/conftest.py
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.utils import timezone
from rest_framework.test import APIClient

from tc_core.companies.models import Company, CompanyStatus
from tc_core.courses.models import Course, CourseType
from tc_core.groups.models import GroupStatus, TrainingGroup
from tc_core.invitations.models import InvitationCode, InvitationScope


def make_user(username: str, *, roles=(), password: str = "testpass", **extra):
    User = get_user_model()
    user = User.objects.create_user(username=username, email=username if "@" in username else "", password=password, **extra)
    for role in roles:
        group, _ = Group.objects.get_or_create(name=role)
        user.groups.add(group)
    return user


def client_for(user) -> APIClient:
    c = APIClient()
    c.force_authenticate(user=user)
    return c


def make_company(*, tax_number: str = "123456789", status: str = CompanyStatus.ACTIVE, name: str = "Acme Logistics"):
    return Company.objects.create(
        company_name=name,
        tax_number=tax_number,
        address="1 Industrial Street, Sofia",
        manager_name="Ivan Petrov",
        phone_number="0888123456",
        email="office@acme.test",
        contact_person_name="Maria Ivanova",
        status=status,
    )


def make_group(*, name: str = "Group A", max_participants: int = 20, status: str = GroupStatus.ACTIVE, company=None, **extra):
    return TrainingGroup.objects.create(
        name=name,
        max_participants=max_participants,
        status=status,
        company=company,
        **extra,
    )


def make_invitation(
    *,
    code: str = "ABC-1234",
    company=None,
    group=None,
    max_uses: int = 50,
    current_uses: int = 0,
    expires_in: timedelta = timedelta(days=30),
    is_active: bool = True,
):
    return InvitationCode.objects.create(
        code=code,
        scope=InvitationScope.GROUP if group is not None else InvitationScope.COMPANY,
        company=company,
        group=group,
        max_uses=max_uses,
        current_uses=current_uses,
        expires_at=timezone.now() + expires_in,
        is_active=is_active,
    )


@pytest.fixture
def user(db):
    """
    ADMIN test user.
    """
    return make_user("admin@tc.test", roles=["ADMIN"])


@pytest.fixture
def api_client(user):
    return client_for(user)


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def office_user(db):
    return make_user("office@tc.test", roles=["OFFICE_WORKER"])


@pytest.fixture
def student(db):
    return make_user("student@tc.test", roles=["STUDENT"], first_name="Petar", last_name="Georgiev")


@pytest.fixture
def company(db):
    return make_company()


@pytest.fixture
def pending_company(db):
    return make_company(tax_number="987654321", status=CompanyStatus.PENDING, name="Pending Ltd")


@pytest.fixture
def course(db):
    return Course.objects.create(course_name="Category C initial", course_type=CourseType.INITIAL, course_hours=140)


@pytest.fixture
def group(db, company):
    return make_group(company=company)


@pytest.fixture
def standalone_group(db):
    return make_group(name="Open Group")
