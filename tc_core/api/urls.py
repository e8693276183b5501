# tc_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from tc_core.audit.api.views import AuditEventViewSet
from tc_core.companies.api.views import CompanyRegisterView, CompanyViewSet
from tc_core.courses.api.views import PublicCourseListView
from tc_core.documents.api.views import DocumentViewSet, MissingDocumentsView
from tc_core.groups.api.views import GroupViewSet
from tc_core.iam.api.auth import LoginView, LogoutView, RefreshView
from tc_core.iam.api.me import MeView
from tc_core.iam.api.registration import RegisterView
from tc_core.iam.api.users import UserViewSet
from tc_core.invitations.api.views import (
    CheckInvitationView,
    CompanyInvitationViewSet,
    UseGroupInvitationView,
    ValidateGroupInvitationView,
)

router = DefaultRouter()

router.register(r"companies", CompanyViewSet, basename="companies")
router.register(r"company-invitations", CompanyInvitationViewSet, basename="company-invitations")
router.register(r"groups", GroupViewSet, basename="groups")
router.register(r"users", UserViewSet, basename="users")
router.register(r"documents", DocumentViewSet, basename="documents")
router.register(r"audit/events", AuditEventViewSet, basename="audit-events")

urlpatterns = [
    # Auth + /me
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # Public (no token): registration-time calls
    path("public/register/", RegisterView.as_view(), name="public-register"),
    path("public/companies/register/", CompanyRegisterView.as_view(), name="public-company-register"),
    path("public/company-invitations/check/", CheckInvitationView.as_view(), name="public-invitation-check"),
    path(
        "public/groups/invitation/<str:code>/validate/",
        ValidateGroupInvitationView.as_view(),
        name="public-group-invitation-validate",
    ),
    path("public/groups/use-invitation/", UseGroupInvitationView.as_view(), name="public-group-invitation-use"),
    path("public/courses/", PublicCourseListView.as_view(), name="public-courses"),

    path("documents/missing/<int:user_id>/", MissingDocumentsView.as_view(), name="documents-missing"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
