# tc_core/api/urls_v1.py
# Schema-only urlconf: documents the versioned routes without the /api/ alias.
from django.urls import include, path

urlpatterns = [
    path("api/v1/", include("tc_core.api.urls")),
]
