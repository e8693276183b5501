# tc_core/iam/filters.py
from __future__ import annotations

import django_filters
from django.contrib.auth import get_user_model


class UserFilter(django_filters.FilterSet):
    """?companyId=&role=&isActive= on the user list."""

    companyId = django_filters.NumberFilter(field_name="tc_profile__company_id")
    role = django_filters.CharFilter(field_name="groups__name", distinct=True)
    isActive = django_filters.BooleanFilter(field_name="is_active")

    class Meta:
        model = get_user_model()
        fields = []
