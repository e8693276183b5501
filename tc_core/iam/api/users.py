# tc_core/iam/api/users.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from tc_core.common.api.pagination import paginate
from tc_core.common.permissions import UserPermission, is_company_account
from tc_core.iam.api.serializers import ProfileUpdateSerializer, UserResponseSerializer, UserSerializer
from tc_core.iam.filters import UserFilter
from tc_core.iam.selectors import get_user, user_qs
from tc_core.iam.services.membership import company_of
from tc_core.iam.services.users import UserService


@extend_schema_view(
    list=extend_schema(tags=["Users"], responses={200: UserSerializer(many=True)}),
    retrieve=extend_schema(tags=["Users"], responses={200: UserSerializer}),
    profile=extend_schema(tags=["Users"], request=ProfileUpdateSerializer, responses={200: UserResponseSerializer}),
    update_profile=extend_schema(tags=["Users"], request=ProfileUpdateSerializer, responses={200: UserResponseSerializer}),
    suspend=extend_schema(tags=["Users"], request=None, responses={200: UserResponseSerializer}),
    reactivate=extend_schema(tags=["Users"], request=None, responses={200: UserResponseSerializer}),
)
class UserViewSet(viewsets.GenericViewSet):
    """
    User accounts. ?search= matches name, e-mail and phone; ?ordering= accepts
    last_name, date_joined or id.
    """

    permission_classes = [UserPermission]
    serializer_class = UserSerializer
    filterset_class = UserFilter
    search_fields = ["email", "first_name", "last_name", "tc_profile__phone_number"]
    ordering_fields = ["id", "last_name", "date_joined"]
    ordering = ["last_name", "first_name", "id"]
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        qs = user_qs()
        if is_company_account(self.request.user):
            company_id = company_of(self.request.user.id)
            if company_id is None:
                raise PermissionDenied("Your account is not linked to a company.")
            qs = qs.filter(tc_profile__company_id=company_id)
        return qs

    def list(self, request):
        return paginate(request, self.filter_queryset(self.get_queryset()), UserSerializer)

    def retrieve(self, request, pk=None):
        return Response(UserSerializer(self.get_object()).data, status=status.HTTP_200_OK)

    def _apply_profile(self, request, user_id: int) -> Response:
        ser = ProfileUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        UserService.update_profile(user_id=user_id, changes=ser.validated_data, actor_user_id=request.user.id)
        return Response({"user": UserSerializer(get_user(user_id=user_id)).data}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get", "put"], url_path="profile")
    def profile(self, request):
        if request.method == "GET":
            return Response({"user": UserSerializer(get_user(user_id=request.user.id)).data}, status=status.HTTP_200_OK)
        return self._apply_profile(request, request.user.id)

    @action(detail=True, methods=["put"], url_path="profile")
    def update_profile(self, request, pk=None):
        return self._apply_profile(request, int(pk))

    @action(detail=True, methods=["post"], url_path="suspend")
    def suspend(self, request, pk=None):
        user = UserService.set_active(user_id=int(pk), is_active=False, actor_user_id=request.user.id)
        return Response({"user": UserSerializer(get_user(user_id=user.id)).data}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="reactivate")
    def reactivate(self, request, pk=None):
        user = UserService.set_active(user_id=int(pk), is_active=True, actor_user_id=request.user.id)
        return Response({"user": UserSerializer(get_user(user_id=user.id)).data}, status=status.HTTP_200_OK)
