# tc_core/groups/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response

from tc_core.common.api.pagination import paginate
from tc_core.common.permissions import GroupPermission, is_company_account
from tc_core.documents.services import group_document_status
from tc_core.groups.api.serializers import (
    GroupAddUsersSerializer,
    GroupCapacityResponseSerializer,
    GroupCreateSerializer,
    GroupMemberSerializer,
    GroupSerializer,
    GroupStatusUpdateSerializer,
    GroupUpdateSerializer,
)
from tc_core.groups.capacity import capacity_for
from tc_core.groups.models import TrainingGroup
from tc_core.groups.selectors import get_group, list_group_members, list_groups
from tc_core.groups.services import GroupService
from tc_core.iam.api.serializers import UserSerializer
from tc_core.iam.selectors import list_available_users
from tc_core.iam.services.membership import can_manage_company, company_of
from tc_core.invitations.api.serializers import GroupInvitationCreateSerializer, InvitationSerializer
from tc_core.invitations.api.views import get_managed_invitation
from tc_core.invitations.models import InvitationScope
from tc_core.invitations.selectors import invitation_qs, list_group_invitations
from tc_core.invitations.services import InvitationService


@extend_schema_view(
    list=extend_schema(tags=["Groups"], responses={200: GroupSerializer(many=True)}),
    retrieve=extend_schema(tags=["Groups"], responses={200: GroupSerializer}),
    create=extend_schema(tags=["Groups"], request=GroupCreateSerializer, responses={201: GroupSerializer}),
    partial_update=extend_schema(tags=["Groups"], request=GroupUpdateSerializer, responses={200: GroupSerializer}),
    capacity=extend_schema(tags=["Groups"], responses={200: GroupCapacityResponseSerializer}),
    set_status=extend_schema(tags=["Groups"], request=GroupStatusUpdateSerializer, responses={200: GroupSerializer}),
    invitations=extend_schema(tags=["Groups"], request=GroupInvitationCreateSerializer, responses={200: InvitationSerializer(many=True), 201: InvitationSerializer}),
    deactivate_invitation=extend_schema(tags=["Groups"], request=None, responses={200: InvitationSerializer}),
    users=extend_schema(tags=["Groups"], request=GroupAddUsersSerializer, responses={200: GroupMemberSerializer(many=True)}),
    available_users=extend_schema(tags=["Groups"], responses={200: UserSerializer(many=True)}),
    remove_user=extend_schema(tags=["Groups"], responses={204: None}),
    document_status=extend_schema(tags=["Groups"], responses={200: OpenApiTypes.OBJECT}),
)
class GroupViewSet(viewsets.ViewSet):
    """
    Training groups. Company accounts only see and manage groups of their own company.
    """

    permission_classes = [GroupPermission]
    lookup_value_regex = r"\d+"
    serializer_class = GroupSerializer
    queryset = TrainingGroup.objects.none()

    def _get_visible(self, request, pk) -> TrainingGroup:
        try:
            group = get_group(group_id=int(pk))
        except TrainingGroup.DoesNotExist:
            raise NotFound("Group not found.")
        if is_company_account(request.user) and not can_manage_company(request.user, group.company_id):
            # do not reveal groups of other companies
            raise NotFound("Group not found.")
        return group

    def list(self, request):
        company_id = request.query_params.get("companyId")
        if is_company_account(request.user):
            company_id = company_of(request.user.id)
            if company_id is None:
                raise PermissionDenied("Your account is not linked to a company.")

        qs = list_groups(
            company_id=int(company_id) if company_id not in (None, "") else None,
            status=request.query_params.get("status") or None,
            search=request.query_params.get("search") or None,
        )
        return paginate(request, qs, GroupSerializer)

    def retrieve(self, request, pk=None):
        return Response(GroupSerializer(self._get_visible(request, pk)).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = GroupCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        group = GroupService.create_group(
            name=data["name"],
            description=data.get("description", ""),
            company_id=data.get("companyId"),
            course_id=data.get("courseId"),
            max_participants=data.get("maxParticipants"),
            status=data.get("status"),
            registration_deadline=data.get("registrationDeadline"),
            actor_user_id=request.user.id,
        )
        return Response(GroupSerializer(get_group(group_id=group.id)).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        group = self._get_visible(request, pk)
        ser = GroupUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        GroupService.update_group(
            group_id=group.id,
            name=data.get("name"),
            description=data.get("description"),
            course_id=data.get("courseId"),
            max_participants=data.get("maxParticipants"),
            registration_deadline=data.get("registrationDeadline"),
            clear_deadline="registrationDeadline" in data and data["registrationDeadline"] is None,
        )
        return Response(GroupSerializer(get_group(group_id=group.id)).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"], url_path="capacity")
    def capacity(self, request, pk=None):
        group = self._get_visible(request, pk)
        return Response({"capacity": capacity_for(group).as_dict()}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["put"], url_path="status")
    def set_status(self, request, pk=None):
        ser = GroupStatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        group = GroupService.set_status(
            group_id=int(pk),
            status=ser.validated_data["status"],
            actor_user_id=request.user.id,
        )
        return Response({"group": GroupSerializer(get_group(group_id=group.id)).data}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get", "post"], url_path="invitations")
    def invitations(self, request, pk=None):
        group = self._get_visible(request, pk)
        if is_company_account(request.user) and group.company_id is None:
            raise PermissionDenied("Only staff manage invitations of standalone groups.")

        if request.method == "GET":
            qs = list_group_invitations(group_id=group.id)
            return Response({"invitations": InvitationSerializer(qs, many=True).data}, status=status.HTTP_200_OK)

        ser = GroupInvitationCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        invitation = InvitationService.create_group_invitation(
            group_id=group.id,
            max_uses=data.get("maxUses"),
            expires_at=data.get("expiresAt"),
            valid_for_days=data.get("validForDays"),
            description=data.get("description", ""),
            actor_user_id=request.user.id,
        )
        invitation = invitation_qs().get(id=invitation.id)
        return Response({"invitation": InvitationSerializer(invitation).data}, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["put"], url_path=r"invitations/(?P<invitation_id>\d+)/deactivate")
    def deactivate_invitation(self, request, invitation_id=None):
        get_managed_invitation(request, int(invitation_id), scope=InvitationScope.GROUP)
        invitation = InvitationService.deactivate(invitation_id=int(invitation_id), actor_user_id=request.user.id)
        invitation = invitation_qs().get(id=invitation.id)
        return Response({"invitation": InvitationSerializer(invitation).data}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get", "post"], url_path="users")
    def users(self, request, pk=None):
        group = self._get_visible(request, pk)

        if request.method == "POST":
            ser = GroupAddUsersSerializer(data=request.data)
            ser.is_valid(raise_exception=True)
            GroupService.add_users(
                group_id=group.id,
                user_ids=ser.validated_data["userIds"],
                actor_user_id=request.user.id,
            )
            group = get_group(group_id=group.id)

        members = list_group_members(group_id=group.id)
        return Response(
            {
                "group": GroupSerializer(group).data,
                "users": GroupMemberSerializer(members, many=True).data,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["get"], url_path="available-users")
    def available_users(self, request, pk=None):
        """Accounts that can still be added: everyone not already an active member."""
        group = self._get_visible(request, pk)
        qs = list_available_users(group_id=group.id, search=request.query_params.get("search") or None)
        return paginate(request, qs, UserSerializer)

    @action(detail=True, methods=["delete"], url_path=r"users/(?P<user_id>\d+)")
    def remove_user(self, request, pk=None, user_id=None):
        group = self._get_visible(request, pk)
        GroupService.remove_user(group_id=group.id, user_id=int(user_id), actor_user_id=request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get"], url_path="document-status")
    def document_status(self, request, pk=None):
        group = self._get_visible(request, pk)
        return Response(group_document_status(group.id), status=status.HTTP_200_OK)
