# tc_core/invitations/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from tc_core.common.permissions import InvitationPermission
from tc_core.groups.capacity import capacity_for, is_registration_open
from tc_core.iam.services.membership import can_manage_company
from tc_core.invitations.api.serializers import (
    CompanyInvitationCreateSerializer,
    GroupInvitationValidateResponseSerializer,
    InvitationCheckResponseSerializer,
    InvitationCodeRequestSerializer,
    InvitationSerializer,
    UseInvitationRequestSerializer,
    UseInvitationResponseSerializer,
)
from tc_core.invitations.models import InvitationCode, InvitationScope
from tc_core.invitations.selectors import invitation_qs, list_company_invitations
from tc_core.invitations.services import EnrollmentLinker, InvitationService
from tc_core.invitations.validation import validate


def _invitation_company_id(invitation: InvitationCode) -> int | None:
    if invitation.company_id:
        return invitation.company_id
    return invitation.group.company_id if invitation.group_id else None


def get_managed_invitation(request, invitation_id: int, *, scope: str) -> InvitationCode:
    invitation = invitation_qs().filter(id=invitation_id, scope=scope).first()
    if invitation is None:
        raise NotFound("Invitation not found.")
    if not can_manage_company(request.user, _invitation_company_id(invitation)):
        raise PermissionDenied("You cannot manage invitations of another company.")
    return invitation


@extend_schema_view(
    create=extend_schema(
        tags=["Invitations"],
        request=CompanyInvitationCreateSerializer,
        responses={201: InvitationSerializer},
    ),
    for_company=extend_schema(tags=["Invitations"], responses={200: InvitationSerializer(many=True)}),
    deactivate=extend_schema(tags=["Invitations"], request=None, responses={200: InvitationSerializer}),
)
class CompanyInvitationViewSet(viewsets.ViewSet):
    """
    Company-scoped invitation codes. Company accounts manage their own company only.
    """

    permission_classes = [InvitationPermission]
    lookup_value_regex = r"\d+"
    serializer_class = InvitationSerializer
    queryset = InvitationCode.objects.none()

    def create(self, request):
        ser = CompanyInvitationCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        company_id = ser.validated_data["companyId"]

        if not can_manage_company(request.user, company_id):
            raise PermissionDenied("You cannot issue invitations for another company.")

        invitation = InvitationService.create_company_invitation(
            company_id=company_id,
            max_uses=ser.validated_data.get("maxUses"),
            valid_for_days=ser.validated_data.get("validForDays"),
            actor_user_id=request.user.id,
        )
        invitation = invitation_qs().get(id=invitation.id)
        return Response({"invitation": InvitationSerializer(invitation).data}, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], url_path=r"company/(?P<company_id>\d+)")
    def for_company(self, request, company_id=None):
        company_id = int(company_id)
        if not can_manage_company(request.user, company_id):
            raise PermissionDenied("You cannot view invitations of another company.")

        qs = list_company_invitations(company_id=company_id)
        return Response({"invitations": InvitationSerializer(qs, many=True).data}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["put"], url_path="deactivate")
    def deactivate(self, request, pk=None):
        get_managed_invitation(request, int(pk), scope=InvitationScope.COMPANY)
        invitation = InvitationService.deactivate(invitation_id=int(pk), actor_user_id=request.user.id)
        invitation = invitation_qs().get(id=invitation.id)
        return Response({"invitation": InvitationSerializer(invitation).data}, status=status.HTTP_200_OK)


# -------------------------
# Public (registration time)
# -------------------------

class CheckInvitationView(APIView):
    """
    Live check of a code typed into the registration form. Read-only.
    Invalid codes are a normal answer (200, isValid=false), not an error.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Public"], request=InvitationCodeRequestSerializer, responses={200: InvitationCheckResponseSerializer})
    def post(self, request):
        ser = InvitationCodeRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        check = validate(ser.validated_data["invitationCode"])
        payload = {"isValid": check.valid, "reason": check.reason, "message": check.message}

        if check.valid:
            target = check.target
            payload["companyName"] = target.company_name
            payload["groupName"] = target.name if target.scope == InvitationScope.GROUP else None
            payload["remainingUses"] = check.invitation.remaining_uses
            payload["expiresAt"] = check.invitation.expires_at
            if target.company_name:
                payload["message"] = f"You will be linked to {target.company_name}."

        return Response(payload, status=status.HTTP_200_OK)


class ValidateGroupInvitationView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Public"], responses={200: GroupInvitationValidateResponseSerializer})
    def get(self, request, code: str):
        check = validate(code, scope=InvitationScope.GROUP)
        if not check.valid:
            return Response(
                {"valid": False, "reason": check.reason, "error": check.message},
                status=status.HTTP_200_OK,
            )

        group = check.invitation.group
        company = group.company
        return Response(
            {
                "valid": True,
                "reason": None,
                "group": {
                    "id": group.id,
                    "name": group.name,
                    "description": group.description,
                    "status": group.status,
                    "registrationOpen": is_registration_open(group),
                    "capacity": capacity_for(group).as_dict(),
                    "company": {"id": company.id, "name": company.company_name} if company else None,
                },
            },
            status=status.HTTP_200_OK,
        )


class UseGroupInvitationView(APIView):
    """
    Redeem a group code for a freshly registered user.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Public"], request=UseInvitationRequestSerializer, responses={200: UseInvitationResponseSerializer})
    def post(self, request):
        ser = UseInvitationRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = EnrollmentLinker.redeem(
            code=ser.validated_data["invitationCode"],
            user_id=ser.validated_data["userId"],
            scope=InvitationScope.GROUP,
        )
        return Response(
            {
                "success": result.success,
                "groupId": result.group_id,
                "groupName": result.group_name,
                "companyId": result.company_id,
                "companyName": result.company_name,
                "message": result.message,
            },
            status=status.HTTP_200_OK,
        )
