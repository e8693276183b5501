# tc_core/companies/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from tc_core.common.api.pagination import paginate
from tc_core.common.permissions import CompanyPermission
from tc_core.companies.api.serializers import (
    CompanyRegisterSerializer,
    CompanyRejectSerializer,
    CompanyReviewResponseSerializer,
    CompanySerializer,
)
from tc_core.companies.models import Company
from tc_core.companies.selectors import get_company, list_companies, list_pending_companies
from tc_core.companies.services import CompanyService


@extend_schema_view(
    list=extend_schema(tags=["Companies"], responses={200: CompanySerializer(many=True)}),
    retrieve=extend_schema(tags=["Companies"], responses={200: CompanySerializer}),
    pending=extend_schema(tags=["Companies"], responses={200: CompanySerializer(many=True)}),
    approve=extend_schema(tags=["Companies"], request=None, responses={200: CompanyReviewResponseSerializer}),
    reject=extend_schema(tags=["Companies"], request=CompanyRejectSerializer, responses={200: CompanyReviewResponseSerializer}),
)
class CompanyViewSet(viewsets.ViewSet):
    """
    Staff-only company review.
    """

    permission_classes = [CompanyPermission]
    lookup_value_regex = r"\d+"
    serializer_class = CompanySerializer
    queryset = Company.objects.none()

    def list(self, request):
        qs = list_companies(
            status=request.query_params.get("status") or None,
            search=request.query_params.get("search") or None,
        )
        return paginate(request, qs, CompanySerializer)

    def retrieve(self, request, pk=None):
        try:
            obj = get_company(company_id=int(pk))
        except (Company.DoesNotExist, ValueError):
            raise NotFound("Company not found.")
        return Response(CompanySerializer(obj).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path="pending")
    def pending(self, request):
        return paginate(request, list_pending_companies(), CompanySerializer)

    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        company = CompanyService.approve(company_id=int(pk), actor_user_id=request.user.id)
        return Response(
            {"success": True, "message": "Company approved.", "company": CompanySerializer(company).data},
            status=status.HTTP_200_OK,
        )

    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):
        ser = CompanyRejectSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        company = CompanyService.reject(
            company_id=int(pk),
            actor_user_id=request.user.id,
            reason=ser.validated_data.get("reason", ""),
        )
        return Response(
            {"success": True, "message": "Company rejected.", "company": CompanySerializer(company).data},
            status=status.HTTP_200_OK,
        )


class CompanyRegisterView(APIView):
    """
    Public company self-registration. New companies wait in `pending` for review.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(tags=["Public"], request=CompanyRegisterSerializer, responses={201: CompanySerializer})
    def post(self, request):
        ser = CompanyRegisterSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        company = CompanyService.register(
            company_name=data["companyName"],
            tax_number=data["taxNumber"],
            address=data["address"],
            manager_name=data["managerName"],
            phone_number=data["phoneNumber"],
            email=data["email"],
            contact_person_name=data["contactPersonName"],
        )
        return Response(
            {
                "success": True,
                "message": "Company registered. It will be available after review.",
                "company": CompanySerializer(company).data,
            },
            status=status.HTTP_201_CREATED,
        )
