# tc_core/documents/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from tc_core.common.permissions import is_staff_user
from tc_core.documents.api.serializers import (
    DocumentTypeSerializer,
    DocumentUploadSerializer,
    UserDocumentSerializer,
)
from tc_core.documents.models import UserDocument
from tc_core.documents.selectors import list_document_types, list_user_documents
from tc_core.documents.services import DocumentService, missing_documents


def _target_user_id(request, raw) -> int:
    """
    The user a document request is about: yourself, or anyone for staff.
    """
    if raw in (None, ""):
        return request.user.id
    try:
        user_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({"userId": "Invalid value (int expected)."})
    if user_id != request.user.id and not is_staff_user(request.user):
        raise PermissionDenied("You can only access your own documents.")
    return user_id


@extend_schema_view(
    list=extend_schema(tags=["Documents"], responses={200: UserDocumentSerializer(many=True)}),
    create=extend_schema(tags=["Documents"], request=DocumentUploadSerializer, responses={201: UserDocumentSerializer(many=True)}),
    destroy=extend_schema(tags=["Documents"], responses={204: None}),
    types=extend_schema(tags=["Documents"], responses={200: DocumentTypeSerializer(many=True)}),
)
class DocumentViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]
    lookup_value_regex = r"\d+"
    serializer_class = UserDocumentSerializer
    queryset = UserDocument.objects.none()

    def list(self, request):
        user_id = _target_user_id(request, request.query_params.get("userId"))
        qs = list_user_documents(user_id=user_id)
        return Response(
            {"documents": UserDocumentSerializer(qs, many=True, context={"request": request}).data},
            status=status.HTTP_200_OK,
        )

    def create(self, request):
        data = {
            "files": request.FILES.getlist("files"),
            "docTypeNames": request.data.getlist("docTypeNames"),
        }
        if request.data.get("userId"):
            data["userId"] = request.data.get("userId")

        ser = DocumentUploadSerializer(data=data)
        ser.is_valid(raise_exception=True)
        user_id = _target_user_id(request, ser.validated_data.get("userId"))

        docs = DocumentService.upload(
            user_id=user_id,
            files=ser.validated_data["files"],
            doc_type_names=ser.validated_data["docTypeNames"],
        )
        return Response(
            {"documents": UserDocumentSerializer(docs, many=True, context={"request": request}).data},
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request, pk=None):
        owner_id = None if is_staff_user(request.user) else request.user.id
        DocumentService.deactivate(document_id=int(pk), owner_id=owner_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path="types")
    def types(self, request):
        return Response(DocumentTypeSerializer(list_document_types(), many=True).data, status=status.HTTP_200_OK)


class MissingDocumentsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Documents"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request, user_id: int):
        user_id = _target_user_id(request, user_id)
        return Response(missing_documents(user_id).as_dict(), status=status.HTTP_200_OK)
