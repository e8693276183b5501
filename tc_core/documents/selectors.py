# tc_core/documents/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from tc_core.documents.models import DocumentType, UserDocument


def list_document_types() -> QuerySet[DocumentType]:
    return DocumentType.objects.all().order_by("id")


def list_user_documents(*, user_id: int) -> QuerySet[UserDocument]:
    return (
        UserDocument.objects.select_related("document_type")
        .filter(user_id=user_id, is_active=True)
        .order_by("-uploaded_at")
    )
