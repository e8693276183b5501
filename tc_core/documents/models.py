# tc_core/documents/models.py
from django.conf import settings
from django.db import models

from tc_core.common.models import TimeStampedModel


class DocumentType(TimeStampedModel):
    """
    A kind of paper a participant must hand in.
    `course_types` lists the course types (initial / refresher) that require it.
    """
    name = models.CharField(max_length=64, unique=True)  # API identifier, e.g. "DiplomaCopy"
    label = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    course_types = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "documents_document_type"
        ordering = ("id",)

    def __str__(self) -> str:
        return self.name


def user_document_path(instance, filename: str) -> str:
    return f"documents/{instance.user_id}/{instance.document_type.name}/{filename}"


class UserDocument(TimeStampedModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="documents")
    document_type = models.ForeignKey(DocumentType, on_delete=models.PROTECT, related_name="uploads")
    file = models.FileField(upload_to=user_document_path, max_length=500)
    original_name = models.CharField(max_length=255, blank=True, default="")
    uploaded_at = models.DateTimeField(auto_now_add=True, db_index=True)
    is_active = models.BooleanField(default=True, db_index=True)  # delete == deactivate

    class Meta:
        db_table = "documents_user_document"
        ordering = ("-uploaded_at",)
        indexes = [
            models.Index(fields=["user", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.document_type_id} for {self.user_id}"
