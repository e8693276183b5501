# tc_core/documents/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from tc_core.documents.models import DocumentType, UserDocument


class DocumentTypeSerializer(serializers.ModelSerializer):
    courseTypes = serializers.JSONField(source="course_types", read_only=True)

    class Meta:
        model = DocumentType
        fields = ["id", "name", "label", "description", "courseTypes"]
        read_only_fields = fields


class UserDocumentSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    documentType = serializers.CharField(source="document_type.name", read_only=True)
    documentLabel = serializers.CharField(source="document_type.label", read_only=True)
    documentUrl = serializers.SerializerMethodField()
    originalName = serializers.CharField(source="original_name", read_only=True)
    uploadedAt = serializers.DateTimeField(source="uploaded_at", read_only=True)

    class Meta:
        model = UserDocument
        fields = ["id", "userId", "documentType", "documentLabel", "documentUrl", "originalName", "uploadedAt"]
        read_only_fields = fields

    def get_documentUrl(self, obj: UserDocument) -> str | None:
        if not obj.file:
            return None
        request = self.context.get("request")
        url = obj.file.url
        return request.build_absolute_uri(url) if request is not None else url


class DocumentUploadSerializer(serializers.Serializer):
    userId = serializers.IntegerField(required=False)
    files = serializers.ListField(child=serializers.FileField(), allow_empty=False)
    docTypeNames = serializers.ListField(child=serializers.CharField(), allow_empty=False)
