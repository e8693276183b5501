# tc_core/documents/admin.py
from django.contrib import admin

from tc_core.documents.models import DocumentType, UserDocument


@admin.register(DocumentType)
class DocumentTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "label", "course_types")
    search_fields = ("name", "label")


@admin.register(UserDocument)
class UserDocumentAdmin(admin.ModelAdmin):
    list_display = ("user", "document_type", "original_name", "uploaded_at", "is_active")
    list_filter = ("document_type", "is_active")
    search_fields = ("user__email", "user__last_name", "original_name")
