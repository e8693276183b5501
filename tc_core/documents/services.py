# tc_core/documents/services.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import NotFound, ValidationError

from tc_core.courses.models import Enrollment
from tc_core.documents.models import DocumentType, UserDocument
from tc_core.groups.models import GroupMembership, TrainingGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissingDocuments:
    has_all_required_documents: bool
    missing_document_types: list[DocumentType] = field(default_factory=list)
    enrolled_courses: list[int] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "hasAllRequiredDocuments": self.has_all_required_documents,
            "missingDocumentTypes": [
                {"id": t.id, "name": t.name, "label": t.label, "description": t.description}
                for t in self.missing_document_types
            ],
            "enrolledCourses": self.enrolled_courses,
        }


def required_document_types(course_types: set[str]) -> list[DocumentType]:
    # The catalogue is a handful of rows; filter in Python so it works on any backend.
    if not course_types:
        return []
    return [t for t in DocumentType.objects.order_by("id") if course_types.intersection(t.course_types or [])]


def missing_documents(user_id: int) -> MissingDocuments:
    enrollments = list(Enrollment.objects.select_related("course").filter(user_id=user_id).order_by("course_id"))
    course_types = {e.course.course_type for e in enrollments}

    required = required_document_types(course_types)
    uploaded = set(
        UserDocument.objects.filter(user_id=user_id, is_active=True).values_list("document_type_id", flat=True)
    )
    missing = [t for t in required if t.id not in uploaded]

    return MissingDocuments(
        has_all_required_documents=not missing,
        missing_document_types=missing,
        enrolled_courses=[e.course_id for e in enrollments],
    )


def group_document_status(group_id: int) -> dict:
    """
    Per-member document completeness for a group.

    A member without any enrollment has no requirements we can compute, so
    they count as "unknown" rather than complete.
    """
    if not TrainingGroup.objects.filter(id=group_id).exists():
        raise NotFound("Group not found.")

    members = (
        GroupMembership.objects.select_related("user")
        .filter(group_id=group_id, is_active=True)
        .order_by("user__last_name", "user__first_name")
    )

    users = []
    complete = incomplete = unknown = 0
    for m in members:
        result = missing_documents(m.user_id)
        if not result.enrolled_courses:
            state = "unknown"
            unknown += 1
        elif result.has_all_required_documents:
            state = "complete"
            complete += 1
        else:
            state = "incomplete"
            incomplete += 1

        users.append(
            {
                "userId": m.user_id,
                "firstName": m.user.first_name,
                "lastName": m.user.last_name,
                "email": m.user.email,
                "status": state,
                "missingDocuments": [t.name for t in result.missing_document_types],
            }
        )

    total = len(users)
    return {
        "groupId": group_id,
        "users": users,
        "summary": {
            "totalUsers": total,
            "complete": complete,
            "incomplete": incomplete,
            "unknown": unknown,
            "completionPercentage": round(complete * 100 / total) if total else 0,
        },
    }


class DocumentService:
    @staticmethod
    def _discard_files(documents: list[UserDocument]) -> None:
        # only files already written to storage are committed
        written = [doc.file for doc in documents if doc.file and doc.file._committed]
        for stored in written:
            stored.storage.delete(stored.name)
        if written:
            logger.warning("Removed %s orphaned upload(s) after a failed document save", len(written))

    @staticmethod
    def _check_file(upload) -> None:
        ext = os.path.splitext(upload.name or "")[1].lower().lstrip(".")
        allowed = settings.DOCUMENT_ALLOWED_EXTENSIONS
        if ext not in allowed:
            raise ValidationError({"files": f"Unsupported file type '{ext}'. Allowed: {sorted(allowed)}"})

        max_bytes = settings.DOCUMENT_MAX_UPLOAD_MB * 1024 * 1024
        if upload.size > max_bytes:
            raise ValidationError({"files": f"File {upload.name} exceeds {settings.DOCUMENT_MAX_UPLOAD_MB} MB."})

    @staticmethod
    def upload(*, user_id: int, files: list, doc_type_names: list[str]) -> list[UserDocument]:
        """
        Store one file per document type. A new upload replaces (deactivates)
        the previous active file of the same type.
        """
        if not get_user_model().objects.filter(id=user_id).exists():
            raise ValidationError({"userId": "User not found."})
        if not files:
            raise ValidationError({"files": "At least one file is required."})
        if len(files) != len(doc_type_names):
            raise ValidationError({"docTypeNames": "One document type is required per file."})

        types = {t.name: t for t in DocumentType.objects.filter(name__in=doc_type_names)}
        unknown = sorted(set(doc_type_names) - set(types))
        if unknown:
            raise ValidationError({"docTypeNames": f"Unknown document types: {unknown}"})

        for upload in files:
            DocumentService._check_file(upload)

        created: list[UserDocument] = []
        try:
            with transaction.atomic():
                for upload, type_name in zip(files, doc_type_names):
                    doc_type = types[type_name]
                    UserDocument.objects.filter(
                        user_id=user_id, document_type=doc_type, is_active=True
                    ).update(is_active=False)
                    doc = UserDocument(
                        user_id=user_id,
                        document_type=doc_type,
                        file=upload,
                        original_name=os.path.basename(upload.name or "")[:255],
                    )
                    created.append(doc)
                    doc.save()
        except Exception:
            # rows were rolled back; the files already written to storage were not
            DocumentService._discard_files(created)
            raise

        logger.info("Stored %s documents for user %s", len(created), user_id)
        return created

    @staticmethod
    @transaction.atomic
    def deactivate(*, document_id: int, owner_id: Optional[int] = None) -> UserDocument:
        qs = UserDocument.objects.select_for_update().filter(id=document_id)
        if owner_id is not None:
            qs = qs.filter(user_id=owner_id)
        doc = qs.first()
        if doc is None:
            raise NotFound("Document not found.")

        # idempotent no-op
        if not doc.is_active:
            return doc

        doc.is_active = False
        doc.save(update_fields=["is_active", "updated_at"])
        return doc
