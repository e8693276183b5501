# tc_core/documents/management/commands/seed_document_types.py

from django.core.management.base import BaseCommand

from tc_core.documents.catalog import DEFAULT_DOCUMENT_TYPES
from tc_core.documents.models import DocumentType


class Command(BaseCommand):
    help = "Create or refresh the default document type catalogue (idempotent)."

    def handle(self, *args, **options):
        created = updated = 0
        for entry in DEFAULT_DOCUMENT_TYPES:
            obj, was_created = DocumentType.objects.get_or_create(
                name=entry["name"],
                defaults={"label": entry["label"], "course_types": list(entry["course_types"])},
            )
            if was_created:
                created += 1
                continue

            course_types = list(entry["course_types"])
            if obj.label != entry["label"] or obj.course_types != course_types:
                obj.label = entry["label"]
                obj.course_types = course_types
                obj.save(update_fields=["label", "course_types", "updated_at"])
                updated += 1

        self.stdout.write(self.style.SUCCESS(f"Document types ensured. Created: {created}, updated: {updated}"))
