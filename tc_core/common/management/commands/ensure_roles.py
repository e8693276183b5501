# tc_core/common/management/commands/ensure_roles.py

from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand

from tc_core.common.permissions import ALL_ROLES


class Command(BaseCommand):
    help = "Create the role groups (ADMIN, OFFICE_WORKER, COMPANY, INSTRUCTOR, STUDENT). Safe to re-run."

    def handle(self, *args, **options):
        existing = set(Group.objects.filter(name__in=ALL_ROLES).values_list("name", flat=True))
        missing = [name for name in ALL_ROLES if name not in existing]

        for name in missing:
            Group.objects.create(name=name)
            self.stdout.write(f"  created role {name}")

        self.stdout.write(self.style.SUCCESS(f"{len(ALL_ROLES)} roles present, {len(missing)} created."))
