from django.contrib.auth.models import Group, Permission
from django.core.management.base import BaseCommand

from core.permissions import MANAGERS_GROUP

MANAGED_APPS = ("clients", "sales", "accounting", "payments", "website")


class Command(BaseCommand):
    help = "Create or update the 'managers' group with portal permissions."

    def handle(self, *args, **options):
        group, created = Group.objects.get_or_create(name=MANAGERS_GROUP)

        # add/change/view on portal records, never delete
        perms = Permission.objects.filter(
            content_type__app_label__in=MANAGED_APPS
        ).exclude(codename__startswith="delete_")

        group.permissions.set(perms)

        self.stdout.write(
            self.style.SUCCESS(
                f"'{MANAGERS_GROUP}' group {'created' if created else 'updated'}. "
                f"Permissions count: {perms.count()}."
            )
        )
