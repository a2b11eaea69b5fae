from io import StringIO

from django.contrib.auth.models import Group
from django.core.management import call_command
from django.test import TestCase

from core.permissions import MANAGERS_GROUP


class SeedRolesCommandTests(TestCase):
    def test_creates_managers_group_without_delete_permissions(self):
        out = StringIO()
        call_command("seed_roles", stdout=out)

        group = Group.objects.get(name=MANAGERS_GROUP)
        codenames = set(group.permissions.values_list("codename", flat=True))
        self.assertIn("add_client", codenames)
        self.assertIn("change_invoice", codenames)
        self.assertIn("view_paymentsubmission", codenames)
        self.assertNotIn("delete_client", codenames)
        self.assertIn("created", out.getvalue())

    def test_is_idempotent(self):
        call_command("seed_roles", stdout=StringIO())
        call_command("seed_roles", stdout=StringIO())
        self.assertEqual(Group.objects.filter(name=MANAGERS_GROUP).count(), 1)
