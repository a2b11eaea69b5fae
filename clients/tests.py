# clients/tests.py
import datetime
from unittest import mock

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core import mail
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError
from django.test import TestCase
from django.urls import reverse

from core.models import AuditLog, IdSequence
from core.numbering import SequenceAllocationFailed, SequenceType
from core.permissions import MANAGERS_GROUP
from core.services.numbering import DatabaseSequenceStore
from website.models import Inquiry

from .models import Client, Project
from .passwords import SYMBOLS, generate_password
from .services import convert_inquiry, onboard_client

User = get_user_model()

ON = datetime.date(2025, 3, 10)


class GeneratePasswordTests(TestCase):
    def test_default_length_and_character_classes(self):
        for _ in range(20):
            password = generate_password()
            self.assertEqual(len(password), 12)
            self.assertTrue(any(c.isupper() for c in password))
            self.assertTrue(any(c.islower() for c in password))
            self.assertTrue(any(c.isdigit() for c in password))
            self.assertTrue(any(c in SYMBOLS for c in password))

    def test_passwords_differ(self):
        self.assertEqual(len({generate_password() for _ in range(50)}), 50)

    def test_too_short(self):
        with self.assertRaises(ValueError):
            generate_password(3)
        self.assertEqual(len(generate_password(4)), 4)


class OnboardClientTests(TestCase):
    def onboard(self, **kwargs):
        data = {
            "email": "owner@acme.example",
            "company_name": "Acme",
            "project_code": "E",
            "platform_code": "A",
            "country": "ind",
            "on": ON,
        }
        data.update(kwargs)
        return onboard_client(**data)

    def test_creates_user_client_and_default_project(self):
        with self.captureOnCommitCallbacks(execute=True):
            result = self.onboard()

        client = result.client
        self.assertEqual(client.client_id, "EA701-IND-253")
        self.assertEqual(client.base_client_id, "EA701")
        self.assertEqual(client.year_hex, "253")
        self.assertEqual(client.client_sequence_number, 1)
        self.assertEqual(client.country, "IND")
        self.assertTrue(client.user.check_password(result.password))
        self.assertEqual(client.user.username, "owner@acme.example")
        self.assertEqual(result.project.title, "Acme - Main Project")
        self.assertEqual(Project.objects.for_client(client).count(), 1)

        entry = AuditLog.objects.get(action=AuditLog.Action.ID_ASSIGNED)
        self.assertEqual(entry.extra["client_id"], "EA701-IND-253")

    def test_welcome_email_contains_credentials(self):
        with self.captureOnCommitCallbacks(execute=True):
            result = self.onboard(password=None)

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, ["owner@acme.example"])
        self.assertIn("EA701-IND-253", message.body)
        self.assertIn(result.password, message.body)
        self.assertIn("/accounts/login/", message.body)

    def test_email_is_normalized(self):
        result = self.onboard(email="  Owner@ACME.example ")
        self.assertEqual(result.client.contact_email, "owner@acme.example")

    def test_duplicate_email_is_rejected_before_allocation(self):
        User.objects.create_user("someone", "owner@acme.example", "pw")

        with self.assertRaises(ValidationError):
            self.onboard()

        self.assertFalse(IdSequence.objects.exists())
        self.assertFalse(Client.objects.exists())

    def test_weak_explicit_password_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.onboard(password="123")
        self.assertFalse(IdSequence.objects.exists())

    def test_bad_country_is_rejected(self):
        for country in ("IN", "INDIA", "12A"):
            with self.subTest(country=country), self.assertRaises(ValidationError):
                self.onboard(country=country)

    def test_allocation_failure_creates_nothing(self):
        error = SequenceAllocationFailed(SequenceType.CLIENT, cause=DatabaseError("down"))
        with mock.patch.object(DatabaseSequenceStore, "allocate", side_effect=error):
            with self.assertRaises(SequenceAllocationFailed):
                self.onboard()

        self.assertFalse(User.objects.exists())
        self.assertFalse(Client.objects.exists())

    def test_failed_insert_burns_the_number(self):
        with mock.patch.object(Client, "save", side_effect=IntegrityError("boom")):
            with self.assertRaises(IntegrityError):
                self.onboard()

        self.assertFalse(User.objects.exists())
        result = self.onboard()
        self.assertEqual(result.client.client_id, "EA702-IND-253")

    def test_sequence_is_global_across_codes_and_countries(self):
        self.onboard()
        other = self.onboard(
            email="hi@startup.example",
            company_name="Startup",
            project_code="S",
            platform_code="W",
            country="USA",
        )
        self.assertEqual(other.client.client_id, "SW702-USA-253")

    def test_manager_becomes_account_manager(self):
        manager = User.objects.create_user("mgr", "mgr@zervitra.com", "pw")
        manager.groups.add(Group.objects.create(name=MANAGERS_GROUP))

        result = self.onboard(actor=manager)
        self.assertEqual(result.client.manager, manager)
        self.assertEqual(result.client.created_by, manager)


class ConvertInquiryTests(TestCase):
    def setUp(self):
        self.inquiry = Inquiry.objects.create(
            company_name="Blue Fin",
            contact_name="Asha",
            email="asha@bluefin.example",
            phone="+91 90000 00000",
            city="Chennai",
            project_description="Booking app for ferries",
        )

    def test_marks_inquiry_converted(self):
        result = convert_inquiry(self.inquiry, project_code="S", platform_code="A")

        self.inquiry.refresh_from_db()
        self.assertEqual(self.inquiry.status, Inquiry.Status.CONVERTED)
        self.assertEqual(self.inquiry.converted_client, result.client)
        self.assertEqual(result.client.company_name, "Blue Fin")
        self.assertEqual(result.project.description, "Booking app for ferries")

    def test_cannot_convert_twice(self):
        convert_inquiry(self.inquiry)
        with self.assertRaises(ValidationError):
            convert_inquiry(self.inquiry)

    def test_stale_instance_cannot_convert_again(self):
        stale = Inquiry.objects.get(pk=self.inquiry.pk)
        convert_inquiry(self.inquiry)

        with self.assertRaises(ValidationError):
            convert_inquiry(stale)
        self.assertEqual(Client.objects.count(), 1)

    def test_failed_status_update_rolls_back_the_client(self):
        with mock.patch.object(Inquiry, "save", side_effect=DatabaseError("boom")):
            with self.assertRaises(DatabaseError):
                convert_inquiry(self.inquiry)

        self.assertFalse(Client.objects.exists())
        self.assertFalse(User.objects.filter(email=self.inquiry.email).exists())
        self.inquiry.refresh_from_db()
        self.assertEqual(self.inquiry.status, Inquiry.Status.NEW)
        self.assertIsNone(self.inquiry.converted_client)


class ClientViewTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user("admin", "admin@zervitra.com", "pw", is_staff=True)
        self.manager = User.objects.create_user("mgr", "mgr@zervitra.com", "pw")
        self.manager.groups.add(Group.objects.create(name=MANAGERS_GROUP))
        self.outsider = User.objects.create_user("joe", "joe@example.com", "pw")

    def test_list_requires_staff(self):
        response = self.client.get(reverse("clients:client_list"))
        self.assertEqual(response.status_code, 302)

        self.client.force_login(self.outsider)
        response = self.client.get(reverse("clients:client_list"))
        self.assertEqual(response.status_code, 403)

    def test_manager_sees_only_own_clients(self):
        mine = onboard_client(email="a@a.example", company_name="Mine", actor=self.manager).client
        onboard_client(email="b@b.example", company_name="Theirs", actor=self.admin)

        self.client.force_login(self.manager)
        response = self.client.get(reverse("clients:client_list"))
        self.assertEqual(list(response.context["clients"]), [mine])

    def test_create_view_onboards_client(self):
        self.client.force_login(self.admin)
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                reverse("clients:client_create"),
                {
                    "company_name": "Orbit Labs",
                    "email": "team@orbit.example",
                    "project_code": "M",
                    "platform_code": "B",
                    "country": "usa",
                },
            )

        self.assertRedirects(response, reverse("clients:client_list"))
        client = Client.objects.get()
        self.assertTrue(client.client_id.startswith("MB701-USA-"))
        self.assertEqual(len(mail.outbox), 1)

    def test_create_view_reports_allocation_failure(self):
        self.client.force_login(self.admin)
        error = SequenceAllocationFailed(SequenceType.CLIENT)
        with mock.patch.object(DatabaseSequenceStore, "allocate", side_effect=error):
            with self.assertLogs("clients.views", level="ERROR"):
                response = self.client.post(
                    reverse("clients:client_create"),
                    {
                        "company_name": "Orbit Labs",
                        "email": "team@orbit.example",
                        "project_code": "M",
                        "platform_code": "B",
                        "country": "USA",
                    },
                )

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Client.objects.exists())
        self.assertContains(response, "Could not assign a client ID")

    def test_convert_inquiry_view(self):
        inquiry = Inquiry.objects.create(
            company_name="Blue Fin", contact_name="Asha", email="asha@bluefin.example"
        )
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse("clients:inquiry_convert", args=[inquiry.pk]),
            {"project_code": "S", "platform_code": "A"},
        )

        self.assertRedirects(response, reverse("clients:client_list"))
        inquiry.refresh_from_db()
        self.assertEqual(inquiry.status, Inquiry.Status.CONVERTED)
