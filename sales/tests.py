# sales/tests.py
import datetime
from decimal import Decimal

from django.core import mail
from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings
from django.utils import timezone

from clients.services import onboard_client
from core.models import IdSequence

from .models import Quotation
from .pricing import compute_totals
from .services import QuotationService

LINES = [
    {"name": "UI/UX", "quantity": 1, "unit_price": "45.95"},
    {"name": "Backend", "description": "REST API", "quantity": 2, "unit_price": "57.44"},
]


class ComputeTotalsTests(TestCase):
    def test_totals(self):
        totals = compute_totals(LINES, discount_percent=10, tax_percent=18)

        self.assertEqual(totals.subtotal, Decimal("160.83"))
        self.assertEqual(totals.discount, Decimal("16.08"))
        self.assertEqual(totals.tax, Decimal("26.06"))
        self.assertEqual(totals.total, Decimal("170.81"))
        self.assertEqual(totals.lines[1]["amount"], "114.88")

    def test_rounding_is_half_up(self):
        totals = compute_totals([{"name": "x", "quantity": 1, "unit_price": "0.125"}])
        self.assertEqual(totals.subtotal, Decimal("0.13"))

    def test_free_items_are_allowed(self):
        totals = compute_totals([{"name": "Hosting", "quantity": 1, "unit_price": 0}])
        self.assertEqual(totals.total, Decimal("0.00"))

    def test_invalid_input(self):
        bad_calls = [
            ([], 0, 0),
            ([{"name": "", "unit_price": 1}], 0, 0),
            ([{"name": "x", "quantity": -1, "unit_price": 1}], 0, 0),
            ([{"name": "x", "unit_price": "-5"}], 0, 0),
            ([{"name": "x", "unit_price": "abc"}], 0, 0),
            ([{"name": "x", "unit_price": "NaN"}], 0, 0),
            (LINES, 101, 0),
            (LINES, 0, -1),
        ]
        for lines, discount, tax in bad_calls:
            with self.subTest(lines=lines, discount=discount, tax=tax):
                with self.assertRaises(ValidationError):
                    compute_totals(lines, discount, tax)


@override_settings(AGENCY_STAFF_EMAILS=["team@zervitra.com"])
class QuotationServiceTests(TestCase):
    def setUp(self):
        self.client_account = onboard_client(
            email="owner@acme.example",
            company_name="Acme",
            project_code="E",
            platform_code="A",
            country="IND",
            on=datetime.date(2025, 3, 10),
        ).client

    def create(self, **kwargs):
        return QuotationService.create_quotation(
            self.client_account,
            lines=LINES,
            tax_percent=18,
            **kwargs,
        )

    def test_create_assigns_quotation_id(self):
        first = self.create()
        second = self.create(version=2)

        self.assertEqual(first.quotation_id, "QN1-EA701-001")
        self.assertEqual(second.quotation_id, "QN2-EA701-002")
        self.assertEqual(first.client_sequence, 1)
        self.assertEqual(first.status, Quotation.Status.DRAFT)
        self.assertEqual(first.total_amount, Decimal("189.78"))
        self.assertEqual(first.project.title, "Acme - Main Project")
        self.assertIsNotNone(first.valid_until)

    def test_invalid_lines_do_not_allocate(self):
        before = IdSequence.objects.count()
        with self.assertRaises(ValidationError):
            QuotationService.create_quotation(self.client_account, lines=[])
        self.assertEqual(IdSequence.objects.count(), before)

    def test_foreign_project_is_rejected(self):
        other = onboard_client(email="x@other.example", company_name="Other").client
        with self.assertRaises(ValidationError):
            self.create(project=other.projects.get())

    def test_send_emails_the_client(self):
        quotation = self.create()
        with self.captureOnCommitCallbacks(execute=True):
            QuotationService.send_quotation(quotation)

        quotation.refresh_from_db()
        self.assertEqual(quotation.status, Quotation.Status.SENT)
        self.assertEqual(mail.outbox[-1].to, ["owner@acme.example"])
        self.assertIn("QN1-EA701-001", mail.outbox[-1].body)

        with self.assertRaises(ValidationError):
            QuotationService.send_quotation(quotation)

    def test_accept_notifies_staff(self):
        quotation = self.create()
        QuotationService.send_quotation(quotation)

        with self.captureOnCommitCallbacks(execute=True):
            QuotationService.accept_quotation(quotation, signer_name="  Jane Roe ")

        quotation.refresh_from_db()
        self.assertEqual(quotation.status, Quotation.Status.ACCEPTED)
        self.assertEqual(quotation.accepted_by_name, "Jane Roe")
        self.assertIsNotNone(quotation.accepted_at)
        self.assertEqual(mail.outbox[-1].to, ["team@zervitra.com"])

    def test_accept_requires_sent_status_and_signature(self):
        quotation = self.create()
        with self.assertRaises(ValidationError):
            QuotationService.accept_quotation(quotation, signer_name="Jane")

        QuotationService.send_quotation(quotation)
        with self.assertRaises(ValidationError):
            QuotationService.accept_quotation(quotation, signer_name="   ")

    def test_expired_quotation_cannot_be_accepted(self):
        quotation = self.create(valid_until=timezone.localdate() - datetime.timedelta(days=1))
        QuotationService.send_quotation(quotation)

        self.assertTrue(quotation.is_expired)
        with self.assertRaises(ValidationError):
            QuotationService.accept_quotation(quotation, signer_name="Jane")

    def test_reject(self):
        quotation = self.create()
        QuotationService.send_quotation(quotation)
        QuotationService.reject_quotation(quotation, reason="Over budget")

        quotation.refresh_from_db()
        self.assertEqual(quotation.status, Quotation.Status.REJECTED)
        self.assertEqual(quotation.rejection_reason, "Over budget")
        with self.assertRaises(ValidationError):
            QuotationService.accept_quotation(quotation, signer_name="Jane")
