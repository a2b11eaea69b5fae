# payments/tests.py
import datetime
from decimal import Decimal
from urllib.parse import parse_qs, urlsplit

from django.contrib.auth import get_user_model
from django.core import mail
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from accounting.models import Invoice
from accounting.services import InvoiceService
from clients.services import onboard_client

from .bank import BankDetails, format_bank_details, upi_payment_link
from .models import PaymentSubmission
from .services import PaymentService

User = get_user_model()

BANK = {
    "bank_name": "HDFC",
    "account_holder_name": "Zervitra Studio",
    "account_number": "50100000000001",
    "ifsc_code": "HDFC0000001",
    "branch_name": "Mangalam Branch",
    "upi_id": "zervitra@okaxis",
}


@override_settings(AGENCY_BANK_DETAILS=BANK)
class BankTests(SimpleTestCase):
    def test_upi_payment_link(self):
        link = upi_payment_link(Decimal("1180"), "IN1-FY24-EA701-001")

        parts = urlsplit(link)
        self.assertEqual(f"{parts.scheme}://{parts.netloc}{parts.path}", "upi://pay")
        params = parse_qs(parts.query)
        self.assertEqual(params["pa"], ["zervitra@okaxis"])
        self.assertEqual(params["pn"], ["Zervitra Studio"])
        self.assertEqual(params["am"], ["1180.00"])
        self.assertEqual(params["cu"], ["INR"])
        self.assertEqual(params["tn"], ["Payment for Invoice IN1-FY24-EA701-001"])

    def test_no_upi_id_means_no_link(self):
        details = BankDetails(bank_name="HDFC")
        self.assertEqual(upi_payment_link(100, "IN1-FY24-EA701-001", details), "")

    def test_format_bank_details(self):
        text = format_bank_details()
        self.assertEqual(
            text.splitlines(),
            [
                "Bank: HDFC",
                "Account Holder: Zervitra Studio",
                "Account Number: 50100000000001",
                "IFSC Code: HDFC0000001",
                "Branch: Mangalam Branch",
                "UPI ID: zervitra@okaxis",
            ],
        )

    def test_upi_line_is_omitted_without_upi_id(self):
        text = format_bank_details(BankDetails(bank_name="HDFC"))
        self.assertNotIn("UPI ID", text)


@override_settings(AGENCY_STAFF_EMAILS=["team@zervitra.com"])
class PaymentServiceTests(TestCase):
    def setUp(self):
        result = onboard_client(
            email="owner@acme.example",
            company_name="Acme",
            on=datetime.date(2025, 3, 10),
        )
        self.user = result.client.user
        self.invoice = InvoiceService.create_invoice(
            result.client,
            lines=[{"name": "Website", "unit_price": "500"}],
            tax_percent=0,
        )
        InvoiceService.send_invoice(self.invoice)
        self.staff = User.objects.create_user("admin", "admin@zervitra.com", "pw", is_staff=True)

    def submit(self, **kwargs):
        data = {
            "method": PaymentSubmission.Method.UPI,
            "amount": "500",
            "reference": "UTR0001",
            "submitted_by": self.user,
        }
        data.update(kwargs)
        return PaymentService.submit(self.invoice, **data)

    def test_submit_notifies_staff(self):
        with self.captureOnCommitCallbacks(execute=True):
            submission = self.submit()

        self.assertEqual(submission.status, PaymentSubmission.Status.PENDING)
        self.assertEqual(submission.submitted_by, self.user)
        self.assertEqual(mail.outbox[-1].to, ["team@zervitra.com"])
        self.assertIn("UTR0001", mail.outbox[-1].body)

    def test_submit_validation(self):
        for kwargs in (
            {"reference": "  "},
            {"amount": "0"},
            {"amount": "abc"},
            {"method": "cheque"},
        ):
            with self.subTest(**kwargs), self.assertRaises(ValidationError):
                self.submit(**kwargs)

    def test_same_pending_reference_twice(self):
        self.submit()
        with self.assertRaises(ValidationError):
            self.submit(reference="utr0001")

    def test_verify_marks_invoice_paid_and_sends_receipt(self):
        submission = self.submit()
        with self.captureOnCommitCallbacks(execute=True):
            PaymentService.verify(submission, actor=self.staff)

        submission.refresh_from_db()
        self.invoice.refresh_from_db()
        self.assertEqual(submission.status, PaymentSubmission.Status.VERIFIED)
        self.assertEqual(submission.reviewed_by, self.staff)
        self.assertEqual(self.invoice.status, Invoice.Status.PAID)
        self.assertEqual(self.invoice.payment_reference, "UTR0001")
        self.assertEqual(mail.outbox[-1].to, ["owner@acme.example"])

        with self.assertRaises(ValidationError):
            self.submit(reference="UTR0002")
        with self.assertRaises(ValidationError):
            PaymentService.verify(submission, actor=self.staff)

    def test_reject_requires_reason_and_emails_client(self):
        submission = self.submit()
        with self.assertRaises(ValidationError):
            PaymentService.reject(submission, reason="", actor=self.staff)

        with self.captureOnCommitCallbacks(execute=True):
            PaymentService.reject(submission, reason="Reference not found", actor=self.staff)

        submission.refresh_from_db()
        self.invoice.refresh_from_db()
        self.assertEqual(submission.status, PaymentSubmission.Status.REJECTED)
        self.assertEqual(self.invoice.status, Invoice.Status.SENT)
        self.assertIn("Reference not found", mail.outbox[-1].body)

    def test_review_view(self):
        submission = self.submit()
        self.client.force_login(self.staff)

        response = self.client.post(
            reverse("payments:review", args=[submission.pk]), {"decision": "verify"}
        )

        self.assertRedirects(response, reverse("payments:pending_list"))
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, Invoice.Status.PAID)

    def test_review_view_is_staff_only(self):
        submission = self.submit()
        self.client.force_login(self.user)
        response = self.client.post(
            reverse("payments:review", args=[submission.pk]), {"decision": "verify"}
        )
        self.assertEqual(response.status_code, 403)
