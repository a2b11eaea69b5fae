# accounting/tests.py
import datetime
from decimal import Decimal
from io import BytesIO

from django.contrib.auth import get_user_model
from django.core import mail
from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings
from django.urls import reverse
from openpyxl import load_workbook

from clients.services import onboard_client
from sales.services import QuotationService

from .exports import INVOICE_COLUMNS, export_invoices_xlsx
from .models import Invoice, PaymentMethod
from .services import InvoiceService

LINES = [{"name": "Website", "quantity": 1, "unit_price": "1000"}]

User = get_user_model()


@override_settings(
    AGENCY_BANK_DETAILS={
        "bank_name": "HDFC",
        "account_holder_name": "Zervitra",
        "account_number": "000123",
        "ifsc_code": "HDFC0000001",
        "branch_name": "Main",
        "upi_id": "zervitra@upi",
    }
)
class InvoiceServiceTests(TestCase):
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
        kwargs.setdefault("issue_date", datetime.date(2024, 5, 1))
        return InvoiceService.create_invoice(
            self.client_account, lines=LINES, tax_percent=18, **kwargs
        )

    def test_create_assigns_invoice_id(self):
        invoice = self.create()

        self.assertEqual(invoice.invoice_id, "IN1-FY24-EA701-001")
        self.assertEqual(invoice.financial_year, "2425")
        self.assertEqual(invoice.client_sequence, 1)
        self.assertEqual(invoice.total_amount, Decimal("1180.00"))
        self.assertEqual(invoice.due_date, datetime.date(2024, 5, 16))
        self.assertEqual(invoice.status, Invoice.Status.DRAFT)

    def test_sequence_restarts_in_new_fiscal_year(self):
        self.create()
        self.create(issue_date=datetime.date(2025, 3, 31))
        april = self.create(issue_date=datetime.date(2025, 4, 1))

        self.assertEqual(
            list(Invoice.objects.order_by("id").values_list("invoice_id", flat=True)),
            ["IN1-FY24-EA701-001", "IN1-FY24-EA701-002", "IN1-FY25-EA701-001"],
        )
        self.assertEqual(april.financial_year, "2526")

    def test_due_date_before_issue_date(self):
        with self.assertRaises(ValidationError):
            self.create(due_date=datetime.date(2024, 4, 1))

    def test_quotation_of_another_client_is_rejected(self):
        other = onboard_client(
            email="owner@globex.example",
            company_name="Globex",
            project_code="S",
            platform_code="W",
            country="USA",
        ).client
        quotation = QuotationService.create_quotation(other, lines=LINES, tax_percent=18)

        with self.assertRaises(ValidationError):
            self.create(quotation=quotation)
        self.assertFalse(Invoice.objects.exists())

    def test_from_accepted_quotation(self):
        quotation = QuotationService.create_quotation(
            self.client_account, lines=LINES, discount_percent=10, tax_percent=18
        )
        with self.assertRaises(ValidationError):
            InvoiceService.create_invoice_from_quotation(quotation)

        QuotationService.send_quotation(quotation)
        QuotationService.accept_quotation(quotation, signer_name="Jane")
        invoice = InvoiceService.create_invoice_from_quotation(
            quotation, issue_date=datetime.date(2024, 6, 1)
        )

        self.assertEqual(invoice.quotation, quotation)
        self.assertEqual(invoice.total_amount, quotation.total_amount)
        self.assertEqual(invoice.discount_percent, Decimal("10.00"))

        with self.assertRaises(ValidationError):
            InvoiceService.create_invoice_from_quotation(quotation)

    def test_send_emails_payment_instructions(self):
        invoice = self.create()
        with self.captureOnCommitCallbacks(execute=True):
            InvoiceService.send_invoice(invoice)

        body = mail.outbox[-1].body
        self.assertEqual(mail.outbox[-1].to, ["owner@acme.example"])
        self.assertIn("IN1-FY24-EA701-001", body)
        self.assertIn("IFSC Code: HDFC0000001", body)
        self.assertIn("upi://pay?pa=zervitra%40upi", body)

    def test_mark_paid_is_final(self):
        invoice = self.create()
        InvoiceService.send_invoice(invoice)

        with self.captureOnCommitCallbacks(execute=True):
            InvoiceService.mark_paid(invoice, method=PaymentMethod.UPI, reference="UTR123")

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, Invoice.Status.PAID)
        self.assertEqual(invoice.payment_reference, "UTR123")
        self.assertIsNotNone(invoice.paid_at)
        self.assertIn("Payment received", mail.outbox[-1].subject)

        with self.assertRaises(ValidationError):
            InvoiceService.mark_paid(invoice, method=PaymentMethod.UPI)
        with self.assertRaises(ValidationError):
            InvoiceService.cancel_invoice(invoice)

    def test_unknown_payment_method(self):
        invoice = self.create()
        with self.assertRaises(ValidationError):
            InvoiceService.mark_paid(invoice, method="barter")

    def test_cancel_keeps_the_number_consumed(self):
        invoice = self.create()
        InvoiceService.cancel_invoice(invoice, reason="Duplicate")

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, Invoice.Status.CANCELLED)
        with self.assertRaises(ValidationError):
            InvoiceService.mark_paid(invoice, method=PaymentMethod.CASH)
        with self.assertRaises(ValidationError):
            InvoiceService.cancel_invoice(invoice)

        self.assertEqual(self.create().invoice_id, "IN1-FY24-EA701-002")

    def test_overdue(self):
        invoice = self.create(due_date=datetime.date(2024, 5, 2))
        self.assertFalse(invoice.is_overdue)  # draft

        InvoiceService.send_invoice(invoice)
        invoice.refresh_from_db()
        self.assertTrue(invoice.is_overdue)
        self.assertEqual(list(Invoice.objects.overdue()), [invoice])


class InvoiceExportTests(TestCase):
    def setUp(self):
        self.client_account = onboard_client(email="owner@acme.example", company_name="Acme").client
        self.invoice = InvoiceService.create_invoice(
            self.client_account,
            lines=LINES,
            tax_percent=0,
            issue_date=datetime.date(2024, 5, 1),
        )

    def test_export_invoices_xlsx(self):
        content = export_invoices_xlsx(Invoice.objects.select_related("client"))

        ws = load_workbook(BytesIO(content)).active
        rows = list(ws.iter_rows(values_only=True))
        self.assertEqual(list(rows[0]), INVOICE_COLUMNS)
        self.assertEqual(rows[1][0], self.invoice.invoice_id)
        self.assertEqual(rows[1][1], self.client_account.client_id)
        self.assertEqual(Decimal(str(rows[1][11])), Decimal("1000"))

    def test_export_view_is_staff_only(self):
        url = reverse("accounting:invoice_export")

        self.client.force_login(self.client_account.user)
        self.assertEqual(self.client.get(url).status_code, 403)

        admin = User.objects.create_user("admin", "admin@zervitra.com", "pw", is_staff=True)
        self.client.force_login(admin)
        response = self.client.get(url, {"fy": "2425"})

        self.assertEqual(response.status_code, 200)
        self.assertIn("attachment;", response["Content-Disposition"])
        ws = load_workbook(BytesIO(response.content)).active
        self.assertEqual(ws.max_row, 2)
