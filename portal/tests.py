# portal/tests.py
import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse

from accounting.models import Invoice
from accounting.services import InvoiceService
from clients.services import onboard_client
from payments.models import PaymentSubmission
from sales.models import Quotation
from sales.services import QuotationService

User = get_user_model()

LINES = [{"name": "Website", "quantity": 1, "unit_price": "1000"}]


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
class PortalTests(TestCase):
    def setUp(self):
        self.acme = onboard_client(email="owner@acme.example", company_name="Acme").client
        self.other = onboard_client(email="boss@other.example", company_name="Other").client

        self.quotation = QuotationService.create_quotation(self.acme, lines=LINES, tax_percent=18)
        QuotationService.send_quotation(self.quotation)

        self.invoice = InvoiceService.create_invoice(
            self.acme,
            lines=LINES,
            tax_percent=18,
            issue_date=datetime.date(2024, 5, 1),
            due_date=datetime.date(2024, 5, 16),
        )
        InvoiceService.send_invoice(self.invoice)

        self.client.force_login(self.acme.user)

    def test_login_required(self):
        self.client.logout()
        response = self.client.get(reverse("portal:dashboard"))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse("login"), response["Location"])

    def test_user_without_client_profile_gets_403(self):
        user = User.objects.create_user("joe", "joe@example.com", "pw")
        self.client.force_login(user)
        self.assertEqual(self.client.get(reverse("portal:dashboard")).status_code, 403)

    def test_staff_are_sent_to_the_clients_list(self):
        admin = User.objects.create_user("admin", "admin@zervitra.com", "pw", is_staff=True)
        self.client.force_login(admin)
        response = self.client.get(reverse("portal:dashboard"))
        self.assertRedirects(response, reverse("clients:client_list"))

    def test_dashboard(self):
        response = self.client.get(reverse("portal:dashboard"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["client"], self.acme)
        self.assertEqual(list(response.context["invoices"]), [self.invoice])
        self.assertEqual(list(response.context["quotations"]), [self.quotation])
        self.assertEqual(response.context["outstanding_total"], Decimal("1180.00"))
        self.assertEqual(response.context["overdue_count"], 1)
        self.assertContains(response, self.acme.client_id)

    def test_invoice_detail_shows_payment_options(self):
        response = self.client.get(reverse("portal:invoice_detail", args=[self.invoice.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "IFSC Code: HDFC0000001")
        self.assertIn("am=1180.00", response.context["upi_link"])

    def test_other_clients_records_are_forbidden(self):
        self.client.force_login(self.other.user)

        invoice_url = reverse("portal:invoice_detail", args=[self.invoice.pk])
        quotation_url = reverse("portal:quotation_detail", args=[self.quotation.pk])
        self.assertEqual(self.client.get(invoice_url).status_code, 403)
        self.assertEqual(self.client.get(quotation_url).status_code, 403)
        self.assertEqual(
            self.client.post(quotation_url, {"decision": "accept", "signer_name": "X", "agree": "on"}).status_code,
            403,
        )

    def test_draft_invoice_is_hidden(self):
        draft = InvoiceService.create_invoice(self.acme, lines=LINES)
        response = self.client.get(reverse("portal:invoice_detail", args=[draft.pk]))
        self.assertEqual(response.status_code, 403)

    def test_submit_payment(self):
        url = reverse("portal:invoice_detail", args=[self.invoice.pk])
        response = self.client.post(
            url,
            {
                "method": PaymentSubmission.Method.UPI,
                "amount": "1180.00",
                "transaction_reference": "UTR42",
                "payer_name": "Acme Ltd",
            },
        )

        self.assertRedirects(response, url)
        submission = PaymentSubmission.objects.get()
        self.assertEqual(submission.invoice, self.invoice)
        self.assertEqual(submission.submitted_by, self.acme.user)

    def test_submit_payment_on_paid_invoice(self):
        InvoiceService.mark_paid(self.invoice, method="cash")
        response = self.client.post(
            reverse("portal:invoice_detail", args=[self.invoice.pk]),
            {"method": "upi", "amount": "1180.00", "transaction_reference": "UTR42"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertFalse(PaymentSubmission.objects.exists())

    def test_accept_quotation(self):
        url = reverse("portal:quotation_detail", args=[self.quotation.pk])
        response = self.client.post(
            url, {"decision": "accept", "signer_name": "Jane Roe", "agree": "on"}
        )

        self.assertRedirects(response, url)
        self.quotation.refresh_from_db()
        self.assertEqual(self.quotation.status, Quotation.Status.ACCEPTED)
        self.assertEqual(self.quotation.accepted_by_name, "Jane Roe")

    def test_accept_requires_agreement(self):
        url = reverse("portal:quotation_detail", args=[self.quotation.pk])
        response = self.client.post(url, {"decision": "accept", "signer_name": "Jane Roe"})

        self.assertEqual(response.status_code, 200)
        self.quotation.refresh_from_db()
        self.assertEqual(self.quotation.status, Quotation.Status.SENT)

    def test_reject_quotation(self):
        url = reverse("portal:quotation_detail", args=[self.quotation.pk])
        response = self.client.post(url, {"decision": "reject", "reason": "Too expensive"})

        self.assertRedirects(response, url)
        self.quotation.refresh_from_db()
        self.assertEqual(self.quotation.status, Quotation.Status.REJECTED)
