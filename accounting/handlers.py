# accounting/handlers.py
from django.conf import settings
from django.urls import reverse

from core.domain.dispatcher import register_handler
from core.emails import send_templated_email
from payments.bank import format_bank_details, upi_payment_link

from .domain import InvoicePaid, InvoiceSent
from .models import Invoice


def _load(pk) -> Invoice:
    return Invoice.objects.select_related("client").get(pk=pk)


@register_handler(InvoiceSent)
def email_invoice_to_client(event: InvoiceSent) -> None:
    invoice = _load(event.invoice_pk)
    send_templated_email(
        subject=f"Invoice {invoice.invoice_id}",
        template_name="accounting/emails/invoice_sent.txt",
        context={
            "invoice": invoice,
            "bank_details": format_bank_details(),
            "upi_link": upi_payment_link(invoice.total_amount, invoice.invoice_id),
            "invoice_url": settings.AGENCY_SITE_URL.rstrip("/")
            + reverse("portal:invoice_detail", args=[invoice.pk]),
        },
        to=[invoice.client.contact_email],
    )


@register_handler(InvoicePaid)
def email_receipt_to_client(event: InvoicePaid) -> None:
    invoice = _load(event.invoice_pk)
    send_templated_email(
        subject=f"Payment received for {invoice.invoice_id}",
        template_name="accounting/emails/invoice_paid.txt",
        context={"invoice": invoice},
        to=[invoice.client.contact_email],
    )
