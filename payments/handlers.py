# payments/handlers.py
from django.conf import settings
from django.urls import reverse

from core.domain.dispatcher import register_handler
from core.emails import send_templated_email, staff_recipients

from .domain import PaymentRejected, PaymentSubmitted
from .models import PaymentSubmission


def _load(pk) -> PaymentSubmission:
    return PaymentSubmission.objects.select_related("invoice", "invoice__client").get(pk=pk)


@register_handler(PaymentSubmitted)
def notify_staff_of_payment(event: PaymentSubmitted) -> None:
    submission = _load(event.submission_pk)
    send_templated_email(
        subject=f"Payment submitted for {submission.invoice.invoice_id}",
        template_name="payments/emails/payment_submitted.txt",
        context={"submission": submission},
        to=staff_recipients(),
    )


@register_handler(PaymentRejected)
def notify_client_of_rejection(event: PaymentRejected) -> None:
    submission = _load(event.submission_pk)
    invoice = submission.invoice
    send_templated_email(
        subject=f"Payment for {invoice.invoice_id} could not be verified",
        template_name="payments/emails/payment_rejected.txt",
        context={
            "submission": submission,
            "invoice": invoice,
            "invoice_url": settings.AGENCY_SITE_URL.rstrip("/")
            + reverse("portal:invoice_detail", args=[invoice.pk]),
        },
        to=[invoice.client.contact_email],
    )
