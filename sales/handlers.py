# sales/handlers.py
from django.conf import settings
from django.urls import reverse

from core.domain.dispatcher import register_handler
from core.emails import send_templated_email, staff_recipients

from .domain import QuotationAccepted, QuotationRejected, QuotationSent
from .models import Quotation


def _load(pk) -> Quotation:
    return Quotation.objects.select_related("client").get(pk=pk)


@register_handler(QuotationSent)
def email_quotation_to_client(event: QuotationSent) -> None:
    quotation = _load(event.quotation_pk)
    send_templated_email(
        subject=f"Quotation {quotation.quotation_id}",
        template_name="sales/emails/quotation_sent.txt",
        context={
            "quotation": quotation,
            "portal_url": settings.AGENCY_SITE_URL.rstrip("/") + reverse("portal:dashboard"),
        },
        to=[quotation.client.contact_email],
    )


@register_handler(QuotationAccepted)
def notify_staff_of_acceptance(event: QuotationAccepted) -> None:
    quotation = _load(event.quotation_pk)
    send_templated_email(
        subject=f"Quotation {quotation.quotation_id} accepted",
        template_name="sales/emails/quotation_response.txt",
        context={"quotation": quotation},
        to=staff_recipients(),
    )


@register_handler(QuotationRejected)
def notify_staff_of_rejection(event: QuotationRejected) -> None:
    quotation = _load(event.quotation_pk)
    send_templated_email(
        subject=f"Quotation {quotation.quotation_id} rejected",
        template_name="sales/emails/quotation_response.txt",
        context={"quotation": quotation},
        to=staff_recipients(),
    )
