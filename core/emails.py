# core/emails.py
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def staff_recipients() -> list[str]:
    """Inboxes that receive internal notifications (new inquiry, payment proof...)."""
    return list(getattr(settings, "AGENCY_STAFF_EMAILS", []))


def send_templated_email(
    *,
    subject: str,
    template_name: str,
    context: Mapping[str, Any],
    to: Iterable[str],
) -> int:
    """
    Render ``template_name`` (plain text) and send it.

    The agency name and site URL are always available in the template context.
    Returns the number of messages sent (0 when there is no recipient).
    """
    recipients = [address for address in to if address]
    if not recipients:
        logger.warning("Email %r not sent: no recipients", subject)
        return 0

    full_context = {
        "agency_name": settings.AGENCY_NAME,
        "site_url": settings.AGENCY_SITE_URL,
        **context,
    }
    body = render_to_string(template_name, full_context)

    message = EmailMultiAlternatives(
        subject=f"{settings.AGENCY_NAME} - {subject}",
        body=body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=recipients,
    )
    sent = message.send(fail_silently=False)
    logger.info("Sent email %r to %s", subject, ", ".join(recipients))
    return sent
