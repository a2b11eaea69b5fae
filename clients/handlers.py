# clients/handlers.py
import logging

from django.conf import settings
from django.urls import reverse

from core.domain.dispatcher import register_handler
from core.emails import send_templated_email

from .domain import ClientOnboarded
from .models import Client

logger = logging.getLogger(__name__)


@register_handler(ClientOnboarded)
def send_welcome_email(event: ClientOnboarded) -> None:
    client = Client.objects.select_related("user").get(pk=event.client_pk)
    send_templated_email(
        subject="Welcome to your client portal",
        template_name="clients/emails/welcome.txt",
        context={
            "client": client,
            "login_email": client.user.email,
            "temporary_password": event.temporary_password,
            "login_url": settings.AGENCY_SITE_URL.rstrip("/") + reverse("login"),
        },
        to=[client.contact_email],
    )
