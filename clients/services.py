# clients/services.py
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from core.domain.dispatcher import emit_on_commit
from core.models import AuditLog
from core.numbering import ClientIdentifier, PlatformCode, ProjectCode
from core.permissions import is_admin, is_manager
from core.services.audit import log_event
from core.services.numbering import generate_client_id

from .domain import ClientOnboarded
from .models import Client, Project
from .passwords import generate_password

logger = logging.getLogger(__name__)

User = get_user_model()


@dataclass
class OnboardingResult:
    client: Client
    project: Project
    identifier: ClientIdentifier
    password: str


def _normalize_country(country: Optional[str]) -> str:
    country = (country or settings.NUMBERING_DEFAULT_COUNTRY).strip().upper()
    if len(country) != 3 or not country.isalpha() or not country.isascii():
        raise ValidationError(
            _("Country must be a three letter code such as IND or USA."),
            code="invalid_country",
        )
    return country


def onboard_client(
    *,
    email: str,
    company_name: str,
    project_code: str = ProjectCode.ENTERPRISE,
    platform_code: str = PlatformCode.WEB,
    country: Optional[str] = None,
    phone: str = "",
    address: str = "",
    city: str = "",
    state: str = "",
    zip_code: str = "",
    manager=None,
    password: Optional[str] = None,
    actor=None,
    on: Optional[datetime.date] = None,
) -> OnboardingResult:
    """
    Create a client account: portal user + Client + default project.

    Steps:
    1) Validate input (duplicate email, password strength, country code).
       Nothing is allocated if this fails.
    2) Allocate the client id. Outside a caller transaction this commits on
       its own; if it fails (SequenceAllocationFailed) no user or client
       is created.
    3) Create user, client and default project in one transaction.
       If this fails the client number stays consumed.
    4) After commit, ClientOnboarded triggers the welcome email.
    """
    email = (email or "").strip().lower()
    company_name = (company_name or "").strip()

    if not email or not company_name:
        raise ValidationError(_("Email and company name are required."))

    if User.objects.filter(email__iexact=email).exists() or User.objects.filter(
        username__iexact=email
    ).exists():
        raise ValidationError(
            _("A user with email %(email)s already exists.") % {"email": email},
            code="duplicate_email",
        )

    if password:
        validate_password(password)
    else:
        password = generate_password()

    country = _normalize_country(country)

    # A manager onboarding a client becomes its account manager.
    if manager is None and is_manager(actor) and not is_admin(actor):
        manager = actor

    identifier = generate_client_id(project_code, platform_code, country, on=on)

    with transaction.atomic():
        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
        )

        client = Client(
            user=user,
            company_name=company_name,
            contact_email=email,
            phone=phone,
            address=address,
            city=city,
            state=state,
            zip_code=zip_code,
            country=country,
            client_id=identifier.value,
            project_code=identifier.components.project_code,
            platform_code=identifier.components.platform_code,
            year_hex=identifier.year_hex,
            client_sequence_number=identifier.sequence_number,
            manager=manager,
        )
        client.stamp(actor)
        client.save()

        project = Project(
            client=client,
            title=f"{company_name} - Main Project",
            description="Initial project created with client",
        )
        project.stamp(actor)
        project.save()

        log_event(
            action=AuditLog.Action.ID_ASSIGNED,
            message=f"Client {identifier.value} onboarded ({company_name}).",
            actor=actor,
            target=client,
            extra={
                "client_id": identifier.value,
                "sequence_number": identifier.sequence_number,
            },
        )

        emit_on_commit(
            ClientOnboarded(
                client_pk=client.pk,
                client_id=client.client_id,
                temporary_password=password,
            )
        )

    logger.info("Onboarded client %s (user=%s)", client.client_id, user.pk)
    return OnboardingResult(
        client=client,
        project=project,
        identifier=identifier,
        password=password,
    )


def convert_inquiry(
    inquiry,
    *,
    project_code: str = ProjectCode.ENTERPRISE,
    platform_code: str = PlatformCode.WEB,
    country: Optional[str] = None,
    manager=None,
    actor=None,
) -> OnboardingResult:
    """
    Turn a website inquiry into a client account and mark it converted.

    The inquiry row stays locked until the conversion commits; a failure
    anywhere rolls back the client together with the inquiry update.
    """
    with transaction.atomic():
        locked = type(inquiry)._default_manager.select_for_update().get(pk=inquiry.pk)
        if locked.status == locked.Status.CONVERTED:
            raise ValidationError(_("This inquiry has already been converted."))

        result = onboard_client(
            email=locked.email,
            company_name=locked.company_name,
            project_code=project_code,
            platform_code=platform_code,
            country=country,
            phone=locked.phone,
            city=locked.city,
            manager=manager,
            actor=actor,
        )

        locked.status = locked.Status.CONVERTED
        locked.converted_client = result.client
        locked.save(update_fields=["status", "converted_client", "updated_at"])

        if locked.project_description:
            result.project.description = locked.project_description
            result.project.save(update_fields=["description", "updated_at"])

    inquiry.status = locked.status
    inquiry.converted_client = locked.converted_client
    return result
