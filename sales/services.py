# sales/services.py
import datetime
import logging
from typing import Iterable, Mapping, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.domain.dispatcher import emit_on_commit
from core.models import AuditLog
from core.services.audit import log_event
from core.services.numbering import generate_quotation_id

from .domain import QuotationAccepted, QuotationRejected, QuotationSent
from .models import Quotation
from .pricing import compute_totals

logger = logging.getLogger(__name__)


class QuotationService:
    """
    Quotation lifecycle.

    The quotation id is allocated before the record is created and outside
    its transaction: a failed insert leaves a gap in the client's series,
    never a duplicate.
    """

    # ============================================================
    # 1) Create
    # ============================================================
    @staticmethod
    def create_quotation(
        client,
        *,
        lines: Iterable[Mapping],
        project=None,
        discount_percent=0,
        tax_percent=None,
        currency: Optional[str] = None,
        valid_until: Optional[datetime.date] = None,
        notes: str = "",
        version: int = 1,
        actor=None,
    ) -> Quotation:
        if not client.is_active:
            raise ValidationError(_("Cannot quote an inactive client."))
        if project is not None and project.client_id != client.pk:
            raise ValidationError(_("The project does not belong to this client."))

        if tax_percent is None:
            tax_percent = settings.BILLING_DEFAULT_TAX_PERCENT
        totals = compute_totals(lines, discount_percent, tax_percent)

        if valid_until is None:
            valid_until = timezone.localdate() + datetime.timedelta(
                days=settings.BILLING_QUOTATION_VALID_DAYS
            )

        identifier = generate_quotation_id(client.client_id, version)

        with transaction.atomic():
            quotation = Quotation(
                client=client,
                project=project or client.projects.active().first(),
                quotation_id=identifier.value,
                version=identifier.version,
                client_sequence=identifier.sequence_number,
                currency=currency or settings.BILLING_DEFAULT_CURRENCY,
                valid_until=valid_until,
                notes=notes,
            )
            quotation.apply_totals(
                totals,
                discount_percent=discount_percent,
                tax_percent=tax_percent,
            )
            quotation.stamp(actor)
            quotation.save()

            log_event(
                action=AuditLog.Action.ID_ASSIGNED,
                message=f"Quotation {quotation.quotation_id} created for {client.client_id}.",
                actor=actor,
                target=quotation,
                extra={
                    "quotation_id": quotation.quotation_id,
                    "sequence_number": identifier.sequence_number,
                    "total": str(quotation.total_amount),
                },
            )

        logger.info("Created quotation %s (total=%s)", quotation.quotation_id, quotation.total_amount)
        return quotation

    # ============================================================
    # 2) Send to client
    # ============================================================
    @staticmethod
    @transaction.atomic
    def send_quotation(quotation: Quotation, *, actor=None) -> Quotation:
        quotation.refresh_from_db()

        if quotation.status != Quotation.Status.DRAFT:
            raise ValidationError(_("Only draft quotations can be sent."))

        quotation.status = Quotation.Status.SENT
        quotation.sent_at = timezone.now()
        quotation.stamp(actor)
        quotation.save(update_fields=["status", "sent_at", "updated_by", "updated_at"])

        _log_status(quotation, actor, "sent")
        emit_on_commit(QuotationSent(quotation_pk=quotation.pk, quotation_id=quotation.quotation_id))
        return quotation

    # ============================================================
    # 3) Client accepts (typed signature)
    # ============================================================
    @staticmethod
    @transaction.atomic
    def accept_quotation(quotation: Quotation, *, signer_name: str, actor=None) -> Quotation:
        quotation.refresh_from_db()
        signer_name = (signer_name or "").strip()

        if quotation.status != Quotation.Status.SENT:
            raise ValidationError(_("Only sent quotations can be accepted."))
        if quotation.is_expired:
            raise ValidationError(_("This quotation has expired."))
        if not signer_name:
            raise ValidationError(_("Please type your full name to accept."))

        quotation.status = Quotation.Status.ACCEPTED
        quotation.accepted_by_name = signer_name
        quotation.accepted_at = timezone.now()
        quotation.stamp(actor)
        quotation.save(
            update_fields=["status", "accepted_by_name", "accepted_at", "updated_by", "updated_at"]
        )

        _log_status(quotation, actor, "accepted", signer=signer_name)
        emit_on_commit(
            QuotationAccepted(
                quotation_pk=quotation.pk,
                quotation_id=quotation.quotation_id,
                accepted_by_name=signer_name,
            )
        )
        return quotation

    # ============================================================
    # 4) Client rejects
    # ============================================================
    @staticmethod
    @transaction.atomic
    def reject_quotation(quotation: Quotation, *, reason: str = "", actor=None) -> Quotation:
        quotation.refresh_from_db()

        if quotation.status != Quotation.Status.SENT:
            raise ValidationError(_("Only sent quotations can be rejected."))

        quotation.status = Quotation.Status.REJECTED
        quotation.rejection_reason = (reason or "").strip()
        quotation.stamp(actor)
        quotation.save(update_fields=["status", "rejection_reason", "updated_by", "updated_at"])

        _log_status(quotation, actor, "rejected")
        emit_on_commit(
            QuotationRejected(quotation_pk=quotation.pk, quotation_id=quotation.quotation_id)
        )
        return quotation


def _log_status(quotation: Quotation, actor, verb: str, **extra) -> None:
    log_event(
        action=AuditLog.Action.STATUS_CHANGE,
        message=f"Quotation {quotation.quotation_id} {verb}.",
        actor=actor,
        target=quotation,
        extra={"status": quotation.status, **extra},
    )
