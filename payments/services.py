# payments/services.py
import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from accounting.models import Invoice
from accounting.services import InvoiceService
from core.domain.dispatcher import emit_on_commit
from core.models import AuditLog
from core.services.audit import log_event

from .domain import PaymentRejected, PaymentSubmitted
from .models import PaymentSubmission

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Manual payment verification.

    submit -> PENDING -> verify (invoice becomes PAID) | reject
    """

    @staticmethod
    @transaction.atomic
    def submit(
        invoice: Invoice,
        *,
        method: str,
        amount,
        reference: str,
        payer_name: str = "",
        remarks: str = "",
        submitted_by=None,
    ) -> PaymentSubmission:
        invoice.refresh_from_db()

        if invoice.status in (Invoice.Status.PAID, Invoice.Status.CANCELLED):
            raise ValidationError(_("This invoice is not awaiting payment."))
        if method not in PaymentSubmission.Method.values:
            raise ValidationError(_("Unknown payment method."))

        reference = (reference or "").strip()
        if not reference:
            raise ValidationError(_("The transaction reference is required."))

        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            raise ValidationError(_("Enter a valid amount.")) from None
        if not amount.is_finite() or amount <= 0:
            raise ValidationError(_("The amount must be greater than zero."))

        if invoice.payment_submissions.filter(
            status=PaymentSubmission.Status.PENDING,
            transaction_reference__iexact=reference,
        ).exists():
            raise ValidationError(_("This reference was already submitted and is awaiting review."))

        submission = PaymentSubmission.objects.create(
            invoice=invoice,
            method=method,
            amount=amount,
            transaction_reference=reference,
            payer_name=(payer_name or "").strip(),
            remarks=(remarks or "").strip(),
            submitted_by=submitted_by if getattr(submitted_by, "is_authenticated", False) else None,
        )

        log_event(
            action=AuditLog.Action.CREATE,
            message=f"Payment reference {reference} submitted for {invoice.invoice_id}.",
            actor=submitted_by,
            target=submission,
            extra={"amount": str(amount), "method": method},
        )
        emit_on_commit(PaymentSubmitted(submission_pk=submission.pk, invoice_id=invoice.invoice_id))
        return submission

    @staticmethod
    @transaction.atomic
    def verify(submission: PaymentSubmission, *, actor=None, note: str = "") -> PaymentSubmission:
        submission.refresh_from_db()

        if submission.status != PaymentSubmission.Status.PENDING:
            raise ValidationError(_("This payment has already been reviewed."))

        InvoiceService.mark_paid(
            submission.invoice,
            method=submission.method,
            reference=submission.transaction_reference,
            actor=actor,
        )

        _review(submission, PaymentSubmission.Status.VERIFIED, actor, note)
        logger.info(
            "Verified payment %s for invoice %s",
            submission.transaction_reference,
            submission.invoice.invoice_id,
        )
        return submission

    @staticmethod
    @transaction.atomic
    def reject(submission: PaymentSubmission, *, reason: str, actor=None) -> PaymentSubmission:
        submission.refresh_from_db()

        if submission.status != PaymentSubmission.Status.PENDING:
            raise ValidationError(_("This payment has already been reviewed."))
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError(_("Please give a reason so the client knows what to fix."))

        _review(submission, PaymentSubmission.Status.REJECTED, actor, reason)
        emit_on_commit(
            PaymentRejected(submission_pk=submission.pk, invoice_id=submission.invoice.invoice_id)
        )
        return submission


def _review(submission: PaymentSubmission, status: str, actor, note: str) -> None:
    submission.status = status
    submission.reviewed_by = actor if getattr(actor, "is_authenticated", False) else None
    submission.reviewed_at = timezone.now()
    submission.review_note = (note or "").strip()
    submission.save(update_fields=["status", "reviewed_by", "reviewed_at", "review_note", "updated_at"])

    log_event(
        action=AuditLog.Action.STATUS_CHANGE,
        message=f"Payment {submission.transaction_reference} {submission.get_status_display().lower()}.",
        actor=actor,
        target=submission,
        extra={"status": status, "invoice_id": submission.invoice.invoice_id},
    )
