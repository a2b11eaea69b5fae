# accounting/services.py
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
from core.services.numbering import generate_invoice_id
from sales.models import Quotation
from sales.pricing import compute_totals

from .domain import InvoicePaid, InvoiceSent
from .models import Invoice, PaymentMethod

logger = logging.getLogger(__name__)


class InvoiceService:
    """
    Invoice lifecycle.

    Rules:
    - The invoice id is allocated first (own commit), then the invoice is
      created in a separate transaction. Failed inserts leave gaps.
    - Paid or cancelled invoices are final.
    """

    # ============================================================
    # 1) Create
    # ============================================================
    @staticmethod
    def create_invoice(
        client,
        *,
        lines: Iterable[Mapping],
        project=None,
        quotation: Optional[Quotation] = None,
        discount_percent=0,
        tax_percent=None,
        currency: Optional[str] = None,
        issue_date: Optional[datetime.date] = None,
        due_date: Optional[datetime.date] = None,
        notes: str = "",
        version: int = 1,
        actor=None,
    ) -> Invoice:
        if project is not None and project.client_id != client.pk:
            raise ValidationError(_("The project does not belong to this client."))
        if quotation is not None and quotation.client_id != client.pk:
            raise ValidationError(_("The quotation does not belong to this client."))

        if tax_percent is None:
            tax_percent = settings.BILLING_DEFAULT_TAX_PERCENT
        totals = compute_totals(lines, discount_percent, tax_percent)

        issue_date = issue_date or timezone.localdate()
        if due_date is None:
            due_date = issue_date + datetime.timedelta(days=settings.BILLING_INVOICE_DUE_DAYS)
        if due_date < issue_date:
            raise ValidationError(_("The due date cannot be before the issue date."))

        identifier = generate_invoice_id(client.client_id, version, on=issue_date)

        with transaction.atomic():
            invoice = Invoice(
                client=client,
                project=project or client.projects.active().first(),
                quotation=quotation,
                invoice_id=identifier.value,
                version=identifier.version,
                financial_year=identifier.fiscal_year,
                client_sequence=identifier.sequence_number,
                currency=currency or settings.BILLING_DEFAULT_CURRENCY,
                issue_date=issue_date,
                due_date=due_date,
                notes=notes,
            )
            invoice.apply_totals(
                totals,
                discount_percent=discount_percent,
                tax_percent=tax_percent,
            )
            invoice.stamp(actor)
            invoice.save()

            log_event(
                action=AuditLog.Action.ID_ASSIGNED,
                message=f"Invoice {invoice.invoice_id} created for {client.client_id}.",
                actor=actor,
                target=invoice,
                extra={
                    "invoice_id": invoice.invoice_id,
                    "financial_year": invoice.financial_year,
                    "sequence_number": identifier.sequence_number,
                    "total": str(invoice.total_amount),
                },
            )

        logger.info("Created invoice %s (total=%s)", invoice.invoice_id, invoice.total_amount)
        return invoice

    @staticmethod
    def create_invoice_from_quotation(
        quotation: Quotation,
        *,
        issue_date: Optional[datetime.date] = None,
        due_date: Optional[datetime.date] = None,
        actor=None,
    ) -> Invoice:
        quotation.refresh_from_db()

        if quotation.status != Quotation.Status.ACCEPTED:
            raise ValidationError(_("Only accepted quotations can be invoiced."))
        if quotation.invoices.exclude(status=Invoice.Status.CANCELLED).exists():
            raise ValidationError(_("This quotation has already been invoiced."))

        return InvoiceService.create_invoice(
            quotation.client,
            lines=quotation.services,
            project=quotation.project,
            quotation=quotation,
            discount_percent=quotation.discount_percent,
            tax_percent=quotation.tax_percent,
            currency=quotation.currency,
            issue_date=issue_date,
            due_date=due_date,
            notes=quotation.notes,
            version=quotation.version,
            actor=actor,
        )

    # ============================================================
    # 2) Send
    # ============================================================
    @staticmethod
    @transaction.atomic
    def send_invoice(invoice: Invoice, *, actor=None) -> Invoice:
        invoice.refresh_from_db()

        if invoice.status != Invoice.Status.DRAFT:
            raise ValidationError(_("Only draft invoices can be sent."))

        invoice.status = Invoice.Status.SENT
        invoice.sent_at = timezone.now()
        invoice.stamp(actor)
        invoice.save(update_fields=["status", "sent_at", "updated_by", "updated_at"])

        _log_status(invoice, actor, "sent")
        emit_on_commit(InvoiceSent(invoice_pk=invoice.pk, invoice_id=invoice.invoice_id))
        return invoice

    # ============================================================
    # 3) Mark paid
    # ============================================================
    @staticmethod
    @transaction.atomic
    def mark_paid(
        invoice: Invoice,
        *,
        method: str,
        reference: str = "",
        paid_at: Optional[datetime.datetime] = None,
        actor=None,
    ) -> Invoice:
        invoice.refresh_from_db()

        if invoice.status == Invoice.Status.PAID:
            raise ValidationError(_("This invoice is already paid."))
        if invoice.status == Invoice.Status.CANCELLED:
            raise ValidationError(_("A cancelled invoice cannot be paid."))
        if method not in PaymentMethod.values:
            raise ValidationError(_("Unknown payment method %(method)r.") % {"method": method})

        invoice.status = Invoice.Status.PAID
        invoice.payment_method = method
        invoice.payment_reference = (reference or "").strip()
        invoice.paid_at = paid_at or timezone.now()
        invoice.stamp(actor)
        invoice.save(
            update_fields=[
                "status",
                "payment_method",
                "payment_reference",
                "paid_at",
                "updated_by",
                "updated_at",
            ]
        )

        _log_status(invoice, actor, "paid", method=method, reference=invoice.payment_reference)
        emit_on_commit(InvoicePaid(invoice_pk=invoice.pk, invoice_id=invoice.invoice_id))
        return invoice

    # ============================================================
    # 4) Cancel
    # ============================================================
    @staticmethod
    @transaction.atomic
    def cancel_invoice(invoice: Invoice, *, reason: str = "", actor=None) -> Invoice:
        invoice.refresh_from_db()

        if invoice.status == Invoice.Status.PAID:
            raise ValidationError(_("A paid invoice cannot be cancelled."))
        if invoice.status == Invoice.Status.CANCELLED:
            raise ValidationError(_("This invoice is already cancelled."))

        invoice.status = Invoice.Status.CANCELLED
        invoice.cancellation_reason = (reason or "").strip()
        invoice.stamp(actor)
        invoice.save(update_fields=["status", "cancellation_reason", "updated_by", "updated_at"])

        # The number stays consumed; ids are never reused.
        _log_status(invoice, actor, "cancelled")
        return invoice


def _log_status(invoice: Invoice, actor, verb: str, **extra) -> None:
    log_event(
        action=AuditLog.Action.STATUS_CHANGE,
        message=f"Invoice {invoice.invoice_id} {verb}.",
        actor=actor,
        target=invoice,
        extra={"status": invoice.status, **extra},
    )
