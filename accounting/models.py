# accounting/models.py
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from clients.models import Client, Project
from sales.models import PricedDocument, Quotation

from .managers import InvoiceQuerySet


class PaymentMethod(models.TextChoices):
    UPI = "upi", _("UPI")
    BANK_TRANSFER = "bank_transfer", _("Bank transfer")
    CARD = "card", _("Card")
    CASH = "cash", _("Cash")
    OTHER = "other", _("Other")


class Invoice(PricedDocument):
    """
    Client invoice.
    Lifecycle: DRAFT -> SENT -> PAID, or -> CANCELLED before payment.

    `invoice_id` embeds the fiscal year of `issue_date`
    (IN1-FY24-EA701-001 for an invoice issued in FY 2024-25).
    """

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        SENT = "sent", _("Sent")
        PAID = "paid", _("Paid")
        CANCELLED = "cancelled", _("Cancelled")

    client = models.ForeignKey(
        Client,
        on_delete=models.PROTECT,
        related_name="invoices",
        verbose_name=_("Client"),
    )
    project = models.ForeignKey(
        Project,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="invoices",
        verbose_name=_("Project"),
    )
    quotation = models.ForeignKey(
        Quotation,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="invoices",
        verbose_name=_("Quotation"),
    )

    invoice_id = models.CharField(
        max_length=48,
        unique=True,
        editable=False,
        verbose_name=_("Invoice ID"),
    )
    version = models.PositiveSmallIntegerField(default=1, verbose_name=_("Version"))
    financial_year = models.CharField(
        max_length=4,
        editable=False,
        db_index=True,
        verbose_name=_("Financial year"),
        help_text=_('Four digits, e.g. "2425" for April 2024 - March 2025.'),
    )
    client_sequence = models.PositiveIntegerField(editable=False, verbose_name=_("Client sequence"))

    issue_date = models.DateField(default=timezone.localdate, verbose_name=_("Issue date"))
    due_date = models.DateField(null=True, blank=True, verbose_name=_("Due date"))

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
        verbose_name=_("Status"),
    )
    sent_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Sent at"))

    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        blank=True,
        verbose_name=_("Payment method"),
    )
    payment_reference = models.CharField(max_length=255, blank=True, verbose_name=_("Payment reference"))
    paid_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Paid at"))
    cancellation_reason = models.TextField(blank=True, verbose_name=_("Cancellation reason"))

    objects = InvoiceQuerySet.as_manager()

    class Meta:
        ordering = ("-issue_date", "-id")
        verbose_name = _("Invoice")
        verbose_name_plural = _("Invoices")

    def __str__(self) -> str:
        return self.invoice_id

    @property
    def is_open(self) -> bool:
        return self.status in (self.Status.DRAFT, self.Status.SENT)

    @property
    def is_overdue(self) -> bool:
        return (
            self.status == self.Status.SENT
            and self.due_date is not None
            and self.due_date < timezone.localdate()
        )
