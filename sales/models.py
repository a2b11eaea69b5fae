# sales/models.py
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from clients.models import Client, Project
from core.models import BaseModel

from .managers import QuotationQuerySet
from .pricing import Totals

DECIMAL_ZERO = Decimal("0.00")


def default_currency() -> str:
    return settings.BILLING_DEFAULT_CURRENCY


class PricedDocument(BaseModel):
    """
    Shared money fields for quotations and invoices.
    Totals are always written through apply_totals(), never typed in.
    """

    services = models.JSONField(default=list, blank=True, verbose_name=_("Service lines"))

    subtotal = models.DecimalField(
        max_digits=12, decimal_places=2, default=DECIMAL_ZERO, verbose_name=_("Subtotal")
    )
    discount_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=DECIMAL_ZERO, verbose_name=_("Discount %")
    )
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=DECIMAL_ZERO, verbose_name=_("Discount")
    )
    tax_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=DECIMAL_ZERO, verbose_name=_("Tax %")
    )
    tax_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=DECIMAL_ZERO, verbose_name=_("Tax")
    )
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=DECIMAL_ZERO, verbose_name=_("Total")
    )
    currency = models.CharField(max_length=3, default=default_currency, verbose_name=_("Currency"))
    notes = models.TextField(blank=True, verbose_name=_("Notes"))

    class Meta:
        abstract = True

    def apply_totals(self, totals: Totals, *, discount_percent, tax_percent) -> None:
        self.services = totals.lines
        self.subtotal = totals.subtotal
        self.discount_percent = Decimal(str(discount_percent or 0))
        self.discount_amount = totals.discount
        self.tax_percent = Decimal(str(tax_percent or 0))
        self.tax_amount = totals.tax
        self.total_amount = totals.total


class Quotation(PricedDocument):
    """
    A priced offer sent to a client.
    Lifecycle: DRAFT -> SENT -> ACCEPTED | REJECTED
    """

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        SENT = "sent", _("Sent")
        ACCEPTED = "accepted", _("Accepted")
        REJECTED = "rejected", _("Rejected")

    client = models.ForeignKey(
        Client,
        on_delete=models.PROTECT,
        related_name="quotations",
        verbose_name=_("Client"),
    )
    project = models.ForeignKey(
        Project,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="quotations",
        verbose_name=_("Project"),
    )

    quotation_id = models.CharField(
        max_length=48,
        unique=True,
        editable=False,
        verbose_name=_("Quotation ID"),
    )
    version = models.PositiveSmallIntegerField(default=1, verbose_name=_("Version"))
    client_sequence = models.PositiveIntegerField(editable=False, verbose_name=_("Client sequence"))

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
        verbose_name=_("Status"),
    )
    valid_until = models.DateField(null=True, blank=True, verbose_name=_("Valid until"))

    sent_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Sent at"))
    accepted_by_name = models.CharField(max_length=255, blank=True, verbose_name=_("Accepted by"))
    accepted_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Accepted at"))
    rejection_reason = models.TextField(blank=True, verbose_name=_("Rejection reason"))

    objects = QuotationQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at", "-id")
        verbose_name = _("Quotation")
        verbose_name_plural = _("Quotations")

    def __str__(self) -> str:
        return self.quotation_id

    @property
    def is_expired(self) -> bool:
        return bool(self.valid_until and self.valid_until < timezone.localdate())
