# payments/models.py
from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from accounting.models import Invoice
from core.models import TimeStampedModel


class PaymentSubmission(TimeStampedModel):
    """
    A payment the client says they made (UPI / bank transfer / card).
    Staff check the reference against the bank statement, then verify or reject.
    Verifying marks the invoice paid.
    """

    class Method(models.TextChoices):
        UPI = "upi", _("UPI")
        BANK_TRANSFER = "bank_transfer", _("Bank transfer")
        CARD = "card", _("Card")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending verification")
        VERIFIED = "verified", _("Verified")
        REJECTED = "rejected", _("Rejected")

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name="payment_submissions",
        verbose_name=_("Invoice"),
    )
    method = models.CharField(
        max_length=20,
        choices=Method.choices,
        default=Method.UPI,
        verbose_name=_("Payment method"),
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, verbose_name=_("Amount"))
    transaction_reference = models.CharField(
        max_length=100,
        verbose_name=_("Transaction reference"),
        help_text=_("UTR / UPI reference number."),
    )
    payer_name = models.CharField(max_length=255, blank=True, verbose_name=_("Payer name"))
    remarks = models.TextField(blank=True, verbose_name=_("Remarks"))

    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="payment_submissions",
        verbose_name=_("Submitted by"),
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
        verbose_name=_("Status"),
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="reviewed_payment_submissions",
        verbose_name=_("Reviewed by"),
    )
    reviewed_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Reviewed at"))
    review_note = models.TextField(blank=True, verbose_name=_("Review note"))

    class Meta:
        ordering = ("-created_at", "-id")
        verbose_name = _("Payment submission")
        verbose_name_plural = _("Payment submissions")

    def __str__(self) -> str:
        return f"{self.invoice.invoice_id} - {self.transaction_reference}"
