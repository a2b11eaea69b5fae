# core/models/sequences.py
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.numbering.codes import SequenceType


class IdSequence(models.Model):
    """
    Last issued value of one counting series.

    A series is identified by (sequence_type, scope_key, fiscal_year):
    - ("client", "", "")            → one running counter for every client
    - ("quotation", "EA701", "")    → quotations of client EA701
    - ("invoice", "EA701", "2425")  → invoices of EA701 in FY 2024-25

    "No scope" / "no fiscal year" are stored as "" rather than NULL so the
    unique constraint also covers the unscoped series.

    Rows are only touched through DatabaseSequenceStore.allocate().
    """

    sequence_type = models.CharField(
        max_length=20,
        choices=SequenceType.choices,
        verbose_name=_("Sequence type"),
    )
    scope_key = models.CharField(
        max_length=64,
        blank=True,
        default="",
        verbose_name=_("Scope"),
        help_text=_("Base client id for quotation/invoice counters."),
    )
    fiscal_year = models.CharField(
        max_length=8,
        blank=True,
        default="",
        verbose_name=_("Fiscal year"),
        help_text=_("Four digit label, e.g. 2425 for FY 2024-25."),
    )
    current_value = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Current value"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "id_sequences"
        verbose_name = _("ID sequence")
        verbose_name_plural = _("ID sequences")
        ordering = ("sequence_type", "scope_key", "fiscal_year")
        constraints = [
            models.UniqueConstraint(
                fields=["sequence_type", "scope_key", "fiscal_year"],
                name="id_sequence_identity_unique",
            ),
        ]

    def __str__(self) -> str:
        parts = [self.sequence_type]
        if self.scope_key:
            parts.append(self.scope_key)
        if self.fiscal_year:
            parts.append(f"FY{self.fiscal_year}")
        return f"{' / '.join(parts)} → {self.current_value}"
