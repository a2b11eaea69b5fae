# accounting/managers.py
from decimal import Decimal

from django.db import models
from django.db.models import Sum
from django.utils import timezone


class InvoiceQuerySet(models.QuerySet):
    def for_client(self, client):
        return self.filter(client=client)

    def outstanding(self):
        """Sent but not paid yet."""
        return self.filter(status=self.model.Status.SENT)

    def overdue(self):
        return self.outstanding().filter(due_date__lt=timezone.localdate())

    def paid(self):
        return self.filter(status=self.model.Status.PAID)

    def in_financial_year(self, label: str):
        return self.filter(financial_year=label)

    def sum_total(self) -> Decimal:
        return self.aggregate(total=Sum("total_amount"))["total"] or Decimal("0.00")
