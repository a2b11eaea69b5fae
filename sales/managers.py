# sales/managers.py
from django.db import models
from django.db.models import Q
from django.utils import timezone


class QuotationQuerySet(models.QuerySet):
    def for_client(self, client):
        return self.filter(client=client)

    def awaiting_response(self):
        """Sent and still valid."""
        today = timezone.localdate()
        return self.filter(status=self.model.Status.SENT).filter(
            Q(valid_until__isnull=True) | Q(valid_until__gte=today)
        )

    def accepted(self):
        return self.filter(status=self.model.Status.ACCEPTED)
