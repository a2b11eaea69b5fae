# core/domain/events.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from django.utils import timezone


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """
    Base class for all domain events.

    Concrete events live next to the app that raises them, e.g.:

        @dataclass(frozen=True)
        class InvoiceSent(DomainEvent):
            invoice_pk: int
            invoice_id: str
    """
    occurred_at: datetime = field(default_factory=timezone.now)
    metadata: Dict[str, Any] = field(default_factory=dict)
