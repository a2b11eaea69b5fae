# accounting/domain.py
from dataclasses import dataclass

from core.domain.events import DomainEvent


@dataclass(frozen=True)
class InvoiceSent(DomainEvent):
    invoice_pk: int
    invoice_id: str


@dataclass(frozen=True)
class InvoicePaid(DomainEvent):
    invoice_pk: int
    invoice_id: str
