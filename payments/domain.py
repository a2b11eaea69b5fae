# payments/domain.py
from dataclasses import dataclass

from core.domain.events import DomainEvent


@dataclass(frozen=True)
class PaymentSubmitted(DomainEvent):
    submission_pk: int
    invoice_id: str


@dataclass(frozen=True)
class PaymentRejected(DomainEvent):
    submission_pk: int
    invoice_id: str
