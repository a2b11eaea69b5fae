# sales/domain.py
from dataclasses import dataclass

from core.domain.events import DomainEvent


@dataclass(frozen=True)
class QuotationSent(DomainEvent):
    quotation_pk: int
    quotation_id: str


@dataclass(frozen=True)
class QuotationAccepted(DomainEvent):
    quotation_pk: int
    quotation_id: str
    accepted_by_name: str


@dataclass(frozen=True)
class QuotationRejected(DomainEvent):
    quotation_pk: int
    quotation_id: str
