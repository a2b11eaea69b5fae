# website/domain.py
from dataclasses import dataclass

from core.domain.events import DomainEvent


@dataclass(frozen=True)
class InquiryReceived(DomainEvent):
    inquiry_pk: int
