# clients/domain.py
from dataclasses import dataclass, field

from core.domain.events import DomainEvent


@dataclass(frozen=True)
class ClientOnboarded(DomainEvent):
    """
    A client account was created.
    Carries the temporary password so the welcome email can include it;
    it is not stored anywhere else in clear text.
    """
    client_pk: int
    client_id: str
    temporary_password: str = field(repr=False)
