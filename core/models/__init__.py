from .base import BaseModel, TimeStampedModel, UserStampedModel
from .audit import AuditLog
from .sequences import IdSequence

__all__ = [
    "BaseModel",
    "TimeStampedModel",
    "UserStampedModel",
    "AuditLog",
    # Identifier counters
    "IdSequence",
]
