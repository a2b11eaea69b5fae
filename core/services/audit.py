# core/services/audit.py

from __future__ import annotations

from typing import Any, Mapping, Optional

from django.contrib.contenttypes.models import ContentType

from core.models import AuditLog


def log_event(
    *,
    action: str | AuditLog.Action,
    message: str = "",
    actor: Any = None,
    target: Optional[Any] = None,
    extra: Optional[Mapping[str, Any]] = None,
) -> AuditLog:
    """
    Write one audit entry.

    Parameters
    ----------
    action:
        One of AuditLog.Action (a plain string value is accepted too).
    message:
        Human-readable description, e.g. "Client EA701-IND-253 onboarded".
    actor:
        User who performed the action. Stored only when authenticated.
    target:
        Saved model instance the event relates to (client, invoice...).
    extra:
        Structured data stored as JSON, e.g. {"sequence_number": 1}.
    """
    action_value = action.value if isinstance(action, AuditLog.Action) else str(action)

    if action_value not in AuditLog.Action.values:
        raise ValueError(
            f"Invalid audit action '{action_value}'. "
            f"Allowed values: {sorted(AuditLog.Action.values)}"
        )

    data: dict[str, Any] = {
        "action": action_value,
        "message": str(message or ""),
        "extra": dict(extra) if extra is not None else {},
    }

    if actor is not None and getattr(actor, "is_authenticated", False):
        data["actor"] = actor

    if target is not None and target.pk is not None:
        data["target_content_type"] = ContentType.objects.get_for_model(
            target, for_concrete_model=True
        )
        data["target_object_id"] = str(target.pk)

    return AuditLog.objects.create(**data)
