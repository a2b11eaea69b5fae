# core/domain/dispatcher.py
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, DefaultDict, List, Type, TypeVar

from django.db import transaction

from .events import DomainEvent

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT", bound=DomainEvent)
Handler = Callable[[EventT], None]


class DomainEventDispatcher:
    """
    Simple in-process domain event dispatcher.

    Usage:

        from core.domain.dispatcher import register_handler, emit_on_commit

        @register_handler(QuotationSent)
        def email_client(event: QuotationSent) -> None:
            ...

        emit_on_commit(QuotationSent(quotation_pk=1, quotation_id="QN1-EA701-001"))
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[Type[DomainEvent], List[Handler]] = defaultdict(list)

    def register_handler(self, event_type: Type[EventT]):
        """Decorator registering ``func`` for ``event_type``."""

        def decorator(func: Handler) -> Handler:
            if func not in self._handlers[event_type]:
                self._handlers[event_type].append(func)
                logger.debug(
                    "Registered domain event handler %s for %s",
                    func.__name__,
                    event_type.__name__,
                )
            return func

        return decorator

    def emit(self, event: DomainEvent) -> None:
        """
        Run every handler registered for type(event), synchronously.

        A failing handler is logged and does not stop the others; the
        business operation that emitted the event has already succeeded.
        """
        event_type = type(event)
        handlers = self._handlers.get(event_type, [])

        if not handlers:
            logger.debug("No handlers registered for event %s", event_type.__name__)
            return

        for handler in handlers:
            try:
                handler(event)  # type: ignore[arg-type]
            except Exception:
                logger.exception(
                    "Error while handling event %s in handler %s",
                    event_type.__name__,
                    handler.__name__,
                )

    def emit_on_commit(self, event: DomainEvent) -> None:
        """Emit once the current transaction commits (immediately if none)."""
        transaction.on_commit(lambda: self.emit(event))


# Global dispatcher (one per process is enough for a Django monolith)
dispatcher = DomainEventDispatcher()

register_handler = dispatcher.register_handler
emit = dispatcher.emit
emit_on_commit = dispatcher.emit_on_commit
