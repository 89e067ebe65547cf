"""
Routes decoded webhook events to handlers by event name.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Union

from ..core.errors import RouteError
from ..core.models import PaymentEventName, WebhookEvent

__all__ = ["EventHandler", "EventRouter"]

EventHandler = Callable[[WebhookEvent], Any]


class EventRouter:
    """
    Maps each :class:`PaymentEventName` to at most one handler.

    Registering a name twice replaces the earlier handler. Populate the table
    at startup; :meth:`dispatch` only reads it.
    """

    def __init__(self) -> None:
        self._handlers: Dict[PaymentEventName, EventHandler] = {}
        self._fallback: Optional[EventHandler] = None

    def register(
        self,
        event_name: Union[PaymentEventName, str],
        handler: EventHandler,
    ) -> None:
        try:
            name = PaymentEventName(event_name)
        except ValueError as exc:
            raise ValueError(f"Unknown payment event name: {event_name!r}") from exc
        self._handlers[name] = handler

    def register_fallback(self, handler: EventHandler) -> None:
        self._fallback = handler

    def on(self, event_name: Union[PaymentEventName, str]) -> Callable[[EventHandler], EventHandler]:
        """Decorator form of :meth:`register`."""

        def decorator(handler: EventHandler) -> EventHandler:
            self.register(event_name, handler)
            return handler

        return decorator

    def handles(self, event_name: Union[PaymentEventName, str]) -> bool:
        return event_name in self._handlers

    def dispatch(self, event: WebhookEvent) -> Any:
        name = event.name
        handler = self._handlers.get(name) if isinstance(name, PaymentEventName) else None
        if handler is not None:
            logging.info("Dispatching %s event for %s", name.value, event.reference)
            return handler(event)

        if self._fallback is not None:
            logging.info("Dispatching %s event for %s to fallback", _label(name), event.reference)
            return self._fallback(event)

        raise RouteError(f"no handler for event type: {_label(name)}")


def _label(name: Union[PaymentEventName, str]) -> str:
    return name.value if isinstance(name, PaymentEventName) else name
