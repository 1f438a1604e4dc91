"""
Minimal named-event dispatch used by gateway requests.

Requests announce ``before<RequestName>`` and ``after<RequestName>`` around
``send()``, letting callers hook logging, auditing or payload tweaks without
subclassing.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """An event being dispatched to handlers."""
    sender: Any = None
    name: str | None = None
    data: Any = None
    handled: bool = False


type EventHandler = Callable[[Event], None]


class EventEmitter:
    """Mixin adding on/off/trigger to any class."""

    def _handlers(self) -> dict[str, list[tuple[EventHandler, Any]]]:
        handlers = self.__dict__.get("_event_handlers")
        if handlers is None:
            handlers = {}
            self.__dict__["_event_handlers"] = handlers
        return handlers

    def on(self, name: str, handler: EventHandler, data: Any = None) -> None:
        """Attach a handler; ``data`` is exposed as ``event.data`` when it runs."""
        self._handlers().setdefault(name, []).append((handler, data))

    def off(self, name: str, handler: EventHandler | None = None) -> bool:
        """
        Detach one handler, or every handler of the event when none is given.

        Returns:
            True if anything was detached
        """
        handlers = self._handlers()
        if not handlers.get(name):
            return False

        if handler is None:
            del handlers[name]
            return True

        remaining = [entry for entry in handlers[name] if entry[0] is not handler]
        detached = len(remaining) != len(handlers[name])
        handlers[name] = remaining
        return detached

    def trigger(self, name: str, event: Event | None = None) -> bool:
        """
        Run the handlers of an event in registration order.

        A handler can stop propagation by setting ``event.handled = True``.

        Returns:
            True if a handler marked the event as handled
        """
        handlers = self._handlers().get(name)
        if not handlers:
            return False

        if event is None:
            event = Event()
        if event.sender is None:
            event.sender = self
        event.handled = False
        event.name = name

        logger.debug(f"Triggering '{name}' on {type(self).__name__} ({len(handlers)} handler(s))")
        for handler, data in list(handlers):
            event.data = data
            handler(event)
            if event.handled:
                return True

        return False
