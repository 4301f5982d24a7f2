"""Delivery of style document events to editor views and tile renderers."""

from __future__ import annotations

import logging
from typing import Callable

from tilestyle.events.types import StyleEvent

logger = logging.getLogger("tilestyle.events")

Listener = Callable[[StyleEvent], None]


class EventBus:
    """Routes :class:`StyleLoaded`, :class:`StyleLoadFailed` and
    :class:`StyleCommitted` events from a :class:`StyleDoc` to listeners.

    Delivery is synchronous on the thread that loaded or committed the
    style; a renderer that draws elsewhere should only read the
    ``StyleCommitted.style`` snapshot, never the document. Listeners that
    watch every event run before listeners of the event's own type. A
    listener may unsubscribe itself while an event is being delivered.
    """

    def __init__(self) -> None:
        self._listeners: dict[type[StyleEvent], list[Listener]] = {}
        self._global_listeners: list[Listener] = []

    def subscribe(self, event_type: type[StyleEvent], callback: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: type[StyleEvent], callback: Listener) -> None:
        """Remove *callback*; callbacks that were never subscribed are ignored."""
        callbacks = self._listeners.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def on_all(self, callback: Listener) -> None:
        self._global_listeners.append(callback)

    def emit(self, event: StyleEvent) -> None:
        typed = self._listeners.get(type(event), [])
        logger.debug(
            "Dispatching %s to %d listener(s)",
            type(event).__name__,
            len(self._global_listeners) + len(typed),
        )
        for cb in list(self._global_listeners):
            cb(event)
        for cb in list(typed):
            cb(event)
