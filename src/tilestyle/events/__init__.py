"""Event system: bus and event types for the style document lifecycle."""

from tilestyle.events.bus import EventBus
from tilestyle.events.types import StyleCommitted, StyleEvent, StyleLoaded, StyleLoadFailed

__all__ = [
    "EventBus",
    "StyleCommitted",
    "StyleEvent",
    "StyleLoaded",
    "StyleLoadFailed",
]
