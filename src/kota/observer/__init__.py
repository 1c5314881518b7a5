"""Observer system for tool execution events."""

from kota.observer.composite import CompositeObserver
from kota.observer.events import ToolCallEvent, ToolResultEvent
from kota.observer.null import NullObserver
from kota.observer.protocol import Observer

__all__ = [
    "Observer",
    "NullObserver",
    "CompositeObserver",
    "ToolCallEvent",
    "ToolResultEvent",
]
