"""Observer protocol definition."""

from __future__ import annotations

from typing import Protocol

from kota.observer.events import ToolCallEvent, ToolResultEvent


class Observer(Protocol):
    """Protocol for receiving tool execution events.

    Callbacks run inline with the invocation; implementations should be fast.
    """

    def on_tool_call(self, event: ToolCallEvent) -> None:
        """Called before a tool is invoked."""
        ...

    def on_tool_result(self, event: ToolResultEvent) -> None:
        """Called after a tool returns or fails."""
        ...

    def on_error(self, error: Exception, context: str | None = None) -> None:
        """Called when an invocation raises."""
        ...
