"""Null observer implementation (no-op)."""

from __future__ import annotations

from kota.observer.events import ToolCallEvent, ToolResultEvent


class NullObserver:
    """Observer that does nothing. Used as default."""

    def on_tool_call(self, event: ToolCallEvent) -> None:
        pass

    def on_tool_result(self, event: ToolResultEvent) -> None:
        pass

    def on_error(self, error: Exception, context: str | None = None) -> None:
        pass
