"""Composite observer for fan-out to multiple observers."""

from __future__ import annotations

import logging
from typing import Sequence

from kota.observer.events import ToolCallEvent, ToolResultEvent
from kota.observer.protocol import Observer

logger = logging.getLogger(__name__)


class CompositeObserver:
    """Fan-out observer that forwards events to multiple child observers.

    If a child observer raises an exception, it is logged but does not
    prevent other observers from receiving the event.
    """

    def __init__(self, observers: Sequence[Observer]):
        self._observers = list(observers)

    def _notify_all(self, method_name: str, *args: object) -> None:
        for obs in self._observers:
            method = getattr(obs, method_name, None)
            if method is None:
                continue
            try:
                method(*args)
            except Exception as exc:
                logger.warning(
                    "Observer %s.%s raised %s: %s",
                    obs.__class__.__name__,
                    method_name,
                    type(exc).__name__,
                    exc,
                )

    def on_tool_call(self, event: ToolCallEvent) -> None:
        self._notify_all("on_tool_call", event)

    def on_tool_result(self, event: ToolResultEvent) -> None:
        self._notify_all("on_tool_result", event)

    def on_error(self, error: Exception, context: str | None = None) -> None:
        self._notify_all("on_error", error, context)
