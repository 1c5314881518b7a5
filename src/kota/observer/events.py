"""Typed event dataclasses for the observer system."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ToolCallEvent:
    """Fired before a tool call is dispatched.

    ``backend`` is ``"lua"`` or ``"python"``, or ``None`` when no tool has
    the requested name.
    """

    tool_name: str
    call_id: str
    arguments: dict[str, Any]
    backend: str | None = None


@dataclass(frozen=True, slots=True)
class ToolResultEvent:
    """Fired after a tool call returns or fails."""

    tool_name: str
    call_id: str
    is_error: bool
    duration_ms: int
    output_preview: str
    failed_stage: str | None = None
