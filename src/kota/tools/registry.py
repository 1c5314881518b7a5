"""Registry of invocable tools, native and scripted alike."""

from __future__ import annotations

import asyncio
import json
import logging
import threading
import time
from typing import Any

from kota.exceptions import InvokeError, KotaError, ToolNotFoundError
from kota.observer import NullObserver, Observer, ToolCallEvent, ToolResultEvent
from kota.tools.protocol import Tool
from kota.types import StructuredValue, ToolCall, ToolDescriptor, ToolResult

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 200


class ToolRegistry:
    """Catalog of tools indexed by unique name.

    Listing follows registration order. Registering an existing name
    replaces the previous tool in place. All access is serialized by a
    re-entrant lock; invocations run outside it.
    """

    def __init__(self, observer: Observer | None = None) -> None:
        self._tools: dict[str, Tool] = {}
        self._lock = threading.RLock()
        self._observer: Observer = observer or NullObserver()

    def register(self, tool: Tool) -> None:
        with self._lock:
            if tool.name in self._tools:
                logger.debug("Replacing tool %s", tool.name)
            self._tools[tool.name] = tool

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._tools.pop(name, None) is not None

    def get(self, name: str) -> Tool | None:
        with self._lock:
            return self._tools.get(name)

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._tools

    def list(self) -> list[str]:
        with self._lock:
            return list(self._tools)

    def clear(self) -> None:
        with self._lock:
            self._tools.clear()

    def describe(self, name: str) -> ToolDescriptor:
        return self._require(name).describe()

    def definitions(self) -> list[dict[str, Any]]:
        """Tool definitions in OpenAI function calling format."""
        with self._lock:
            tools = list(self._tools.values())
        return [tool.describe().to_openai_format() for tool in tools]

    def invoke(self, name: str, arguments: Any) -> StructuredValue:
        """Invoke a tool by name.

        Raises:
            ToolNotFoundError: if no tool has that name.
            InvokeError: if the tool fails.
        """
        return self._require(name).invoke(arguments)

    async def ainvoke(self, name: str, arguments: Any) -> StructuredValue:
        """Invoke a tool from async code without blocking the event loop."""
        return await asyncio.to_thread(self.invoke, name, arguments)

    def execute(self, tool_call: ToolCall) -> ToolResult:
        """Run a tool call for the agent loop.

        Failures are reported in the result (``is_error=True``) so the model
        can see them, never raised.
        """
        tool = self.get(tool_call.name)
        self._observer.on_tool_call(
            ToolCallEvent(
                tool_name=tool_call.name,
                call_id=tool_call.id,
                arguments=tool_call.arguments,
                backend=tool.describe().backend if tool is not None else None,
            )
        )
        start = time.monotonic()
        failed_stage: str | None = None
        try:
            result = self.invoke(tool_call.name, tool_call.arguments)
            output = result if isinstance(result, str) else json.dumps(result, allow_nan=False)
            is_error = False
        except KotaError as exc:
            logger.debug("Tool %s failed: %s", tool_call.name, exc)
            self._observer.on_error(exc, tool_call.name)
            output = str(exc)
            is_error = True
            if isinstance(exc, InvokeError):
                failed_stage = exc.stage.value
        except (TypeError, ValueError) as exc:
            self._observer.on_error(exc, tool_call.name)
            output = f"{tool_call.name} returned a non-JSON result: {exc}"
            is_error = True

        self._observer.on_tool_result(
            ToolResultEvent(
                tool_name=tool_call.name,
                call_id=tool_call.id,
                is_error=is_error,
                duration_ms=int((time.monotonic() - start) * 1000),
                output_preview=output[:_PREVIEW_CHARS],
                failed_stage=failed_stage,
            )
        )
        return ToolResult(
            call_id=tool_call.id,
            name=tool_call.name,
            output=output,
            is_error=is_error,
        )

    def _require(self, name: str) -> Tool:
        tool = self.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tools)
