"""Tool protocol definition."""

from __future__ import annotations

from typing import Any, Protocol

from kota.types import StructuredValue, ToolDescriptor


class Tool(Protocol):
    """A capability the agent can invoke: native Python or a Lua script."""

    @property
    def name(self) -> str: ...

    def describe(self) -> ToolDescriptor: ...

    def invoke(self, arguments: Any) -> StructuredValue:
        """Run the tool on a document and return a document.

        Raises:
            InvokeError: if any stage of the invocation fails.
        """
        ...
