"""Core data types for kota."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

# JSON-shaped document exchanged with the agent protocol and guest scripts.
StructuredValue = Union[
    None, bool, int, float, str, list["StructuredValue"], dict[str, "StructuredValue"]
]


# =============================================================================
# Tool Descriptors
# =============================================================================


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Metadata of a tool, plus the compiled entry for script-backed tools."""

    name: str
    description: str
    parameters: dict[str, Any]
    entry_bytecode: bytes = b""
    source: Path | None = None
    backend: str = "lua"

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to OpenAI tools array format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


# =============================================================================
# Commands
# =============================================================================


@dataclass(frozen=True, slots=True)
class LiteralCommand:
    """Command that expands to fixed prompt text."""

    template: str

    @property
    def kind(self) -> str:
        return "string"


@dataclass(frozen=True, slots=True)
class CompiledCommand:
    """Command backed by a compiled guest function."""

    bytecode: bytes = field(repr=False)

    @property
    def kind(self) -> str:
        return "function"


CommandDef = Union[LiteralCommand, CompiledCommand]


# =============================================================================
# Tool Calls and Results
# =============================================================================


@dataclass(frozen=True, slots=True)
class ToolCall:
    """A tool call requested by the agent loop."""

    id: str
    name: str
    arguments: dict[str, Any]

    @property
    def arguments_json(self) -> str:
        """Arguments as JSON string."""
        return json.dumps(self.arguments)

    @classmethod
    def create(cls, name: str, arguments: dict[str, Any]) -> "ToolCall":
        """Create a ToolCall with auto-generated ID."""
        return cls(
            id=f"call_{uuid.uuid4().hex[:8]}",
            name=name,
            arguments=arguments,
        )

    @classmethod
    def from_openai(cls, payload: dict[str, Any]) -> "ToolCall":
        """Build from one entry of an assistant message's ``tool_calls``.

        The model sends arguments as a JSON string; an empty string means
        no arguments.

        Raises:
            json.JSONDecodeError: if the arguments are not valid JSON.
        """
        function = payload["function"]
        raw = function.get("arguments") or "{}"
        arguments = json.loads(raw) if isinstance(raw, str) else dict(raw)
        if not isinstance(arguments, dict):
            arguments = {}
        call = cls.create(function["name"], arguments)
        if payload.get("id"):
            call = cls(id=payload["id"], name=call.name, arguments=call.arguments)
        return call


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Result of executing a tool, serialized for the agent protocol."""

    call_id: str
    name: str
    output: str
    is_error: bool = False

    def to_message(self) -> dict[str, Any]:
        """Convert to an OpenAI tool response message."""
        return {
            "role": "tool",
            "tool_call_id": self.call_id,
            "name": self.name,
            "content": self.output,
        }
