"""Tests for core data types."""

from __future__ import annotations

from kota.types import CompiledCommand, LiteralCommand, ToolCall, ToolDescriptor, ToolResult


def test_tool_descriptor_openai_format() -> None:
    descriptor = ToolDescriptor(
        name="add",
        description="Add two numbers",
        parameters={"type": "object", "properties": {}},
        entry_bytecode=b"\x1bLua",
    )
    assert descriptor.to_openai_format() == {
        "type": "function",
        "function": {
            "name": "add",
            "description": "Add two numbers",
            "parameters": {"type": "object", "properties": {}},
        },
    }


def test_command_kinds() -> None:
    assert LiteralCommand("fix it").kind == "string"
    assert CompiledCommand(b"\x1bLua").kind == "function"
    assert "bytecode" not in repr(CompiledCommand(b"\x1bLua"))


def test_tool_call_create() -> None:
    call = ToolCall.create("add", {"a": 1})
    assert call.id.startswith("call_")
    assert call.arguments_json == '{"a": 1}'


def test_tool_call_from_openai() -> None:
    call = ToolCall.from_openai(
        {
            "id": "call_abc",
            "type": "function",
            "function": {"name": "add", "arguments": '{"a": 5, "b": 3}'},
        }
    )
    assert call == ToolCall(id="call_abc", name="add", arguments={"a": 5, "b": 3})


def test_tool_call_from_openai_without_arguments() -> None:
    call = ToolCall.from_openai({"function": {"name": "ping", "arguments": ""}})
    assert call.name == "ping"
    assert call.arguments == {}
    assert call.id.startswith("call_")


def test_tool_result_message() -> None:
    result = ToolResult(call_id="call_1", name="add", output='{"result": 8}')
    assert result.to_message() == {
        "role": "tool",
        "tool_call_id": "call_1",
        "name": "add",
        "content": '{"result": 8}',
    }
