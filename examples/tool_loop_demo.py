#!/usr/bin/env python3
"""Demo of the extension runtime driving a scripted tool loop.

Loads the example workspace (examples/.kota), advertises its tools in
OpenAI function-calling format, then replays a fixed list of tool calls the
way an agent loop would, concurrently, and expands a few custom commands.

Run with: python examples/tool_loop_demo.py --max-instructions 100000
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path

from kota import NativeTool, SessionLimits, ToolCall, load_runtime
from kota.commands import parse_command

WORKSPACE = Path(__file__).parent

SCRIPTED_CALLS = [
    ToolCall.from_openai(
        {"id": f"call_{index}", "function": {"name": name, "arguments": json.dumps(arguments)}}
    )
    for index, (name, arguments) in enumerate(
        [
            ("calculator", {"operation": "add", "a": 5, "b": 3}),
            ("calculator", {"operation": "divide", "a": 1, "b": 0}),
            ("string_transform", {"text": "hello lua world", "operation": "words"}),
            ("list_workspace", {"pattern": "*.lua"}),
            ("missing_tool", {}),
        ]
    )
]

COMMAND_LINES = [
    "/fix",
    "/test tests/test_cli.py",
    "/review file=src/kota/runtime.py aspect=naming",
]


def list_workspace(pattern: str = "*") -> list[str]:
    """List files in the example workspace matching a glob pattern."""
    return sorted(str(p.relative_to(WORKSPACE)) for p in WORKSPACE.rglob(pattern))


async def run_demo(max_instructions: int | None) -> None:
    runtime = load_runtime(
        WORKSPACE,
        native_tools=[NativeTool("list_workspace", list_workspace)],
        limits=SessionLimits(max_instructions=max_instructions),
    )
    for issue in runtime.issues:
        print(f"skipped: {issue}")

    print("=== Tool definitions ===")
    print(json.dumps(runtime.tools.definitions(), indent=2))

    print("\n=== Tool calls ===")
    results = await asyncio.gather(
        *(asyncio.to_thread(runtime.tools.execute, call) for call in SCRIPTED_CALLS)
    )
    for call, result in zip(SCRIPTED_CALLS, results):
        status = "error" if result.is_error else "ok"
        print(f"{call.name}({call.arguments_json}) -> [{status}] {result.output}")

    print("\n=== Commands ===")
    for line in COMMAND_LINES:
        name, args = parse_command(line.lstrip("/"))
        print(f"{line} -> {runtime.commands.execute(name, args)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Extension runtime demo")
    parser.add_argument(
        "--max-instructions",
        type=int,
        default=None,
        help="Instruction budget per script call",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    asyncio.run(run_demo(args.max_instructions))


if __name__ == "__main__":
    main()
