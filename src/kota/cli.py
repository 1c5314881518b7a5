"""Command-line front end for inspecting and running extensions."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from kota.commands import parse_command
from kota.exceptions import (
    CommandError,
    CommandNotFoundError,
    ConfigError,
    InvokeError,
    KotaError,
    ParseError,
    ToolNotFoundError,
)
from kota.runtime import ExtensionRuntime, load_runtime
from kota.scripting import SessionLimits


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kota", description="Inspect and run Lua tools and commands."
    )
    parser.add_argument(
        "--root", type=Path, default=Path.cwd(), help="Workspace holding .kota/"
    )
    parser.add_argument(
        "--max-instructions",
        type=int,
        default=None,
        help="Abort scripts after this many Lua instructions",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="action", required=True)
    sub.add_parser("tools", help="List registered tools")
    describe = sub.add_parser("describe", help="Show a tool definition")
    describe.add_argument("name")
    call = sub.add_parser("call", help="Invoke a tool with JSON arguments")
    call.add_argument("name")
    call.add_argument("arguments", nargs="?", default="{}")
    sub.add_parser("commands", help="List custom commands")
    run = sub.add_parser("run", help="Expand a custom command into its prompt")
    run.add_argument("line", nargs=argparse.REMAINDER)
    return parser


def _hint(exc: KotaError) -> str:
    if isinstance(exc, ConfigError):
        return "Create .kota/config.lua calling kota.setup({...})"
    if isinstance(exc, ToolNotFoundError):
        return "Run 'kota tools' to see available tools"
    if isinstance(exc, (CommandNotFoundError, ParseError)):
        return "Run 'kota commands' to see available commands"
    if isinstance(exc, (InvokeError, CommandError)):
        return "Check the script for errors; rerun with --verbose for details"
    return "Rerun with --verbose for details"


def _list_tools(runtime: ExtensionRuntime) -> None:
    for name in runtime.tools.list():
        descriptor = runtime.tools.describe(name)
        print(f"{name} ({descriptor.backend}): {descriptor.description}")


def _list_commands(runtime: ExtensionRuntime) -> None:
    for name in runtime.commands.list():
        print(f"/{name} ({runtime.commands.command_type(name)})")


def _run(runtime: ExtensionRuntime, args: argparse.Namespace) -> None:
    if args.action == "tools":
        _list_tools(runtime)
    elif args.action == "describe":
        print(json.dumps(runtime.tools.describe(args.name).to_openai_format(), indent=2))
    elif args.action == "call":
        result = runtime.tools.invoke(args.name, json.loads(args.arguments))
        print(json.dumps(result))
    elif args.action == "commands":
        _list_commands(runtime)
    elif args.action == "run":
        name, command_args = parse_command(" ".join(args.line).lstrip("/"))
        print(runtime.commands.execute(name, command_args))


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        runtime = load_runtime(
            args.root, limits=SessionLimits(max_instructions=args.max_instructions)
        )
        _run(runtime, args)
    except KotaError as exc:
        print(f"error: {exc}", file=sys.stderr)
        print(f"hint: {_hint(exc)}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"error: arguments are not valid JSON: {exc}", file=sys.stderr)
        print("hint: pass an object such as '{\"a\": 1}'", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
