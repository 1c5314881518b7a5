"""Registry of user commands defined in the config script."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Mapping

from kota.exceptions import (
    CommandError,
    CommandNotFoundError,
    CompileError,
    ConversionError,
    ScriptError,
)
from kota.scripting import ScriptSession, SessionLimits, to_guest, to_host
from kota.types import CommandDef, CompiledCommand, LiteralCommand

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Resolves command invocations to prompt text.

    Literal commands return their template unchanged; arguments are
    accepted but not substituted. Compiled commands run in a fresh
    :class:`ScriptSession` with the arguments as a table.
    """

    def __init__(
        self,
        commands: Mapping[str, CommandDef] | None = None,
        limits: SessionLimits | None = None,
    ) -> None:
        self._commands: dict[str, CommandDef] = dict(commands or {})
        self._limits = limits
        self._lock = threading.RLock()

    def register(self, name: str, definition: CommandDef) -> None:
        with self._lock:
            self._commands[name] = definition

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._commands.pop(name, None) is not None

    def get(self, name: str) -> CommandDef | None:
        with self._lock:
            return self._commands.get(name)

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._commands

    def list(self) -> list[str]:
        with self._lock:
            return list(self._commands)

    def command_type(self, name: str) -> str | None:
        """Return ``"string"`` or ``"function"``, or ``None`` if unknown."""
        definition = self.get(name)
        return definition.kind if definition is not None else None

    def execute(self, name: str, args: Mapping[str, str] | None = None) -> str:
        """Produce the prompt for a command.

        Raises:
            CommandNotFoundError: if ``name`` is not registered.
            CommandError: if a compiled command fails.
        """
        definition = self.get(name)
        if definition is None:
            raise CommandNotFoundError(name)

        if isinstance(definition, LiteralCommand):
            return definition.template
        return self._run_compiled(name, definition, dict(args or {}))

    def _run_compiled(
        self, name: str, definition: CompiledCommand, args: dict[str, str]
    ) -> str:
        with ScriptSession(limits=self._limits) as session:
            try:
                function = session.load_bytecode(definition.bytecode, name)
                result = session.call(function, to_guest(session, args))
            except (CompileError, ConversionError, ScriptError) as exc:
                raise CommandError(name, exc) from exc
            logger.debug("Command %s produced a %s", name, type(result).__name__)
            return _display(result)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._commands)


def _display(value: Any) -> str:
    """Render a guest return value as prompt text.

    Strings pass through and ``nil`` is empty. Any other value is rendered
    as JSON of its document form, not as Lua debug text, so tables read
    the same way tool results do. Values with no document form fall back
    to ``repr``.
    """
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    try:
        return json.dumps(to_host(value))
    except ConversionError:
        return repr(value)
