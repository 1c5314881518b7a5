"""Discovery and compilation of Lua tool manifests.

A manifest is Lua source that calls ``kota.register_tool{...}`` (or bare
``register_tool{...}``) once per tool::

    kota.register_tool({
        name = "add",
        description = "Add two numbers",
        parameters = {type = "object", properties = {...}},
        entry = function(args)
            return {result = args.a + args.b}
        end,
    })

``entry`` may also be a string of Lua source whose chunk returns the
function. Entry functions are dumped to bytecode once, at load time, and
may only reach globals: captured locals do not survive compilation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kota.exceptions import (
    CompileError,
    ConversionError,
    ManifestParseError,
    ScriptError,
)
from kota.scripting import (
    ScriptSession,
    SessionLimits,
    is_function,
    is_table,
    to_host,
)
from kota.types import ToolDescriptor

logger = logging.getLogger(__name__)

DEFAULT_TOOLS_PATH = Path(".kota") / "tools"


@dataclass(frozen=True, slots=True)
class LoadIssue:
    """A manifest entry (or whole file) that was skipped while loading."""

    source: Path
    error: Exception
    index: int | None = None
    name: str | None = None

    def __str__(self) -> str:
        where = str(self.source)
        if self.index is not None:
            where += f" entry #{self.index}"
        if self.name:
            where += f" ({self.name})"
        return f"{where}: {self.error}"


class ToolManifestLoader:
    """Loads tool descriptors from a manifest file or a directory of them.

    Failures are isolated per file and per registration: the offending
    entry is recorded in :attr:`issues` and skipped.
    """

    def __init__(self, limits: SessionLimits | None = None) -> None:
        self._limits = limits
        self.issues: list[LoadIssue] = []

    def load(self, path: str | Path = DEFAULT_TOOLS_PATH) -> list[ToolDescriptor]:
        """Load all tools found at ``path`` in registration order.

        A missing path yields no tools. Duplicate names are kept; the tool
        registry decides which one wins.
        """
        self.issues = []
        manifest_path = Path(path)

        if not manifest_path.exists():
            logger.debug("No tool manifest at %s", manifest_path)
            return []

        descriptors: list[ToolDescriptor] = []
        for manifest_file in self._manifest_files(manifest_path):
            descriptors.extend(self._load_file(manifest_file))

        logger.debug("Loaded %d tool(s) from %s", len(descriptors), manifest_path)
        return descriptors

    def _manifest_files(self, path: Path) -> list[Path]:
        if path.is_dir():
            return sorted(path.glob("*.lua"))
        return [path]

    def _load_file(self, path: Path) -> list[ToolDescriptor]:
        with ScriptSession(limits=self._limits) as session:
            register, registrations = session.collector()
            kota = session.table()
            kota[b"register_tool"] = register
            session.set_global("kota", kota)
            session.set_global("register_tool", register)

            try:
                source = path.read_text(encoding="utf-8")
                session.execute(source, name=path.name)
            except (OSError, CompileError, ScriptError) as exc:
                self._report(LoadIssue(source=path, error=exc))
                return []

            descriptors: list[ToolDescriptor] = []
            for index in range(1, len(registrations) + 1):
                definition = registrations[index][b"value"]
                try:
                    descriptors.append(
                        self._build_descriptor(session, path, index, definition)
                    )
                except (
                    ManifestParseError,
                    CompileError,
                    ConversionError,
                    ScriptError,
                ) as exc:
                    self._report(
                        LoadIssue(
                            source=path,
                            error=exc,
                            index=index,
                            name=_peek_name(session, definition),
                        )
                    )
            return descriptors

    def _build_descriptor(
        self, session: ScriptSession, path: Path, index: int, definition: Any
    ) -> ToolDescriptor:
        if not is_table(definition):
            raise ManifestParseError("register_tool expects a table")

        name = session.field(definition, "name")
        if not isinstance(name, bytes) or not name:
            raise ManifestParseError("'name' must be a non-empty string")
        tool_name = name.decode("utf-8", errors="replace")

        description = session.field(definition, "description")
        if not isinstance(description, bytes):
            raise ManifestParseError("'description' must be a string")

        parameters = session.field(definition, "parameters")
        if not is_table(parameters):
            raise ManifestParseError("'parameters' must be a table")
        schema = to_host(parameters)
        if not isinstance(schema, dict):
            raise ManifestParseError("'parameters' must be a table of named fields")

        entry = session.field(definition, "entry")
        if entry is None:
            entry = session.field(definition, "handler")

        bytecode = self._compile_entry(session, tool_name, entry)
        logger.debug("Compiled tool %s from %s (#%d)", tool_name, path, index)

        return ToolDescriptor(
            name=tool_name,
            description=description.decode("utf-8", errors="replace"),
            parameters=schema,
            entry_bytecode=bytecode,
            source=path,
        )

    def _compile_entry(self, session: ScriptSession, tool_name: str, entry: Any) -> bytes:
        if isinstance(entry, bytes):
            chunk = session.load_source(entry, name=f"{tool_name}.entry")
            try:
                entry = session.call(chunk)
            except ScriptError as exc:
                raise CompileError(str(exc)) from exc
            if not is_function(entry):
                raise CompileError("entry source must return a function")
        elif not is_function(entry):
            raise ManifestParseError("'entry' must be a function or Lua source")
        return session.dump(entry)

    def _report(self, issue: LoadIssue) -> None:
        logger.warning("Skipping tool: %s", issue)
        self.issues.append(issue)


def _peek_name(session: ScriptSession, definition: Any) -> str | None:
    if not is_table(definition):
        return None
    try:
        name = session.field(definition, "name")
    except ScriptError:
        return None
    if isinstance(name, bytes):
        return name.decode("utf-8", errors="replace")
    return None


def load_tools(
    path: str | Path = DEFAULT_TOOLS_PATH, limits: SessionLimits | None = None
) -> list[ToolDescriptor]:
    """Load tool descriptors, logging (not raising) per-entry failures."""
    return ToolManifestLoader(limits=limits).load(path)
