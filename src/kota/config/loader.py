"""Loading of the Lua config script.

The config script must call ``kota.setup{...}`` (or bare ``setup{...}``)
exactly once::

    kota.setup({
        model = "gpt-4o",
        api_key = os.getenv("OPENAI_API_KEY") or "",
        tools = {enabled = {"read_file"}, disabled = {"delete_file"}},
        commands = {
            fix = "analyze and fix the current file",
            test = function(args)
                return "run tests for " .. (args.file or args["1"] or "current file")
            end,
        },
    })

The only capability the script gets beyond pure computation is
``os.getenv``, read from the host process environment.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from kota.config.schema import Settings
from kota.exceptions import (
    CompileError,
    ConfigError,
    ConfigNotFoundError,
    ConversionError,
    ManifestParseError,
    ScriptError,
)
from kota.scripting import (
    ScriptSession,
    SessionLimits,
    environ_lookup,
    is_function,
    is_table,
    to_host,
)
from kota.tools.loader import LoadIssue
from kota.types import CommandDef, CompiledCommand, LiteralCommand

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".kota") / "config.lua"

_SCALAR_FIELDS = ("model", "api_key", "api_base", "temperature")
_KNOWN_KEYS = {
    name.encode("utf-8")
    for name in (*_SCALAR_FIELDS, "tools", "enabled_tools", "disabled_tools", "commands")
}


class ConfigLoader:
    """Runs a config script and captures its settings and commands.

    Malformed command entries are recorded in :attr:`issues` and skipped.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        limits: SessionLimits | None = None,
    ) -> None:
        self._environ = environ
        self._limits = limits
        self.issues: list[LoadIssue] = []

    def load(
        self, path: str | Path = DEFAULT_CONFIG_PATH
    ) -> tuple[Settings, dict[str, CommandDef]]:
        """Load settings and commands from ``path``.

        Raises:
            ConfigError: if the file is missing, fails to run, does not call
                setup exactly once, or holds invalid settings.
        """
        self.issues = []
        config_path = Path(path)

        if not config_path.exists():
            raise ConfigNotFoundError(
                f"Configuration file not found: {config_path}\n"
                "Please create a .kota/config.lua file."
            )

        with ScriptSession(
            limits=self._limits, env_lookup=environ_lookup(self._environ)
        ) as session:
            setup, calls = session.collector()
            kota = session.table()
            kota[b"setup"] = setup
            session.set_global("kota", kota)
            session.set_global("setup", setup)

            try:
                source = config_path.read_text(encoding="utf-8")
                session.execute(source, name=config_path.name)
            except OSError as exc:
                raise ConfigError(f"Failed to read config file: {exc}") from exc
            except (CompileError, ScriptError) as exc:
                raise ConfigError(f"Failed to execute Lua config: {exc}") from exc

            if len(calls) != 1:
                raise ConfigError(
                    f"{config_path} must call setup() exactly once, "
                    f"called {len(calls)} time(s)"
                )
            captured = calls[1][b"value"]
            if not is_table(captured):
                raise ConfigError("setup() expects a settings table")

            try:
                fields = self._read_fields(session, captured)
                commands = self._read_commands(
                    session, config_path, session.field(captured, "commands")
                )
            except ScriptError as exc:
                raise ConfigError(f"Failed to read settings table: {exc}") from exc

        try:
            settings = Settings(**fields, commands=commands)
        except ValidationError as exc:
            raise ConfigError(f"Invalid settings in {config_path}: {exc}") from exc

        logger.debug(
            "Loaded config %s: model=%s, %d command(s)",
            config_path,
            settings.model,
            len(commands),
        )
        return settings, dict(settings.commands)

    def _read_fields(self, session: ScriptSession, captured: Any) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        for key, _ in captured.items():
            if key not in _KNOWN_KEYS:
                logger.debug("Ignoring unknown setting: %r", key)

        try:
            for name in _SCALAR_FIELDS:
                value = to_host(session.field(captured, name))
                if value is not None:
                    fields[name] = value

            tools = session.field(captured, "tools")
            if is_table(tools):
                fields["enabled_tools"] = _string_list(session.field(tools, "enabled"))
                fields["disabled_tools"] = _string_list(session.field(tools, "disabled"))
            for name in ("enabled_tools", "disabled_tools"):
                value = session.field(captured, name)
                if value is not None:
                    fields[name] = _string_list(value)
        except ConversionError as exc:
            raise ConfigError(f"Invalid settings: {exc}") from exc

        return fields

    def _read_commands(
        self, session: ScriptSession, path: Path, table: Any
    ) -> dict[str, CommandDef]:
        commands: dict[str, CommandDef] = {}
        if table is None:
            return commands
        if not is_table(table):
            raise ConfigError("'commands' must be a table")

        for key, value in table.items():
            if not isinstance(key, bytes):
                error = ManifestParseError(f"command name must be a string, got {key!r}")
                self._report(LoadIssue(source=path, error=error))
                continue
            name = key.decode("utf-8", errors="replace")
            try:
                commands[name] = _command_def(session, value)
            except (ManifestParseError, CompileError) as exc:
                self._report(LoadIssue(source=path, error=exc, name=name))
        # table iteration order is unspecified in Lua
        return dict(sorted(commands.items()))

    def _report(self, issue: LoadIssue) -> None:
        logger.warning("Skipping command: %s", issue)
        self.issues.append(issue)


def _command_def(session: ScriptSession, value: Any) -> CommandDef:
    if isinstance(value, bytes):
        return LiteralCommand(value.decode("utf-8", errors="replace"))
    if is_function(value):
        return CompiledCommand(session.dump(value))
    raise ManifestParseError("command must be a string or a function")


def _string_list(value: Any) -> list[str]:
    items = to_host(value)
    if items is None or items == {}:
        return []
    if not isinstance(items, list) or not all(isinstance(item, str) for item in items):
        raise ConfigError(f"expected a list of tool names, got {items!r}")
    return items


def load_config(
    path: str | Path = DEFAULT_CONFIG_PATH,
    environ: Mapping[str, str] | None = None,
) -> tuple[Settings, dict[str, CommandDef]]:
    """Load settings and commands from a config script."""
    return ConfigLoader(environ=environ).load(path)
