"""Assembly of settings, tools and commands for one workspace."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from kota.commands import CommandRegistry
from kota.config import DEFAULT_CONFIG_PATH, ConfigLoader, Settings
from kota.observer import Observer
from kota.scripting import SessionLimits
from kota.tools import (
    DEFAULT_TOOLS_PATH,
    LoadIssue,
    LuaTool,
    Tool,
    ToolManifestLoader,
    ToolRegistry,
)

logger = logging.getLogger(__name__)


@dataclass
class ExtensionRuntime:
    """Loaded settings plus the tool and command registries built from them."""

    settings: Settings
    tools: ToolRegistry
    commands: CommandRegistry
    issues: list[LoadIssue] = field(default_factory=list)


def load_runtime(
    root: str | Path | None = None,
    *,
    native_tools: Iterable[Tool] = (),
    config_path: str | Path | None = None,
    tools_path: str | Path | None = None,
    limits: SessionLimits | None = None,
    observer: Observer | None = None,
) -> ExtensionRuntime:
    """Load ``<root>/.kota/config.lua`` and ``<root>/.kota/tools``.

    Native tools are registered first, then Lua tools, so a Lua tool with the
    same name replaces the native one. The settings' enabled/disabled lists
    are applied to both.

    Raises:
        ConfigError: if the config script is missing or invalid.
    """
    base = Path(root) if root is not None else Path.cwd()
    config_file = Path(config_path) if config_path else base / DEFAULT_CONFIG_PATH
    tools_source = Path(tools_path) if tools_path else base / DEFAULT_TOOLS_PATH

    config_loader = ConfigLoader(limits=limits)
    settings, commands = config_loader.load(config_file)

    tool_loader = ToolManifestLoader(limits=limits)
    descriptors = tool_loader.load(tools_source)

    registry = ToolRegistry(observer=observer)
    candidates: list[Tool] = [*native_tools]
    candidates.extend(LuaTool(descriptor, limits=limits) for descriptor in descriptors)
    for tool in candidates:
        if not settings.tool_allowed(tool.name):
            logger.debug("Tool %s disabled by settings", tool.name)
            continue
        registry.register(tool)

    logger.debug("Runtime ready: %d tool(s), %d command(s)", len(registry), len(commands))
    return ExtensionRuntime(
        settings=settings,
        tools=registry,
        commands=CommandRegistry(commands, limits=limits),
        issues=[*config_loader.issues, *tool_loader.issues],
    )
