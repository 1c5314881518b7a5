"""Tools package."""

from kota.tools.loader import (
    DEFAULT_TOOLS_PATH,
    LoadIssue,
    ToolManifestLoader,
    load_tools,
)
from kota.tools.lua import LuaTool
from kota.tools.native import NativeTool
from kota.tools.protocol import Tool
from kota.tools.registry import ToolRegistry

__all__ = [
    "DEFAULT_TOOLS_PATH",
    "LoadIssue",
    "LuaTool",
    "NativeTool",
    "Tool",
    "ToolManifestLoader",
    "ToolRegistry",
    "load_tools",
]
