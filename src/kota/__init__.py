"""kota: Lua-scripted tools and commands for a coding-assistant CLI."""

from kota.commands import CommandRegistry, parse_command
from kota.config import ConfigLoader, Settings, load_config
from kota.exceptions import (
    CommandError,
    CommandNotFoundError,
    CompileError,
    ConfigError,
    ConfigNotFoundError,
    ConversionError,
    ConversionErrorKind,
    InvokeError,
    InvokeStage,
    KotaError,
    ManifestError,
    ManifestNotFoundError,
    ManifestParseError,
    ParseError,
    ParseErrorKind,
    ScriptError,
    ToolNotFoundError,
)
from kota.observer import (
    CompositeObserver,
    NullObserver,
    Observer,
    ToolCallEvent,
    ToolResultEvent,
)
from kota.runtime import ExtensionRuntime, load_runtime
from kota.scripting import ScriptSession, SessionLimits, to_guest, to_host
from kota.tools import (
    LoadIssue,
    LuaTool,
    NativeTool,
    Tool,
    ToolManifestLoader,
    ToolRegistry,
    load_tools,
)
from kota.types import (
    CommandDef,
    CompiledCommand,
    LiteralCommand,
    StructuredValue,
    ToolCall,
    ToolDescriptor,
    ToolResult,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ExtensionRuntime",
    "load_runtime",
    "Settings",
    "ConfigLoader",
    "load_config",
    "CommandRegistry",
    "parse_command",
    "CommandDef",
    "LiteralCommand",
    "CompiledCommand",
    "Tool",
    "LuaTool",
    "NativeTool",
    "ToolRegistry",
    "ToolManifestLoader",
    "LoadIssue",
    "load_tools",
    "ToolDescriptor",
    "ToolCall",
    "ToolResult",
    "StructuredValue",
    "ScriptSession",
    "SessionLimits",
    "to_guest",
    "to_host",
    "Observer",
    "NullObserver",
    "CompositeObserver",
    "ToolCallEvent",
    "ToolResultEvent",
    "KotaError",
    "ConversionError",
    "ConversionErrorKind",
    "ScriptError",
    "CompileError",
    "ManifestError",
    "ManifestNotFoundError",
    "ManifestParseError",
    "ConfigError",
    "ConfigNotFoundError",
    "InvokeError",
    "InvokeStage",
    "ToolNotFoundError",
    "CommandNotFoundError",
    "CommandError",
    "ParseError",
    "ParseErrorKind",
]
