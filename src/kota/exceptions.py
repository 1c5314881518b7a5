"""Exception hierarchy for kota."""

from __future__ import annotations

from enum import Enum


class KotaError(Exception):
    """Base exception for all kota errors."""


class ConversionErrorKind(str, Enum):
    NON_FINITE = "non_finite"
    TOO_DEEP = "too_deep"
    UNSUPPORTED_KEY = "unsupported_key"
    UNSUPPORTED_TYPE = "unsupported_type"
    TOO_LARGE = "too_large"


class ConversionError(KotaError):
    """A value could not cross the host/guest boundary."""

    def __init__(self, kind: ConversionErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class ScriptError(KotaError):
    """Runtime fault raised by a guest script.

    The guest's message is kept verbatim in ``str(error)``.
    """


class CompileError(KotaError):
    """Guest source or bytecode could not be compiled or loaded."""


class ManifestError(KotaError):
    """Error reading a tool or config manifest."""


class ManifestNotFoundError(ManifestError):
    """Manifest path does not exist."""


class ManifestParseError(ManifestError):
    """A manifest entry is malformed."""


class ConfigError(KotaError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError, ManifestNotFoundError):
    """The mandatory config script does not exist."""


class InvokeStage(str, Enum):
    LOAD = "load"
    CONVERT_IN = "convert-in"
    CALL = "call"
    CONVERT_OUT = "convert-out"


class InvokeError(KotaError):
    """Error while invoking a capability, tagged with the pipeline stage."""

    def __init__(self, tool_name: str, stage: InvokeStage, cause: Exception) -> None:
        super().__init__(f"{tool_name} failed at {stage.value}: {cause}")
        self.tool_name = tool_name
        self.stage = stage
        self.cause = cause


class ToolNotFoundError(KotaError):
    """No tool registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool not found: {name}")
        self.name = name


class CommandNotFoundError(KotaError):
    """No command registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Command '{name}' not found")
        self.name = name


class CommandError(KotaError):
    """A compiled command failed while producing its prompt."""

    def __init__(self, name: str, cause: Exception) -> None:
        super().__init__(f"Command '{name}' failed: {cause}")
        self.name = name
        self.cause = cause


class ParseErrorKind(str, Enum):
    EMPTY = "empty"


class ParseError(KotaError):
    """A command line could not be parsed."""

    def __init__(self, kind: ParseErrorKind, message: str = "Empty command") -> None:
        super().__init__(message)
        self.kind = kind
