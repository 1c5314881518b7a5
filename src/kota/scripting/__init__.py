"""Lua scripting: isolated sessions and the host/guest value bridge."""

from kota.scripting.bridge import MAX_DEPTH, MAX_NODES, to_guest, to_host
from kota.scripting.session import (
    ScriptSession,
    SessionLimits,
    environ_lookup,
    is_function,
    is_table,
)

__all__ = [
    "MAX_DEPTH",
    "MAX_NODES",
    "ScriptSession",
    "SessionLimits",
    "environ_lookup",
    "is_function",
    "is_table",
    "to_guest",
    "to_host",
]
