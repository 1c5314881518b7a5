"""Isolated Lua execution sessions.

Each :class:`ScriptSession` owns a private Lua 5.4 state. Guest code never
runs against the state's real globals: it gets an environment table built
from nothing, holding only pure-computation functions and libraries, plus
an optional read-only ``os.getenv`` shim. Python objects are never reachable
from guest code.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from lupa.lua54 import LuaError, LuaRuntime, lua_type

from kota.exceptions import CompileError, ScriptError

logger = logging.getLogger(__name__)

EnvLookup = Callable[[str], "str | None"]

# Runs once per session against the real globals; returns the host helpers.
_HOST_PRELUDE = """
local assert, error, ipairs, next, pairs = assert, error, ipairs, next, pairs
local load, type = load, type
local rawget, running = rawget, coroutine.running
local string_dump, getupvalue, sethook = string.dump, debug.getupvalue, debug.sethook

local function copy(lib)
  local out = {}
  for key, value in pairs(lib) do
    out[key] = value
  end
  return out
end

local function new_env(getenv)
  local env = {
    assert = assert, error = error, ipairs = ipairs, next = next,
    pairs = pairs, pcall = pcall, select = select, tonumber = tonumber,
    tostring = tostring, type = type, xpcall = xpcall,
    rawequal = rawequal, rawget = rawget, rawlen = rawlen, rawset = rawset,
    getmetatable = getmetatable, setmetatable = setmetatable,
    string = copy(string), table = copy(table), math = copy(math),
    utf8 = copy(utf8), coroutine = copy(coroutine),
    _VERSION = _VERSION,
  }
  if getenv ~= nil then
    env.os = {
      getenv = function(name)
        if type(name) ~= "string" then
          return nil
        end
        return getenv(name)
      end,
    }
  end
  env._G = env
  return env
end

local function load_chunk(chunk, name, mode, env)
  local fn, err = load(chunk, name, mode, env)
  if fn == nil then
    error(err, 0)
  end
  return fn
end

local function dump_function(fn)
  if type(fn) ~= "function" then
    error("expected a function, got " .. type(fn), 0)
  end
  local index = 1
  while true do
    local name = getupvalue(fn, index)
    if name == nil then
      break
    end
    if name ~= "_ENV" then
      error("function captures local '" .. name .. "'; only globals survive compilation", 0)
    end
    index = index + 1
  end
  return string_dump(fn)
end

local function new_collector()
  local items = {}
  local function collect(value)
    items[#items + 1] = { value = value }
  end
  return collect, items
end

-- Once spent, the budget fires on every instruction of the main thread and of
-- the thread that ran out, so pcall cannot swallow it.
local function set_budget(count)
  local main = running()
  local function exhausted()
    sethook(main, exhausted, "", 1)
    sethook(exhausted, "", 1)
    error("instruction budget exceeded", 0)
  end
  sethook(main, exhausted, "", count)
end

return new_env, load_chunk, dump_function, new_collector, set_budget, sethook, rawget
"""


@dataclass
class SessionLimits:
    """Execution limits applied to guest calls."""

    max_instructions: int | None = None


def environ_lookup(environ: Mapping[str, str] | None = None) -> EnvLookup:
    """Build an environment lookup over ``environ`` (the process env by default)."""
    source = os.environ if environ is None else environ

    def lookup(name: str) -> str | None:
        return source.get(name)

    return lookup


def _deny_attribute_access(obj: Any, attr_name: Any, is_setting: bool) -> Any:
    raise AttributeError("attribute access is not available to scripts")


def _error_message(exc: BaseException) -> str:
    message = exc.args[0] if exc.args else str(exc)
    if isinstance(message, bytes):
        return message.decode("utf-8", errors="replace")
    return str(message)


def is_table(value: Any) -> bool:
    return lua_type(value) == "table"


def is_function(value: Any) -> bool:
    return lua_type(value) == "function"


class ScriptSession:
    """A fresh, isolated Lua interpreter.

    Strings cross the boundary as ``bytes``; :mod:`kota.scripting.bridge`
    handles text encoding.
    """

    def __init__(
        self,
        limits: SessionLimits | None = None,
        env_lookup: EnvLookup | None = None,
    ) -> None:
        self._limits = limits or SessionLimits()
        self._lua = LuaRuntime(
            encoding=None,
            register_eval=False,
            register_builtins=False,
            attribute_filter=_deny_attribute_access,
        )
        (
            new_env,
            self._load_chunk,
            self._dump_function,
            self._new_collector,
            self._set_budget,
            self._sethook,
            self._rawget,
        ) = self._lua.execute(_HOST_PRELUDE.encode("utf-8"))
        getenv = self._wrap_env_lookup(env_lookup) if env_lookup else None
        self._env = new_env(getenv)

    def __enter__(self) -> "ScriptSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def env(self) -> Any:
        """The guest global environment table."""
        return self._env

    def close(self) -> None:
        """Drop the interpreter state."""
        self._env = None
        self._lua = None

    def table(self) -> Any:
        """Create an empty guest table."""
        return self._lua.table()

    def set_global(self, name: str, value: Any) -> None:
        self._env[name.encode("utf-8")] = value

    def get_global(self, name: str) -> Any:
        return self._env[name.encode("utf-8")]

    def field(self, table: Any, name: str) -> Any:
        """Read ``table[name]`` without running metamethods."""
        try:
            return self._rawget(table, name.encode("utf-8"))
        except LuaError as exc:
            raise ScriptError(_error_message(exc)) from exc

    def collector(self) -> tuple[Any, Any]:
        """Return a guest function that records each argument, and its record table.

        Each record is a table ``{value = <argument>}`` so that ``nil`` arguments
        still count as calls.
        """
        return self._new_collector()

    def load_source(self, source: str | bytes, name: str = "chunk") -> Any:
        """Compile guest source text into a callable chunk."""
        if isinstance(source, str):
            source = source.encode("utf-8")
        return self._load(source, name, b"t")

    def load_bytecode(self, bytecode: bytes, name: str = "entry") -> Any:
        """Load a function previously produced by :meth:`dump`."""
        if not bytecode:
            raise CompileError(f"{name}: empty bytecode")
        return self._load(bytecode, name, b"b")

    def dump(self, function: Any) -> bytes:
        """Serialize a guest function into portable bytecode."""
        try:
            return bytes(self._dump_function(function))
        except LuaError as exc:
            raise CompileError(_error_message(exc)) from exc

    def execute(self, source: str | bytes, name: str = "chunk") -> Any:
        """Compile and run a chunk, returning its first result."""
        chunk = self.load_source(source, name)
        return self.call(chunk)

    def call(self, function: Any, *args: Any) -> Any:
        """Call a guest function, returning its first result (``None`` if none)."""
        budget = self._limits.max_instructions
        if budget:
            self._set_budget(budget)
        try:
            result = function(*args)
        except LuaError as exc:
            raise ScriptError(_error_message(exc)) from exc
        finally:
            if budget:
                # debug.sethook is a C function, so clearing never trips the hook
                self._sethook()
        if isinstance(result, tuple):
            return result[0] if result else None
        return result

    def _load(self, chunk: bytes, name: str, mode: bytes) -> Any:
        try:
            return self._load_chunk(chunk, f"={name}".encode("utf-8"), mode, self._env)
        except LuaError as exc:
            raise CompileError(_error_message(exc)) from exc

    @staticmethod
    def _wrap_env_lookup(env_lookup: EnvLookup) -> Callable[[bytes], bytes | None]:
        def getenv(name: bytes) -> bytes | None:
            value = env_lookup(name.decode("utf-8", errors="replace"))
            if value is None:
                return None
            return value.encode("utf-8")

        return getenv
