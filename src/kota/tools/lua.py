"""Lua tool implementation."""

from __future__ import annotations

import logging
from typing import Any

from kota.exceptions import (
    CompileError,
    ConversionError,
    InvokeError,
    InvokeStage,
    ScriptError,
)
from kota.scripting import ScriptSession, SessionLimits, to_guest, to_host
from kota.types import StructuredValue, ToolDescriptor

logger = logging.getLogger(__name__)


class LuaTool:
    """A tool backed by a compiled Lua entry function.

    Every invocation runs in a fresh :class:`ScriptSession`, so calls share
    nothing but the immutable descriptor.
    """

    def __init__(
        self, descriptor: ToolDescriptor, limits: SessionLimits | None = None
    ) -> None:
        self._descriptor = descriptor
        self._limits = limits

    @property
    def name(self) -> str:
        return self._descriptor.name

    def describe(self) -> ToolDescriptor:
        return self._descriptor

    def invoke(self, arguments: Any) -> StructuredValue:
        logger.debug("Invoking Lua tool %s", self.name)
        with ScriptSession(limits=self._limits) as session:
            try:
                entry = session.load_bytecode(self._descriptor.entry_bytecode, self.name)
            except CompileError as exc:
                raise InvokeError(self.name, InvokeStage.LOAD, exc) from exc

            try:
                guest_args = to_guest(session, arguments)
            except ConversionError as exc:
                raise InvokeError(self.name, InvokeStage.CONVERT_IN, exc) from exc

            try:
                result = session.call(entry, guest_args)
            except ScriptError as exc:
                raise InvokeError(self.name, InvokeStage.CALL, exc) from exc

            try:
                return to_host(result)
            except ConversionError as exc:
                raise InvokeError(self.name, InvokeStage.CONVERT_OUT, exc) from exc
