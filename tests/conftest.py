"""Shared test fixtures for kota."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import pytest

from kota.scripting import ScriptSession
from kota.types import ToolDescriptor

ADD_SCHEMA = {
    "type": "object",
    "properties": {
        "a": {"type": "number"},
        "b": {"type": "number"},
    },
    "required": ["a", "b"],
}


@pytest.fixture
def session() -> Iterator[ScriptSession]:
    """A fresh script session."""
    with ScriptSession() as script_session:
        yield script_session


@pytest.fixture
def compile_lua() -> Callable[[str], bytes]:
    """Compile a chunk that returns a function into bytecode."""

    def _compile(source: str) -> bytes:
        with ScriptSession() as script_session:
            function = script_session.execute(source)
            return script_session.dump(function)

    return _compile


@pytest.fixture
def make_descriptor(compile_lua: Callable[[str], bytes]) -> Callable[..., ToolDescriptor]:
    """Build a Lua tool descriptor from source."""

    def _make(
        source: str,
        name: str = "test_tool",
        description: str = "A test tool",
        parameters: dict | None = None,
    ) -> ToolDescriptor:
        return ToolDescriptor(
            name=name,
            description=description,
            parameters=parameters if parameters is not None else ADD_SCHEMA,
            entry_bytecode=compile_lua(source),
        )

    return _make


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A workspace with an empty .kota/tools directory."""
    (tmp_path / ".kota" / "tools").mkdir(parents=True)
    return tmp_path
