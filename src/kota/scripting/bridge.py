"""Conversion between host documents and Lua values.

Host documents are JSON-shaped Python values (``None``, ``bool``, ``int``,
``float``, ``str``, ``list``, ``dict`` with string keys). Lua has a single
table type for both arrays and maps, so :func:`to_host` infers the shape:
a table whose keys are exactly ``1..N`` is an array, anything else is a map.
An empty table therefore converts to an empty ``dict``.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from kota.exceptions import ConversionError, ConversionErrorKind
from kota.scripting.session import ScriptSession, is_table
from kota.types import StructuredValue

logger = logging.getLogger(__name__)

MAX_DEPTH = 64
MAX_NODES = 1_000_000

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class _Walk:
    """Depth and node limits for one conversion.

    Shared subtables are expanded every time they are reached, so the node
    count bounds the work even for acyclic values under the depth limit.
    """

    __slots__ = ("max_depth", "max_nodes", "nodes")

    def __init__(self, max_depth: int, max_nodes: int) -> None:
        self.max_depth = max_depth
        self.max_nodes = max_nodes
        self.nodes = 0

    def enter(self, depth: int) -> None:
        if depth > self.max_depth:
            raise ConversionError(
                ConversionErrorKind.TOO_DEEP,
                f"value nested deeper than {self.max_depth} levels (cyclic table?)",
            )
        self.nodes += 1
        if self.nodes > self.max_nodes:
            raise ConversionError(
                ConversionErrorKind.TOO_LARGE,
                f"value has more than {self.max_nodes} elements",
            )


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise ConversionError(
            ConversionErrorKind.NON_FINITE,
            f"{value!r} has no document representation",
        )
    return value


def to_guest(
    session: ScriptSession,
    value: Any,
    *,
    max_depth: int = MAX_DEPTH,
    max_nodes: int = MAX_NODES,
) -> Any:
    """Convert a host document into a value for ``session``."""
    return _to_guest(session, value, 0, _Walk(max_depth, max_nodes))


def _to_guest(session: ScriptSession, value: Any, depth: int, walk: _Walk) -> Any:
    walk.enter(depth)

    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
        try:
            return _finite(float(value))
        except OverflowError as exc:
            raise ConversionError(
                ConversionErrorKind.NON_FINITE, f"integer {value} is out of range"
            ) from exc
    if isinstance(value, float):
        return _finite(value)
    if isinstance(value, str):
        return value.encode("utf-8")

    if isinstance(value, (list, tuple)):
        table = session.table()
        for index, item in enumerate(value, start=1):
            table[index] = _to_guest(session, item, depth + 1, walk)
        return table

    if isinstance(value, dict):
        table = session.table()
        for key, item in value.items():
            if not isinstance(key, str):
                raise ConversionError(
                    ConversionErrorKind.UNSUPPORTED_KEY,
                    f"map keys must be strings, got {type(key).__name__}",
                )
            table[key.encode("utf-8")] = _to_guest(session, item, depth + 1, walk)
        return table

    raise ConversionError(
        ConversionErrorKind.UNSUPPORTED_TYPE,
        f"cannot convert {type(value).__name__} to a script value",
    )


def to_host(
    value: Any, *, max_depth: int = MAX_DEPTH, max_nodes: int = MAX_NODES
) -> StructuredValue:
    """Convert a Lua value into a host document."""
    return _to_host(value, 0, _Walk(max_depth, max_nodes))


def _to_host(value: Any, depth: int, walk: _Walk) -> StructuredValue:
    walk.enter(depth)

    if value is None or isinstance(value, (bool, int)):
        return value
    if isinstance(value, float):
        return _finite(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value

    if is_table(value):
        items = list(value.items())
        if _is_sequence(items):
            by_index = dict(items)
            return [
                _to_host(by_index[index], depth + 1, walk)
                for index in range(1, len(items) + 1)
            ]

        result: dict[str, StructuredValue] = {}
        for key, item in items:
            name = _map_key(key)
            if name is None:
                logger.debug("Dropping table key of unsupported type: %r", key)
                continue
            result[name] = _to_host(item, depth + 1, walk)
        return result

    # functions, coroutines and userdata have no document form
    return None


def _is_sequence(items: list[tuple[Any, Any]]) -> bool:
    if not items:
        return False
    highest = 0
    for key, _ in items:
        if type(key) is not int or key < 1:
            return False
        highest = max(highest, key)
    return highest == len(items)


def _map_key(key: Any) -> str | None:
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    if isinstance(key, str):
        return key
    if type(key) is int:
        return str(key)
    return None
