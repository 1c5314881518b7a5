"""Python callables exposed as tools."""

from __future__ import annotations

import inspect
from typing import Any, Callable, get_type_hints

from kota.exceptions import InvokeError, InvokeStage
from kota.types import StructuredValue, ToolDescriptor


class NativeTool:
    """A Python function registered as a tool.

    The parameter schema is derived from the function signature unless one
    is given explicitly.
    """

    def __init__(
        self,
        name: str,
        func: Callable[..., Any],
        description: str | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> None:
        self._func = func
        self._descriptor = ToolDescriptor(
            name=name,
            description=description or inspect.getdoc(func) or f"Python function: {name}",
            parameters=parameters if parameters is not None else _build_parameters(func),
            backend="python",
        )

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def func(self) -> Callable[..., Any]:
        return self._func

    def describe(self) -> ToolDescriptor:
        return self._descriptor

    def invoke(self, arguments: Any) -> StructuredValue:
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvokeError(
                self.name,
                InvokeStage.CONVERT_IN,
                TypeError(f"arguments must be an object, got {type(arguments).__name__}"),
            )
        try:
            return self._func(**arguments)
        except Exception as exc:
            raise InvokeError(self.name, InvokeStage.CALL, exc) from exc


def _build_parameters(func: Callable[..., Any]) -> dict[str, Any]:
    """Build JSON Schema parameters from a function signature."""
    sig = inspect.signature(func)
    hints = get_type_hints(func) if hasattr(func, "__annotations__") else {}

    properties: dict[str, Any] = {}
    required: list[str] = []

    for param_name, param in sig.parameters.items():
        if param_name in ("self", "cls"):
            continue
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue

        prop: dict[str, Any] = {"type": _python_type_to_json(hints.get(param_name))}

        if param.default is inspect.Parameter.empty:
            required.append(param_name)
        else:
            prop["default"] = param.default

        properties[param_name] = prop

    parameters: dict[str, Any] = {
        "type": "object",
        "properties": properties,
    }
    if required:
        parameters["required"] = required
    return parameters


def _python_type_to_json(python_type: Any) -> str:
    """Convert Python type hint to JSON Schema type."""
    if python_type is None:
        return "string"

    type_map = {
        str: "string",
        int: "integer",
        float: "number",
        bool: "boolean",
        list: "array",
        dict: "object",
    }

    origin = getattr(python_type, "__origin__", python_type)
    return type_map.get(origin, "string")
