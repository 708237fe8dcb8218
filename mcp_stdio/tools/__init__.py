"""Tool contract and helpers shared by every tool the server exposes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Protocol, runtime_checkable


class ToolFn(Protocol):
    """Callable signature every function-backed tool must follow."""

    def __call__(self, args: Dict[str, Any]) -> Dict[str, Any]:
        ...


@runtime_checkable
class Tool(Protocol):
    """
    Contract for a tool exposed over `tools/list` and `tools/call`.

    `get_name` is the registry key and must be stable for the lifetime of the
    instance. `get_description` and `get_input_schema` are forwarded to the
    client as-is; the server never validates arguments against the schema.
    `execute` may raise, in which case the client receives an error envelope
    carrying the exception message.
    """

    def get_name(self) -> str:
        ...

    def get_description(self) -> str:
        ...

    def get_input_schema(self) -> Dict[str, Any]:
        ...

    def execute(self, args: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(slots=True)
class ToolSpec:
    """Metadata wrapper that exposes a plain function through the `Tool` contract."""

    name: str
    fn: ToolFn
    description: str = ""
    input_schema: Dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    def get_name(self) -> str:
        return self.name

    def get_description(self) -> str:
        return self.description

    def get_input_schema(self) -> Dict[str, Any]:
        return self.input_schema

    def execute(self, args: Dict[str, Any]) -> Dict[str, Any]:
        return self.fn(args)


def text_result(text: str) -> Dict[str, Any]:
    """Build a successful tool result with a single text block."""
    return {"content": [{"type": "text", "text": text}]}


def error_result(text: str) -> Dict[str, Any]:
    """Build a handled (non-fatal) tool error the client can show to the model."""
    return {"isError": True, "content": [{"type": "text", "text": text}]}
