"""Name-to-tool lookup table owned by the protocol engine."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from mcp_stdio.tools import Tool


class ToolRegistry:
    """In-memory registry keyed by tool name, preserving registration order."""

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: Dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Register a tool, replacing any previous tool with the same name."""
        self._tools[tool.get_name()] = tool

    def list(self) -> List[Tool]:
        """Return registered tools in registration order."""
        return list(self._tools.values())

    def get(self, name: str) -> Optional[Tool]:
        """Return the tool registered under exactly `name`, if any."""
        return self._tools.get(name)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
