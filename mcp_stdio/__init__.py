"""Line-delimited JSON-RPC tool server speaking the MCP stdio transport."""

from mcp_stdio.registry import ToolRegistry
from mcp_stdio.server import McpServer, ToolNotFoundError
from mcp_stdio.tools import Tool, ToolSpec
from mcp_stdio.version import VERSION as __version__

__all__ = ["McpServer", "Tool", "ToolNotFoundError", "ToolRegistry", "ToolSpec", "__version__"]
