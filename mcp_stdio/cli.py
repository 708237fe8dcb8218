"""
Command entry-point for the MCP stdio server.

Responsibilities
- Load settings from the environment (and .env)
- Build the tool list the host exposes
- Keep stdout reserved for JSON-RPC traffic while the server runs

Editor integration (e.g. VS Code settings.json):

    "mcp.servers": {
        "my-app": {"command": "mcp-stdio-server", "env": {"MCP_DB_PATH": "app.sqlite"}}
    }
"""
from __future__ import annotations

import io
import logging
import sys
from contextlib import redirect_stdout
from typing import IO, List, Optional

from mcp_stdio.config import Settings, load_settings
from mcp_stdio.server import McpServer
from mcp_stdio.tools import Tool
from mcp_stdio.tools.sql_tool import QueryDatabaseTool
from mcp_stdio.version import get_server_info

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Tool registry assembly
# --------------------------------------------------------------------------- #

def build_tools(settings: Settings) -> List[Tool]:
    """Return the tools to expose, in the order clients should list them."""
    tools: List[Tool] = []
    if settings.db_path is not None or settings.databases:
        tools.append(QueryDatabaseTool(db_path=settings.db_path, databases=settings.databases))
    return tools


def _protocol_stdin() -> IO[str]:
    """
    Return stdin decoded as UTF-8 with undecodable bytes replaced.

    A line with invalid UTF-8 then fails JSON decoding and is dropped,
    instead of raising out of `readline()`.
    """
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is None:
        return sys.stdin
    return io.TextIOWrapper(buffer, encoding="utf-8", errors="replace")


def build_server(settings: Settings) -> McpServer:
    return McpServer(
        tools=build_tools(settings),
        stdin=_protocol_stdin(),
        stdout=sys.stdout,
        server_info=get_server_info(settings.server_name),
    )


def main(settings: Optional[Settings] = None) -> int:
    """Run the server until stdin closes."""
    settings = settings or load_settings()
    # basicConfig writes to stderr; stdout must carry JSON-RPC only.
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    server = build_server(settings)
    # Stray print() calls from tools would corrupt the protocol stream.
    with redirect_stdout(sys.stderr):
        server.run()
    return 0
