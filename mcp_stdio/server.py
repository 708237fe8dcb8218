"""
JSON-RPC 2.0 protocol engine for the MCP stdio transport.

Responsibilities
- Read one JSON request per line from the input stream
- Route `initialize`, `notifications/initialized`, `tools/list` and `tools/call`
- Write exactly one response line per request that carries an `id`
- Keep the output stream protocol-only; diagnostics go through `logging`

Requests are handled one at a time, to completion, in the order they are read.
"""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import IO, Any, Callable, Dict, Iterable, Optional

from mcp_stdio.registry import ToolRegistry
from mcp_stdio.tools import Tool
from mcp_stdio.version import get_server_info

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"

#: JSON-RPC "Internal error", used for every fault reported to the client.
INTERNAL_ERROR = -32603


class Method(str, Enum):
    """Methods the server knows how to route."""

    INITIALIZE = "initialize"
    INITIALIZED = "notifications/initialized"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"

    @classmethod
    def parse(cls, value: Any) -> Optional["Method"]:
        """Return the matching method, or None for anything unknown."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


#: Methods that are never answered, even when the client sends an `id`.
NOTIFICATIONS = frozenset({Method.INITIALIZED})


class ToolNotFoundError(LookupError):
    """Raised when `tools/call` names a tool that is not registered."""

    def __init__(self, name: Any) -> None:
        super().__init__(f"Tool not found: {name}")
        self.name = name


@dataclass(slots=True)
class Outcome:
    """Result of dispatching one request: either a payload or an error message."""

    result: Any = None
    error: Optional[str] = None


class McpServer:
    """
    Serve registered tools over line-delimited JSON-RPC.

    Parameters
    ----------
    tools : Iterable[Tool]
        Tools to register, in order. Later tools replace earlier ones with the
        same name.
    stdin, stdout : Optional[IO[str]]
        Text streams for protocol traffic. Default to the process streams,
        resolved when they are first used.
    server_info : Optional[dict]
        `serverInfo` returned from `initialize`; defaults to the package identity.
    """

    def __init__(
        self,
        tools: Iterable[Tool] = (),
        stdin: Optional[IO[str]] = None,
        stdout: Optional[IO[str]] = None,
        server_info: Optional[Dict[str, str]] = None,
    ) -> None:
        self.registry = ToolRegistry(tools)
        self.server_info = server_info or get_server_info()
        self._stdin = stdin
        self._stdout = stdout
        self._handlers: Dict[Method, Callable[[Dict[str, Any]], Any]] = {
            Method.INITIALIZE: self._initialize,
            Method.INITIALIZED: self._acknowledge,
            Method.TOOLS_LIST: self._list_tools,
            Method.TOOLS_CALL: self._call_tool,
        }

    def register_tool(self, tool: Tool) -> None:
        """Register a tool; a tool with the same name is replaced."""
        self.registry.register(tool)

    # --------------------------------------------------------------------- run
    def run(self) -> None:
        """Serve requests until the input stream reaches end-of-file."""
        logger.info("MCP server started with %d tools.", len(self.registry))
        stdin = self._stdin if self._stdin is not None else sys.stdin

        for line in iter(stdin.readline, ""):
            request = self._decode(line)
            if request is None:
                continue
            self.handle_request(request)

        logger.info("Input closed, MCP server stopping.")

    def handle_request(self, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Dispatch a decoded request and write its response, if it gets one.

        Only requests with an `id` key are answered; an explicit `"id": null`
        still counts. Faults are logged even when no response is written.

        Returns
        -------
        Optional[dict]
            The envelope written to the output stream, or None.
        """
        method = Method.parse(request.get("method", ""))
        outcome = self._dispatch(method, request)

        if "id" not in request or method in NOTIFICATIONS:
            return None

        request_id = request["id"]
        if outcome.error is not None:
            envelope = _error_envelope(request_id, outcome.error)
        else:
            envelope = {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": outcome.result}
        return self._write(envelope)

    # ---------------------------------------------------------------- dispatch
    def _dispatch(self, method: Optional[Method], request: Dict[str, Any]) -> Outcome:
        """Run the handler for `method`; unknown methods are a no-op."""
        handler = self._handlers.get(method) if method is not None else None
        if handler is None:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Ignoring unknown method %r", request.get("method"))
            return Outcome()

        try:
            return Outcome(result=handler(_params(request)))
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.error("Error: %s", message)
            logger.debug("Traceback for %s", method.value, exc_info=True)
            return Outcome(error=message)

    def _initialize(self, _params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": []},
            "serverInfo": self.server_info,
        }

    def _acknowledge(self, _params: Dict[str, Any]) -> None:
        logger.debug("Client finished initialization.")

    def _list_tools(self, _params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "tools": [
                {
                    "name": tool.get_name(),
                    "description": tool.get_description(),
                    "inputSchema": tool.get_input_schema(),
                }
                for tool in self.registry.list()
            ]
        }

    def _call_tool(self, params: Dict[str, Any]) -> Any:
        name = params.get("name")
        if name is None:
            name = ""
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}

        tool = self.registry.get(name) if isinstance(name, str) else None
        if tool is None:
            raise ToolNotFoundError(name)

        logger.debug("Calling tool %s", name)
        return tool.execute(arguments)

    # ----------------------------------------------------------------- framing
    @staticmethod
    def _decode(line: str) -> Optional[Dict[str, Any]]:
        """Decode one input line; anything but a non-empty JSON object is dropped."""
        try:
            request = json.loads(line)
        except (ValueError, RecursionError):
            logger.debug("Discarding malformed input line: %.200s", line.rstrip())
            return None
        if not request or not isinstance(request, dict):
            logger.debug("Discarding non-request input line: %.200s", line.rstrip())
            return None
        return request

    def _write(self, envelope: Dict[str, Any]) -> Dict[str, Any]:
        """Serialize `envelope` as one line and flush it to the output stream."""
        try:
            line = _encode(envelope)
        except (TypeError, ValueError, RecursionError) as exc:
            message = f"Result is not JSON serializable: {exc}"
            logger.error("Error: %s", message)
            envelope = _error_envelope(envelope["id"], message)
            line = _encode(envelope)

        stdout = self._stdout if self._stdout is not None else sys.stdout
        stdout.write(line + "\n")
        stdout.flush()
        return envelope


def _params(request: Dict[str, Any]) -> Dict[str, Any]:
    params = request.get("params")
    return params if isinstance(params, dict) else {}


def _error_envelope(request_id: Any, message: str) -> Dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": INTERNAL_ERROR, "message": message},
    }


def _encode(envelope: Dict[str, Any]) -> str:
    # NaN/Infinity are not valid JSON and would break the client's parser.
    return json.dumps(envelope, separators=(",", ":"), allow_nan=False)
