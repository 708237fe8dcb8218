import io
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mcp_stdio.server import McpServer  # noqa: E402


class DummyTool:
    """
    Minimal tool that returns a fixed result and records every call.
    """

    def __init__(self, name: str, result: Optional[Dict[str, Any]] = None, description: str = ""):
        self.name = name
        self.result = result if result is not None else {"content": [{"type": "text", "text": name}]}
        self.description = description or f"{name} tool"
        self.calls: List[Dict[str, Any]] = []

    def get_name(self) -> str:
        return self.name

    def get_description(self) -> str:
        return self.description

    def get_input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": {}}

    def execute(self, args: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(args)
        return self.result


class FailingTool(DummyTool):
    """Tool whose execute always raises."""

    def __init__(self, name: str = "boom", message: str = "kaboom"):
        super().__init__(name)
        self.message = message

    def execute(self, args: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(args)
        raise RuntimeError(self.message)


def serve(lines: List[str], tools=()) -> List[Dict[str, Any]]:
    """
    Feed raw input lines through a server and return the decoded output lines.
    """
    stdin = io.StringIO("".join(line + "\n" for line in lines))
    stdout = io.StringIO()
    McpServer(tools=tools, stdin=stdin, stdout=stdout, server_info={"name": "test", "version": "0.0.0"}).run()
    return [json.loads(line) for line in stdout.getvalue().splitlines()]


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """
    Keep MCP_* variables from the developer's shell or .env out of the tests.
    """
    for name in ("MCP_SERVER_NAME", "MCP_LOG_LEVEL", "MCP_DB_PATH", "MCP_DATABASES"):
        monkeypatch.delenv(name, raising=False)
    yield
