import io
import json
from pathlib import Path

from mcp_stdio import cli
from mcp_stdio.config import Settings
from mcp_stdio.tools.sql_tool import QueryDatabaseTool


class NoisyTool:
    def get_name(self):
        return "noisy"

    def get_description(self):
        return "prints to stdout"

    def get_input_schema(self):
        return {"type": "object", "properties": {}}

    def execute(self, args):
        print("stray output")
        return {"content": [{"type": "text", "text": "done"}]}


def test_build_tools_without_database():
    assert cli.build_tools(Settings()) == []


def test_build_tools_with_database(tmp_path: Path):
    tools = cli.build_tools(Settings(db_path=tmp_path / "app.sqlite"))
    assert len(tools) == 1
    assert isinstance(tools[0], QueryDatabaseTool)


def test_main_serves_stdio_and_keeps_stdout_clean(monkeypatch):
    stdin = io.StringIO(
        '{"method":"initialize","id":1}\n'
        '{"method":"notifications/initialized"}\n'
        '{"method":"tools/call","id":2,"params":{"name":"noisy","arguments":{}}}\n'
    )
    stdout = io.StringIO()
    stderr = io.StringIO()
    monkeypatch.setattr("sys.stdin", stdin)
    monkeypatch.setattr("sys.stdout", stdout)
    monkeypatch.setattr("sys.stderr", stderr)
    monkeypatch.setattr(cli, "build_tools", lambda settings: [NoisyTool()])

    assert cli.main(Settings(server_name="host-app")) == 0

    lines = [json.loads(line) for line in stdout.getvalue().splitlines()]
    assert [line["id"] for line in lines] == [1, 2]
    assert lines[0]["result"]["serverInfo"]["name"] == "host-app"
    assert lines[1]["result"]["content"][0]["text"] == "done"
    assert "stray output" in stderr.getvalue()


def test_main_drops_invalid_utf8_lines(monkeypatch):
    raw = b"\xff\xfe garbage\n" b'{"method":"tools/list","id":1}\n'
    stdin = io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8", errors="strict")
    stdout = io.StringIO()
    monkeypatch.setattr("sys.stdin", stdin)
    monkeypatch.setattr("sys.stdout", stdout)
    monkeypatch.setattr("sys.stderr", io.StringIO())

    assert cli.main(Settings()) == 0

    assert [json.loads(line) for line in stdout.getvalue().splitlines()] == [
        {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}
    ]
