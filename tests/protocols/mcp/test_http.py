"""Tests for the FastAPI binding."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from dflow_mcp.api.client import DFlowClient
from dflow_mcp.protocols.dispatcher import ToolDispatcher
from dflow_mcp.protocols.mcp.http import create_app, format_sse_event, wants_event_stream
from dflow_mcp.protocols.mcp.router import JsonRpcRouter

BASE = "https://api.example.test"


def _client(status: int = 200, *, rpc_errors: bool = True) -> TestClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if status >= 400:
            return httpx.Response(status, text="nope")
        return httpx.Response(200, json={"events": []})

    upstream = DFlowClient(BASE, transport=httpx.MockTransport(handler))
    router = JsonRpcRouter(ToolDispatcher(upstream), tool_errors_as_rpc_errors=rpc_errors)
    return TestClient(create_app(router))


def _events(body: str) -> list[tuple[str, object]]:
    parsed = []
    for frame in body.strip().split("\n\n"):
        fields = dict(line.split(": ", 1) for line in frame.splitlines())
        parsed.append((fields["event"], json.loads(fields["data"])))
    return parsed


class TestSSEHelpers:
    def test_format_with_id(self) -> None:
        frame = format_sse_event("ready", {"a": 1}, "sse-1")
        assert frame == 'id: sse-1\nevent: ready\ndata: {"a": 1}\n\n'

    def test_format_without_id(self) -> None:
        assert format_sse_event("x", 1) == "event: x\ndata: 1\n\n"

    @pytest.mark.parametrize(
        ("accept", "expected"),
        [
            ("text/event-stream", True),
            ("application/json, text/event-stream", False),
            ("application/json", False),
            ("", False),
        ],
    )
    def test_wants_event_stream(self, accept: str, expected: bool) -> None:
        assert wants_event_stream(accept) is expected


class TestHttpRoutes:
    def test_preflight(self) -> None:
        response = _client().options("/mcp")
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]
        assert response.headers["access-control-max-age"] == "86400"

    def test_health(self) -> None:
        response = _client().get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["service"] == "dflow-mcp"
        assert body["tools"] == 23
        assert response.headers["access-control-allow-origin"] == "*"

    def test_index(self) -> None:
        body = _client().get("/").json()
        assert body["serverInfo"]["name"] == "dflow-mcp-server"
        assert "tools/call" in body["methods"]

    @pytest.mark.parametrize("path", ["/", "/mcp"])
    def test_rpc_json(self, path: str) -> None:
        response = _client().post(path, json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        assert response.status_code == 200
        assert len(response.json()["result"]["tools"]) == 23

    def test_parse_error_is_400(self) -> None:
        response = _client().post("/mcp", content=b"{broken")
        assert response.status_code == 400
        body = response.json()
        assert body["id"] is None
        assert body["error"]["code"] == -32700

    def test_notification_is_202(self) -> None:
        response = _client().post(
            "/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"}
        )
        assert response.status_code == 202
        assert response.content == b""

    def test_tool_error_defaults_to_rpc_error(self) -> None:
        response = _client(status=500).post(
            "/mcp",
            json={
                "jsonrpc": "2.0",
                "id": 3,
                "method": "tools/call",
                "params": {"name": "get_market", "arguments": {"market_id": "X"}},
            },
        )
        body = response.json()
        assert body["error"]["code"] == -32603
        assert body["error"]["data"]["tool"] == "get_market"


class TestHttpSSE:
    def test_events_bootstrap(self) -> None:
        response = _client().get("/events")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"
        names = [name for name, _ in _events(response.text)]
        assert names == ["connected", "tools_available", "ready"]

    def test_tool_call_lifecycle(self) -> None:
        response = _client().post(
            "/mcp",
            json={
                "jsonrpc": "2.0",
                "id": 7,
                "method": "tools/call",
                "params": {"name": "get_events", "arguments": {"limit": 1}},
            },
            headers={"Accept": "text/event-stream"},
        )
        events = _events(response.text)
        assert [name for name, _ in events] == [
            "tool_started",
            "tool_result",
            "tool_completed",
            "message",
        ]
        assert events[0][1] == {"tool": "get_events", "arguments": {"limit": 1}}
        assert events[2][1] == {"tool": "get_events", "success": True}
        message = events[-1][1]
        assert isinstance(message, dict)
        assert message["id"] == 7

    def test_tool_call_error_event(self) -> None:
        response = _client(status=404).post(
            "/mcp",
            json={
                "jsonrpc": "2.0",
                "id": 8,
                "method": "tools/call",
                "params": {"name": "get_market", "arguments": {"market_id": "X"}},
            },
            headers={"Accept": "text/event-stream"},
        )
        names = [name for name, _ in _events(response.text)]
        assert names == ["tool_started", "tool_error", "tool_completed", "message"]

    def test_other_methods_single_message(self) -> None:
        response = _client().post(
            "/mcp",
            json={"jsonrpc": "2.0", "id": 1, "method": "ping"},
            headers={"Accept": "text/event-stream"},
        )
        assert [name for name, _ in _events(response.text)] == ["message"]
