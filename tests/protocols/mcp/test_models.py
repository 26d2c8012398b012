"""Tests for MCP JSON-RPC models."""

from __future__ import annotations

from dflow_mcp.protocols.mcp.models import JsonRpcRequest, JsonRpcResponse, ToolResult


class TestJsonRpcRequest:
    def test_standard_request(self) -> None:
        req = JsonRpcRequest.model_validate(
            {"jsonrpc": "2.0", "id": 1, "method": "tools/list", "params": {"a": 1}}
        )
        assert req.id == 1
        assert req.named_params() == {"a": 1}
        assert req.is_notification is False

    def test_legacy_dialect(self) -> None:
        req = JsonRpcRequest.model_validate(
            {"type": "rpc", "method": "tools/call", "args": ["get_events", {}], "id": "x"}
        )
        assert req.type == "rpc"
        assert req.args == ["get_events", {}]
        assert req.named_params() == {}

    def test_notification(self) -> None:
        req = JsonRpcRequest.model_validate({"method": "notifications/initialized"})
        assert req.is_notification is True

    def test_extra_keys_kept(self) -> None:
        req = JsonRpcRequest.model_validate({"method": "ping", "trace": "abc"})
        assert req.model_extra == {"trace": "abc"}


class TestJsonRpcResponse:
    def test_success_wire(self) -> None:
        wire = JsonRpcResponse.success(3, {"x": 1}).to_wire()
        assert wire == {"jsonrpc": "2.0", "id": 3, "result": {"x": 1}}

    def test_fractional_id_round_trips(self) -> None:
        request = JsonRpcRequest.model_validate({"jsonrpc": "2.0", "id": 1.5, "method": "ping"})
        assert request.id == 1.5
        assert JsonRpcResponse.success(request.id, {}).to_wire()["id"] == 1.5

    def test_success_with_none_result(self) -> None:
        assert JsonRpcResponse.success(1, None).to_wire()["result"] == {}

    def test_failure_wire_keeps_null_id(self) -> None:
        wire = JsonRpcResponse.failure(None, -32601, "Method not found: x").to_wire()
        assert wire == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32601, "message": "Method not found: x"},
        }
        assert "result" not in wire


class TestToolResult:
    def test_from_json_keeps_unicode(self) -> None:
        result = ToolResult.from_json({"title": "Élection"})
        assert "Élection" in result.text

    def test_error_alias(self) -> None:
        wire = ToolResult.from_text("bad", is_error=True).to_wire()
        assert wire["isError"] is True
        assert wire["content"] == [{"type": "text", "text": "bad"}]
