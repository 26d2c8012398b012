"""Tests for ToolDispatcher."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from dflow_mcp.api.client import DFlowClient
from dflow_mcp.api.errors import UpstreamError
from dflow_mcp.protocols.dispatcher import ToolDispatcher
from dflow_mcp.protocols.errors import ToolExecutionError, ToolNotFoundError

BASE = "https://api.example.test"


def _dispatcher(
    payload: object = None, status: int = 200
) -> tuple[ToolDispatcher, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if status >= 400:
            return httpx.Response(status, text="boom")
        return httpx.Response(status, json=payload if payload is not None else {"ok": True})

    client = DFlowClient(BASE, transport=httpx.MockTransport(handler))
    return ToolDispatcher(client), seen


class TestDispatcherRouting:
    async def test_get_event_with_nested_markets(self) -> None:
        dispatcher, seen = _dispatcher({"ticker": "US-PRESIDENT-2024"})
        result = await dispatcher.execute(
            "get_event", {"event_id": "US-PRESIDENT-2024", "withNestedMarkets": True}
        )

        assert result == {"ticker": "US-PRESIDENT-2024"}
        assert len(seen) == 1
        assert str(seen[0].url) == f"{BASE}/api/v1/event/US-PRESIDENT-2024?withNestedMarkets=true"

    async def test_get_event_ignores_unlisted_arguments(self) -> None:
        dispatcher, seen = _dispatcher()
        await dispatcher.execute("get_event", {"event_id": "E", "bogus": 1})
        assert seen[0].url.query == b""

    async def test_markets_batch_posts_body(self) -> None:
        dispatcher, seen = _dispatcher({"markets": []})
        await dispatcher.execute("get_markets_batch", {"tickers": ["A", "B"]})

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/v1/markets/batch"
        assert json.loads(request.content) == {"tickers": ["A", "B"]}

    async def test_live_data_by_mint_sends_no_query(self) -> None:
        dispatcher, seen = _dispatcher()
        await dispatcher.execute("get_live_data_by_mint", {"mint_address": "MINT"})
        assert str(seen[0].url) == f"{BASE}/api/v1/live_data/by-mint/MINT"

    async def test_live_data_milestones_comma_joined(self) -> None:
        dispatcher, seen = _dispatcher()
        await dispatcher.execute("get_live_data", {"milestoneIds": ["m1", "m2"]})
        assert seen[0].url.params["milestoneIds"] == "m1,m2"

    async def test_optional_none_values_omitted(self) -> None:
        dispatcher, seen = _dispatcher()
        await dispatcher.execute("get_events", {"limit": 5, "cursor": None})
        assert seen[0].url.query == b"limit=5"

    def test_plan(self) -> None:
        dispatcher = ToolDispatcher(MagicMock())
        call = dispatcher.plan("get_market", {"market_id": "M"})
        assert (call.method, call.path, call.params) == ("GET", "/api/v1/market/M", {})

    def test_has_tool(self) -> None:
        dispatcher = ToolDispatcher(MagicMock())
        assert dispatcher.has_tool("get_events")
        assert not dispatcher.has_tool("nope")


class TestDispatcherErrors:
    async def test_unknown_tool_makes_no_call(self) -> None:
        client = MagicMock()
        client.call = AsyncMock()
        dispatcher = ToolDispatcher(client)

        with pytest.raises(ToolNotFoundError):
            await dispatcher.execute("nope", {})
        client.call.assert_not_awaited()

    async def test_upstream_error_carries_diagnostics(self) -> None:
        dispatcher, _ = _dispatcher(status=500)
        with pytest.raises(ToolExecutionError) as info:
            await dispatcher.execute("get_market", {"market_id": "X"})

        assert "HTTP 500: boom" in str(info.value)
        assert info.value.diagnostics() == {
            "tool": "get_market",
            "arguments": {"market_id": "X"},
        }
        assert isinstance(info.value.__cause__, UpstreamError)

    async def test_missing_path_argument_makes_no_call(self) -> None:
        client = MagicMock()
        client.call = AsyncMock()
        dispatcher = ToolDispatcher(client)

        with pytest.raises(ToolExecutionError, match="market_id"):
            await dispatcher.execute("get_market", {})
        client.call.assert_not_awaited()


class TestDispatcherEnvelope:
    async def test_success_is_pretty_json(self) -> None:
        dispatcher, _ = _dispatcher({"a": 1})
        result = await dispatcher.dispatch("get_events", {})

        assert result.is_error is False
        assert result.text == json.dumps({"a": 1}, indent=2)
        assert result.to_wire() == {
            "content": [{"type": "text", "text": result.text}],
            "isError": False,
        }

    async def test_failure_is_error_content(self) -> None:
        dispatcher, _ = _dispatcher(status=404)
        result = await dispatcher.dispatch("get_market", {"market_id": "X"})

        assert result.is_error is True
        assert result.text.startswith("Error calling get_market: HTTP 404")

    async def test_unknown_tool_propagates(self) -> None:
        dispatcher, _ = _dispatcher()
        with pytest.raises(ToolNotFoundError):
            await dispatcher.dispatch("nope", {})
