"""FastAPI binding — JSON-RPC over HTTP POST with optional SSE framing.

Routes:

- ``POST /`` and ``POST /mcp``: one JSON-RPC message per request.
- ``GET /events``: Server-Sent-Events bootstrap stream.
- ``GET /health``: liveness payload.
- ``GET /``: server info.

Any ``OPTIONS`` request is answered with static CORS headers before routing.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from dflow_mcp import SERVER_NAME, __version__
from dflow_mcp.protocols.errors import PARSE_ERROR
from dflow_mcp.protocols.mcp.models import JsonRpcRequest, JsonRpcResponse
from dflow_mcp.protocols.mcp.router import MCPMethod, call_target, resolve_method

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from dflow_mcp.protocols.mcp.router import JsonRpcRouter

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, x-api-key, Last-Event-ID",
    "Access-Control-Max-Age": "86400",
}

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}

SSEEvent = tuple[str, Any]


# ---------------------------------------------------------------------------
# SSE framing
# ---------------------------------------------------------------------------


def format_sse_event(event: str, data: Any, event_id: str | None = None) -> str:
    """Frame one event: optional ``id:``, ``event:``, one ``data:`` line."""
    frame = ""
    if event_id:
        frame += f"id: {event_id}\n"
    frame += f"event: {event}\n"
    frame += f"data: {json.dumps(data, ensure_ascii=False)}\n\n"
    return frame


def wants_event_stream(accept: str) -> bool:
    """True when the client asked for SSE and did not also accept plain JSON."""
    accept = accept.lower()
    return "text/event-stream" in accept and "application/json" not in accept


def sse_response(events: list[SSEEvent], prefix: str = "msg") -> Response:
    event_id = f"{prefix}-{uuid4().hex[:12]}"
    body = "".join(format_sse_event(name, data, event_id) for name, data in events)
    return Response(content=body, media_type="text/event-stream", headers=SSE_HEADERS)


def _call_context(payload: dict[str, Any]) -> tuple[Any, Any]:
    try:
        return call_target(JsonRpcRequest.model_validate(payload))
    except ValidationError:
        return None, None


def rpc_events(payload: Any, reply: dict[str, Any]) -> list[SSEEvent]:
    """Events for one JSON-RPC exchange; tool calls get lifecycle events."""
    events: list[SSEEvent] = []
    method = payload.get("method") if isinstance(payload, dict) else None
    if isinstance(method, str) and resolve_method(method) is MCPMethod.CALL_TOOL:
        name, arguments = _call_context(payload)
        events.append(("tool_started", {"tool": name, "arguments": arguments}))

        result = reply.get("result") or {}
        failed = "error" in reply or bool(result.get("isError"))
        if failed:
            if "error" in reply:
                error = reply["error"]["message"]
            else:
                error = "\n".join(part.get("text", "") for part in result.get("content", []))
            events.append(("tool_error", {"tool": name, "error": error, "arguments": arguments}))
        else:
            events.append(("tool_result", {"tool": name, "content": result.get("content", [])}))
        events.append(("tool_completed", {"tool": name, "success": not failed}))

    events.append(("message", reply))
    return events


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(router: JsonRpcRouter) -> FastAPI:
    """Build the HTTP app around *router*."""
    app = FastAPI(
        title="DFlow MCP Server",
        description="MCP tools for the Prediction Market Metadata API",
        version=__version__,
    )

    @app.middleware("http")
    async def cors(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    async def rpc(request: Request) -> Response:
        raw = await request.body()
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            failure = JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error", str(exc))
            return JSONResponse(status_code=400, content=failure.to_wire())

        reply = await router.handle(payload)
        if reply is None:
            return Response(status_code=202)
        if wants_event_stream(request.headers.get("accept", "")):
            return sse_response(rpc_events(payload, reply), prefix="rpc")
        return JSONResponse(content=reply)

    app.add_api_route("/", rpc, methods=["POST"])
    app.add_api_route("/mcp", rpc, methods=["POST"])

    @app.get("/events")
    async def events() -> Response:
        tools = router.tool_list()
        info = router.server_info()
        return sse_response(
            [
                ("connected", {"status": "connected", "server": SERVER_NAME}),
                ("tools_available", {"tools": tools, "count": len(tools)}),
                (
                    "ready",
                    {"status": "ready", "capabilities": info["capabilities"], "transport": "sse"},
                ),
            ],
            prefix="sse",
        )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "service": "dflow-mcp",
            "version": __version__,
            "tools": len(router.tool_list()),
        }

    @app.get("/")
    async def index() -> dict[str, Any]:
        return {
            **router.server_info(),
            "endpoints": {"rpc": ["/", "/mcp"], "events": "/events", "health": "/health"},
            "methods": router.available_methods(),
        }

    return app
