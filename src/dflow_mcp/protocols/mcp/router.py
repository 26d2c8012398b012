"""JsonRpcRouter — resolves JSON-RPC methods and produces response envelopes.

Clients in the wild spell the same MCP method several ways (``tools/list``,
``tools.list``, ``getModels``, ...).  Every accepted spelling is an entry in
:data:`METHOD_ALIASES` mapping to one canonical :class:`MCPMethod`; the router
only ever branches on the canonical value.

The router is stateless across requests.  Every failure becomes a JSON-RPC
error envelope; nothing escapes to the transport.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from dflow_mcp import SERVER_NAME, __version__
from dflow_mcp.api.errors import APIError
from dflow_mcp.protocols.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    ToolExecutionError,
    ToolNotFoundError,
)
from dflow_mcp.protocols.mcp import prompts, resources
from dflow_mcp.protocols.mcp.models import JsonRpcRequest, JsonRpcResponse, ToolResult
from dflow_mcp.tools.catalog import get_tool, list_tools
from dflow_mcp.utils.telemetry import ATTR_RPC_METHOD, get_tracer

if TYPE_CHECKING:
    from dflow_mcp.protocols.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

PROTOCOL_VERSION = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")
SERVER_DESCRIPTION = "Prediction Market Metadata API server for DFlow platform"


class MCPMethod(str, Enum):
    """Canonical methods understood by the router."""

    INITIALIZE = "initialize"
    CONNECT = "connect"
    SERVER_INFO = "server_info"
    LIST_TOOLS = "list_tools"
    LIST_MODELS = "list_models"
    CALL_TOOL = "call_tool"
    DESCRIBE_TOOL = "describe_tool"
    LIST_PROMPTS = "list_prompts"
    GET_PROMPT = "get_prompt"
    LIST_RESOURCES = "list_resources"
    READ_RESOURCE = "read_resource"
    HEALTH = "health"
    PING = "ping"


METHOD_ALIASES: Mapping[str, MCPMethod] = MappingProxyType({
    "initialize": MCPMethod.INITIALIZE,
    "connectMCPServer": MCPMethod.CONNECT,
    "server/info": MCPMethod.SERVER_INFO,
    "tools/list": MCPMethod.LIST_TOOLS,
    "tools.list": MCPMethod.LIST_TOOLS,
    "getModels": MCPMethod.LIST_MODELS,
    "tools/call": MCPMethod.CALL_TOOL,
    "tools.call": MCPMethod.CALL_TOOL,
    "tools/describe": MCPMethod.DESCRIBE_TOOL,
    "tools.describe": MCPMethod.DESCRIBE_TOOL,
    "prompts/list": MCPMethod.LIST_PROMPTS,
    "prompts/get": MCPMethod.GET_PROMPT,
    "resources/list": MCPMethod.LIST_RESOURCES,
    "resources/read": MCPMethod.READ_RESOURCE,
    "health": MCPMethod.HEALTH,
    "ping": MCPMethod.PING,
})


def resolve_method(name: str) -> MCPMethod | None:
    return METHOD_ALIASES.get(name)


def call_target(request: JsonRpcRequest) -> tuple[Any, Any]:
    """Extract ``(name, arguments)`` from a tool-call request.

    Standard clients send ``params: {name, arguments}``; the legacy
    positional dialect sends ``args: [name, arguments]``.
    """
    params = request.named_params()
    if "name" in params:
        return params.get("name"), params.get("arguments")

    positional = request.args
    if positional is None and isinstance(request.params, list):
        positional = request.params
    if positional:
        return positional[0], positional[1] if len(positional) > 1 else None
    return None, None


class JsonRpcRouter:
    """Turns one inbound JSON-RPC message into one response envelope.

    Usage::

        router = JsonRpcRouter(ToolDispatcher(DFlowClient()))
        reply = await router.handle_raw('{"jsonrpc":"2.0","id":1,"method":"tools/list"}')

    With ``tool_errors_as_rpc_errors`` a failed tool call is answered with a
    ``-32603`` error carrying ``{tool, arguments}``; otherwise it is an
    ``isError`` content result, as standard MCP clients expect.
    """

    def __init__(
        self,
        dispatcher: ToolDispatcher,
        *,
        tool_errors_as_rpc_errors: bool = False,
    ) -> None:
        self._dispatcher = dispatcher
        self._rpc_tool_errors = tool_errors_as_rpc_errors
        self._handlers: dict[MCPMethod, Callable[[JsonRpcRequest], Awaitable[Any]]] = {
            MCPMethod.INITIALIZE: self._initialize,
            MCPMethod.CONNECT: self._connect,
            MCPMethod.SERVER_INFO: self._server_info,
            MCPMethod.LIST_TOOLS: self._list_tools,
            MCPMethod.LIST_MODELS: self._list_models,
            MCPMethod.CALL_TOOL: self._call_tool,
            MCPMethod.DESCRIBE_TOOL: self._describe_tool,
            MCPMethod.LIST_PROMPTS: self._list_prompts,
            MCPMethod.GET_PROMPT: self._get_prompt,
            MCPMethod.LIST_RESOURCES: self._list_resources,
            MCPMethod.READ_RESOURCE: self._read_resource,
            MCPMethod.HEALTH: self._health,
            MCPMethod.PING: self._ping,
        }

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    @staticmethod
    def available_methods() -> list[str]:
        return sorted(METHOD_ALIASES)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def handle_raw(self, raw: str | bytes) -> dict[str, Any] | None:
        """Parse *raw* JSON text and handle it."""
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            logger.info("Rejecting unparsable request: %s", exc)
            return JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error", str(exc)).to_wire()
        return await self.handle(payload)

    async def handle(self, payload: Any) -> dict[str, Any] | None:
        """Handle one decoded message; ``None`` means no reply is due."""
        if not isinstance(payload, dict):
            return JsonRpcResponse.failure(
                None, INVALID_REQUEST, "Invalid Request", "Request must be a JSON object"
            ).to_wire()

        raw_id = payload.get("id")
        request_id = raw_id if isinstance(raw_id, (int, float, str)) else None

        try:
            request = JsonRpcRequest.model_validate(payload)
        except ValidationError as exc:
            details = [err["msg"] for err in exc.errors()]
            return JsonRpcResponse.failure(
                request_id, INVALID_REQUEST, "Invalid Request", details
            ).to_wire()

        if request.is_notification:
            logger.debug("Notification received: %s", request.method)
            return None

        method = resolve_method(request.method)
        if method is None:
            return JsonRpcResponse.failure(
                request.id,
                METHOD_NOT_FOUND,
                f"Method not found: {request.method}",
                {"available_methods": self.available_methods()},
            ).to_wire()

        return (await self._invoke(method, request)).to_wire()

    async def _invoke(self, method: MCPMethod, request: JsonRpcRequest) -> JsonRpcResponse:
        with _tracer.start_as_current_span("dflow.rpc.request") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            try:
                result = await self._handlers[method](request)
            except JsonRpcError as exc:
                return JsonRpcResponse.failure(request.id, exc.code, exc.message, exc.data)
            except APIError as exc:
                return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, str(exc))
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unhandled error in %s", request.method)
                return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, "Internal error", str(exc))
        return JsonRpcResponse.success(request.id, result)

    # ------------------------------------------------------------------
    # Payloads
    # ------------------------------------------------------------------

    def server_info(self, protocol_version: str | None = None) -> dict[str, Any]:
        """The ``initialize`` / ``server/info`` payload."""
        version = (
            protocol_version
            if protocol_version in SUPPORTED_PROTOCOL_VERSIONS
            else PROTOCOL_VERSION
        )
        return {
            "protocolVersion": version,
            "capabilities": {
                "tools": {"listChanged": False},
                "prompts": {},
                "resources": {},
            },
            "serverInfo": {
                "name": SERVER_NAME,
                "version": __version__,
                "description": SERVER_DESCRIPTION,
            },
        }

    def tool_list(self) -> list[dict[str, Any]]:
        return [tool.to_wire() for tool in list_tools()]

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _initialize(self, request: JsonRpcRequest) -> dict[str, Any]:
        requested = request.named_params().get("protocolVersion")
        return self.server_info(requested if isinstance(requested, str) else None)

    async def _server_info(self, request: JsonRpcRequest) -> dict[str, Any]:
        return self.server_info()

    async def _connect(self, request: JsonRpcRequest) -> dict[str, Any]:
        server_url = request.args[0] if request.args else None
        return {
            **self.server_info(),
            "connected": True,
            "status": "connected",
            "server_url": server_url,
            "tools": self.tool_list(),
            "prompts": list(prompts.PROMPTS),
            "resources": list(resources.RESOURCES),
        }

    async def _list_tools(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {"tools": self.tool_list()}

    async def _list_models(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {
            "models": [
                {
                    "id": "dflow-prediction-markets",
                    "name": "DFlow Prediction Markets",
                    "description": "Access prediction market events, markets, trades, and live data",
                    "provider": SERVER_NAME,
                    "capabilities": ["tools"],
                }
            ]
        }

    async def _call_tool(self, request: JsonRpcRequest) -> dict[str, Any]:
        name, arguments = call_target(request)
        if not isinstance(name, str) or not name:
            raise JsonRpcError(INVALID_PARAMS, "Missing tool name")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise JsonRpcError(INVALID_PARAMS, "Tool arguments must be an object", {"tool": name})

        try:
            if self._rpc_tool_errors:
                payload = await self._dispatcher.execute(name, arguments)
                return ToolResult.from_json(payload).to_wire()
            result = await self._dispatcher.dispatch(name, arguments)
        except ToolNotFoundError as exc:
            raise JsonRpcError(
                INTERNAL_ERROR, str(exc), {"tool": name, "arguments": arguments}
            ) from exc
        except ToolExecutionError as exc:
            raise JsonRpcError(INTERNAL_ERROR, str(exc), exc.diagnostics()) from exc
        return result.to_wire()

    async def _describe_tool(self, request: JsonRpcRequest) -> dict[str, Any]:
        name, _ = call_target(request)
        if not isinstance(name, str) or not name:
            raise JsonRpcError(INVALID_PARAMS, "Missing tool name")
        try:
            return get_tool(name).to_wire()
        except ToolNotFoundError as exc:
            raise JsonRpcError(INTERNAL_ERROR, str(exc), {"tool": name}) from exc

    async def _list_prompts(self, request: JsonRpcRequest) -> dict[str, Any]:
        return prompts.list_prompts()

    async def _get_prompt(self, request: JsonRpcRequest) -> dict[str, Any]:
        params = request.named_params()
        name = params.get("name")
        if not isinstance(name, str):
            raise JsonRpcError(INVALID_PARAMS, "Missing prompt name")
        arguments = params.get("arguments")
        if arguments is not None and not isinstance(arguments, dict):
            raise JsonRpcError(
                INVALID_PARAMS, "Prompt arguments must be an object", {"prompt": name}
            )
        return prompts.get_prompt(name, arguments)

    async def _list_resources(self, request: JsonRpcRequest) -> dict[str, Any]:
        return resources.list_resources()

    async def _read_resource(self, request: JsonRpcRequest) -> dict[str, Any]:
        uri = request.named_params().get("uri")
        if not isinstance(uri, str):
            raise JsonRpcError(INVALID_PARAMS, "Missing resource uri")
        return await resources.read_resource(self._dispatcher.client, uri)

    async def _health(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "tools_available": len(list_tools()),
            "methods": self.available_methods(),
        }

    async def _ping(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {}
