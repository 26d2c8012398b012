"""MCP protocol — JSON-RPC router and its stdio/HTTP transports."""

from dflow_mcp.protocols.mcp.models import JsonRpcRequest, JsonRpcResponse, ToolResult
from dflow_mcp.protocols.mcp.router import JsonRpcRouter, MCPMethod, resolve_method
from dflow_mcp.protocols.mcp.transport import HttpTransport, StdioTransport, Transport

__all__ = [
    "HttpTransport",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcRouter",
    "MCPMethod",
    "StdioTransport",
    "ToolResult",
    "Transport",
    "resolve_method",
]
