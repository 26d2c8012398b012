"""Protocol layer: tool dispatch and the MCP JSON-RPC surface."""

from dflow_mcp.protocols.errors import (
    JsonRpcError,
    MissingArgumentError,
    ProtocolError,
    ToolExecutionError,
    ToolNotFoundError,
)

__all__ = [
    "JsonRpcError",
    "MissingArgumentError",
    "ProtocolError",
    "ToolExecutionError",
    "ToolNotFoundError",
]
