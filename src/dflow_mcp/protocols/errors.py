"""Shared error types for the protocol layer."""

from __future__ import annotations

from typing import Any

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""


class ToolNotFoundError(ProtocolError):
    """Requested tool does not exist in the catalog."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class MissingArgumentError(ProtocolError):
    """A path-segment argument required by the route was not supplied."""

    def __init__(self, tool: str, argument: str) -> None:
        self.tool = tool
        self.argument = argument
        super().__init__(f"Missing required argument '{argument}' for {tool}")


class ToolExecutionError(ProtocolError):
    """A tool invocation failed while calling the upstream API."""

    def __init__(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        detail: str = "",
    ) -> None:
        self.name = name
        self.arguments = dict(arguments or {})
        self.detail = detail
        super().__init__(detail or f"Tool execution failed: {name}")

    def diagnostics(self) -> dict[str, Any]:
        """Context attached to JSON-RPC error responses."""
        return {"tool": self.name, "arguments": self.arguments}


class JsonRpcError(ProtocolError):
    """Carries a JSON-RPC error code out of a method handler."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(message)
