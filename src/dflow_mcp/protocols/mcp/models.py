"""MCP models — JSON-RPC 2.0 messages and tool-call payloads.

Inbound requests are parsed leniently: besides the standard ``params``
object, the legacy positional dialect (``{"type": "rpc", "args": [...]}``)
is accepted and any unknown top-level keys are kept.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------

RequestId = int | float | str | None


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message."""

    model_config = ConfigDict(extra="allow")

    jsonrpc: str = "2.0"
    method: str
    id: RequestId = None
    params: dict[str, Any] | list[Any] | None = None
    args: list[Any] | None = None
    type: str | None = None

    @property
    def is_notification(self) -> bool:
        return self.method.startswith("notifications/")

    def named_params(self) -> dict[str, Any]:
        """``params`` as a mapping; positional params yield an empty dict."""
        return self.params if isinstance(self.params, dict) else {}


class JsonRpcErrorBody(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = "2.0"
    id: RequestId = None
    result: Any = None
    error: JsonRpcErrorBody | None = None

    @classmethod
    def success(cls, request_id: RequestId, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: RequestId,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcErrorBody(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize with ``id`` always present and exactly one of result/error."""
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            wire["error"] = self.error.model_dump(exclude_none=True)
        else:
            wire["result"] = self.result if self.result is not None else {}
        return wire


# ---------------------------------------------------------------------------
# MCP tool-call payloads
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """Plain text content block."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """The MCP ``tools/call`` result envelope."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent] = []
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def from_text(cls, text: str, *, is_error: bool = False) -> ToolResult:
        """Create a ToolResult with a single text block."""
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @classmethod
    def from_json(cls, payload: Any) -> ToolResult:
        """Pretty-print a JSON value into a single text block."""
        return cls.from_text(json.dumps(payload, indent=2, ensure_ascii=False))

    @property
    def text(self) -> str:
        return "\n".join(part.text for part in self.content)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
