"""Tool models — catalog descriptors and REST routing rules.

A :class:`ToolDescriptor` is what ``tools/list`` advertises; a
:class:`RouteRule` is how the dispatcher turns a call into one REST request.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from dflow_mcp.api.client import render_value
from dflow_mcp.protocols.errors import MissingArgumentError

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class ToolAnnotations(BaseModel):
    """Behavioural hints for calling agents."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str | None = None
    read_only_hint: bool = Field(default=True, alias="readOnlyHint")
    idempotent_hint: bool = Field(default=True, alias="idempotentHint")
    open_world_hint: bool = Field(default=True, alias="openWorldHint")
    destructive_hint: bool = Field(default=False, alias="destructiveHint")


class ToolDescriptor(BaseModel):
    """A tool as advertised by ``tools/list``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    title: str | None = None
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")
    annotations: ToolAnnotations | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize with MCP's camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RestCallSpec(BaseModel):
    """One concrete upstream request derived from a tool call."""

    method: Literal["GET", "POST"]
    path: str
    params: dict[str, Any] = {}


class RouteRule(BaseModel):
    """Static mapping from a tool to its REST endpoint.

    ``{name}`` placeholders in ``path`` are filled from the arguments of the
    same name.  ``forward`` selects which of the remaining arguments are
    sent: ``None`` forwards all of them, a tuple only the listed keys.
    """

    model_config = ConfigDict(frozen=True)

    method: Literal["GET", "POST"] = "GET"
    path: str
    forward: tuple[str, ...] | None = None

    @property
    def path_params(self) -> tuple[str, ...]:
        return tuple(_PLACEHOLDER.findall(self.path))

    def build(self, tool: str, arguments: dict[str, Any]) -> RestCallSpec:
        """Interpolate path segments and select the forwarded arguments."""
        segments = self.path_params
        for key in segments:
            if arguments.get(key) is None:
                raise MissingArgumentError(tool, key)
        path = _PLACEHOLDER.sub(lambda m: render_value(arguments[m.group(1)]), self.path)

        if self.forward is None:
            params = {k: v for k, v in arguments.items() if k not in segments}
        else:
            params = {k: arguments[k] for k in self.forward if k in arguments}
        return RestCallSpec(method=self.method, path=path, params=params)
