"""ToolDispatcher — routes a tool call to exactly one upstream REST request."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from dflow_mcp.api.errors import APIError
from dflow_mcp.protocols.errors import MissingArgumentError, ToolExecutionError, ToolNotFoundError
from dflow_mcp.protocols.mcp.models import ToolResult
from dflow_mcp.tools.routes import ROUTES
from dflow_mcp.utils.telemetry import (
    ATTR_HTTP_METHOD,
    ATTR_HTTP_PATH,
    ATTR_TOOL_ERROR,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from dflow_mcp.api.client import DFlowClient
    from dflow_mcp.tools.models import RestCallSpec, RouteRule

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class ToolDispatcher:
    """Maps tool names to REST calls through a static routing table.

    Usage::

        dispatcher = ToolDispatcher(DFlowClient())
        payload = await dispatcher.execute("get_events", {"limit": 5})
        result = await dispatcher.dispatch("get_market", {"market_id": "X"})
    """

    def __init__(
        self,
        client: DFlowClient,
        routes: Mapping[str, RouteRule] = ROUTES,
    ) -> None:
        self._client = client
        self._routes = routes

    @property
    def client(self) -> DFlowClient:
        return self._client

    def has_tool(self, name: str) -> bool:
        return name in self._routes

    def plan(self, name: str, arguments: dict[str, Any] | None = None) -> RestCallSpec:
        """Resolve the REST call for *name* without performing it."""
        route = self._routes.get(name)
        if route is None:
            raise ToolNotFoundError(name)
        return route.build(name, dict(arguments or {}))

    async def execute(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Perform the call and return the raw JSON result.

        Raises :class:`ToolNotFoundError` for an unknown tool and
        :class:`ToolExecutionError` (carrying ``{tool, arguments}``) for any
        failure after routing.
        """
        arguments = dict(arguments or {})
        if name not in self._routes:
            raise ToolNotFoundError(name)

        with _tracer.start_as_current_span("dflow.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                call = self.plan(name, arguments)
                span.set_attribute(ATTR_HTTP_METHOD, call.method)
                span.set_attribute(ATTR_HTTP_PATH, call.path)
                result = await self._client.call(call.method, call.path, call.params)
            except (APIError, MissingArgumentError) as exc:
                span.set_attribute(ATTR_TOOL_ERROR, str(exc))
                logger.warning("tool=%s outcome=error error=%s", name, exc)
                raise ToolExecutionError(name, arguments, str(exc)) from exc

        logger.info("tool=%s outcome=success", name)
        return result

    async def dispatch(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Execute and wrap the outcome in the MCP content envelope."""
        try:
            payload = await self.execute(name, arguments)
        except ToolExecutionError as exc:
            return ToolResult.from_text(f"Error calling {name}: {exc}", is_error=True)
        return ToolResult.from_json(payload)
