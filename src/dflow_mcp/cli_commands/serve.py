"""``dflow-mcp serve`` — run the MCP server over stdio or HTTP."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from dflow_mcp.config import ServerConfig  # noqa: TC001

if TYPE_CHECKING:
    from dflow_mcp.protocols.mcp.router import JsonRpcRouter


def build_router(config: ServerConfig) -> JsonRpcRouter:
    """Wire client, dispatcher and router from *config*."""
    from dflow_mcp.api.client import DFlowClient
    from dflow_mcp.protocols.dispatcher import ToolDispatcher
    from dflow_mcp.protocols.mcp.router import JsonRpcRouter

    client = DFlowClient(base_url=config.api_url, timeout=config.request_timeout)
    return JsonRpcRouter(
        ToolDispatcher(client),
        tool_errors_as_rpc_errors=config.tool_errors_as_rpc_errors,
    )


@click.group()
def serve() -> None:
    """Run the MCP server."""


@serve.command("stdio")
@click.option(
    "--rpc-tool-errors/--result-tool-errors",
    default=False,
    help="Report failed tool calls as JSON-RPC errors instead of isError results.",
)
@click.pass_obj
def stdio(config: ServerConfig, rpc_tool_errors: bool) -> None:
    """Serve newline-delimited JSON-RPC on stdin/stdout."""
    from dflow_mcp.protocols.mcp.transport import StdioTransport

    config = config.model_copy(update={"tool_errors_as_rpc_errors": rpc_tool_errors})
    asyncio.run(StdioTransport(build_router(config)).serve())


@serve.command("http")
@click.option("--host", envvar="DFLOW_HOST", default="127.0.0.1", show_default=True)
@click.option("--port", envvar="DFLOW_PORT", type=click.IntRange(0, 65535), default=3000,
              show_default=True)
@click.option(
    "--rpc-tool-errors/--result-tool-errors",
    default=True,
    help="Report failed tool calls as JSON-RPC errors instead of isError results.",
)
@click.pass_obj
def http(config: ServerConfig, host: str, port: int, rpc_tool_errors: bool) -> None:
    """Serve JSON-RPC over HTTP (with SSE framing on request)."""
    from dflow_mcp.protocols.mcp.transport import HttpTransport

    config = config.model_copy(
        update={"host": host, "port": port, "tool_errors_as_rpc_errors": rpc_tool_errors}
    )
    asyncio.run(HttpTransport(build_router(config), config).serve())
