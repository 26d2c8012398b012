"""``dflow-mcp tools`` — inspect the catalog and call tools directly."""

from __future__ import annotations

import asyncio
import json
import sys

import click

from dflow_mcp.cli_commands._output import console, print_tools_table
from dflow_mcp.config import ServerConfig  # noqa: TC001
from dflow_mcp.protocols.errors import ToolNotFoundError
from dflow_mcp.tools.catalog import get_tool, list_tools


@click.group()
def tools() -> None:
    """Inspect and call catalog tools."""


@tools.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print the catalog as JSON.")
def list_cmd(as_json: bool) -> None:
    """List every tool in the catalog."""
    catalog = list_tools()
    if as_json:
        console.print_json(json.dumps([tool.to_wire() for tool in catalog]))
        return
    print_tools_table(list(catalog))


@tools.command("describe")
@click.argument("name")
def describe(name: str) -> None:
    """Print the full descriptor of tool NAME."""
    try:
        tool = get_tool(name)
    except ToolNotFoundError as exc:
        console.print(str(exc), style="red", markup=False)
        sys.exit(1)
    console.print_json(json.dumps(tool.to_wire()))


@tools.command("call")
@click.argument("name")
@click.option("--args", "raw_args", default="{}", help="Tool arguments as a JSON object.")
@click.pass_obj
def call(config: ServerConfig, name: str, raw_args: str) -> None:
    """Call tool NAME once against the upstream API and print the result."""
    from dflow_mcp.api.client import DFlowClient
    from dflow_mcp.protocols.dispatcher import ToolDispatcher

    try:
        arguments = json.loads(raw_args)
    except ValueError as exc:
        console.print(f"[red]Invalid --args JSON:[/red] {exc}")
        sys.exit(1)
    if not isinstance(arguments, dict):
        console.print("[red]--args must be a JSON object[/red]")
        sys.exit(1)

    dispatcher = ToolDispatcher(
        DFlowClient(base_url=config.api_url, timeout=config.request_timeout)
    )
    if not dispatcher.has_tool(name):
        console.print(str(ToolNotFoundError(name)), style="red", markup=False)
        sys.exit(1)

    result = asyncio.run(dispatcher.dispatch(name, arguments))
    if result.is_error:
        console.print(result.text, style="red", markup=False)
        sys.exit(1)
    click.echo(result.text)
