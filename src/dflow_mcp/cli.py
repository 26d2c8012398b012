"""dflow-mcp CLI entrypoint."""

from __future__ import annotations

import logging

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from dflow_mcp import __version__
from dflow_mcp.config import DEFAULT_API_URL, DEFAULT_TIMEOUT, ServerConfig

LOG_FORMAT = "%(name)s: %(message)s"


def setup_logging(level: str) -> None:
    """Route all logging to stderr; stdout is reserved for the stdio transport."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler], force=True)


@click.group()
@click.version_option(version=__version__, prog_name="dflow-mcp")
@click.option(
    "--api-url",
    envvar="DFLOW_API_URL",
    default=DEFAULT_API_URL,
    show_default=True,
    help="Origin of the Prediction Market Metadata API.",
)
@click.option(
    "--timeout",
    envvar="DFLOW_REQUEST_TIMEOUT",
    type=float,
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Upstream request timeout in seconds.",
)
@click.option(
    "--log-level",
    envvar="DFLOW_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.option("--telemetry", is_flag=True, help="Export trace spans to stderr.")
@click.pass_context
def main(
    ctx: click.Context,
    api_url: str,
    timeout: float,
    log_level: str,
    telemetry: bool,
) -> None:
    """dflow-mcp — MCP tools for the Prediction Market Metadata API."""
    try:
        config = ServerConfig(api_url=api_url, request_timeout=timeout, log_level=log_level)
    except ValidationError as exc:
        raise click.UsageError(str(exc)) from exc

    setup_logging(config.log_level)
    if telemetry:
        from dflow_mcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry()
        except ImportError as exc:
            raise click.ClickException(str(exc)) from exc

    ctx.obj = config


# Register subcommands
from dflow_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
