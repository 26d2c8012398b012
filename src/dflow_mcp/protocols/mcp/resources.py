"""Readable resources advertised through ``resources/list``.

The events and markets resources are live snapshots fetched on every read;
the docs resource is static markdown.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from dflow_mcp.protocols.errors import INVALID_PARAMS, JsonRpcError
from dflow_mcp.tools.catalog import TOOLS

if TYPE_CHECKING:
    from dflow_mcp.api.client import DFlowClient

EVENTS_URI = "dflow://api/events"
MARKETS_URI = "dflow://api/markets"
DOCS_URI = "dflow://api/docs"

SNAPSHOT_LIMIT = 10

RESOURCES: tuple[dict[str, str], ...] = (
    {
        "uri": EVENTS_URI,
        "name": "Prediction Market Events",
        "description": "Real-time feed of all prediction market events",
        "mimeType": "application/json",
    },
    {
        "uri": MARKETS_URI,
        "name": "Active Markets",
        "description": "Currently active prediction markets with live data",
        "mimeType": "application/json",
    },
    {
        "uri": DOCS_URI,
        "name": "API Documentation",
        "description": "Complete API documentation and usage examples",
        "mimeType": "text/markdown",
    },
)

_SNAPSHOT_PATHS = {
    EVENTS_URI: "/api/v1/events",
    MARKETS_URI: "/api/v1/markets",
}


def list_resources() -> dict[str, Any]:
    return {"resources": [dict(r) for r in RESOURCES]}


def render_docs() -> str:
    """Markdown overview of the tool surface."""
    lines = ["# DFlow Prediction Market API", "", "## Available Tools"]
    lines.extend(f"- {tool.name}: {tool.description}" for tool in TOOLS)
    lines.extend([
        "",
        "## Example Usage",
        "1. List events: get_events with limit parameter",
        "2. Get specific event: get_event with event_id",
        "3. Analyze trades: get_trades with filtering options",
        "",
    ])
    return "\n".join(lines)


async def read_resource(client: DFlowClient, uri: str) -> dict[str, Any]:
    """Return the ``resources/read`` payload for *uri*."""
    if uri == DOCS_URI:
        return {"contents": [{"uri": uri, "mimeType": "text/markdown", "text": render_docs()}]}

    path = _SNAPSHOT_PATHS.get(uri)
    if path is None:
        raise JsonRpcError(INVALID_PARAMS, f"Unknown resource: {uri}")

    snapshot = await client.get(path, {"limit": SNAPSHOT_LIMIT})
    return {
        "contents": [
            {
                "uri": uri,
                "mimeType": "application/json",
                "text": json.dumps(snapshot, indent=2, ensure_ascii=False),
            }
        ]
    }
