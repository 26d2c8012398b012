"""dflow-mcp — MCP tools for the Prediction Market Metadata API."""

from __future__ import annotations

__version__ = "0.1.0"

SERVER_NAME = "dflow-mcp-server"
