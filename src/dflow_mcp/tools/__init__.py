"""Tool catalog and REST routing table."""

from dflow_mcp.tools.catalog import TOOLS, get_tool, list_tools, tool_names
from dflow_mcp.tools.models import RestCallSpec, RouteRule, ToolAnnotations, ToolDescriptor
from dflow_mcp.tools.routes import ROUTES

__all__ = [
    "ROUTES",
    "TOOLS",
    "RestCallSpec",
    "RouteRule",
    "ToolAnnotations",
    "ToolDescriptor",
    "get_tool",
    "list_tools",
    "tool_names",
]
