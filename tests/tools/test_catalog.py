"""Tests for the tool catalog."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dflow_mcp.protocols.errors import ToolNotFoundError
from dflow_mcp.tools.catalog import TOOLS, get_tool, list_tools, tool_names
from dflow_mcp.tools.routes import ROUTES


class TestCatalog:
    def test_catalog_size(self) -> None:
        assert len(TOOLS) == 23

    def test_names_unique(self) -> None:
        names = tool_names()
        assert len(names) == len(set(names))

    def test_every_tool_has_a_route(self) -> None:
        assert set(tool_names()) == set(ROUTES)

    def test_list_is_stable(self) -> None:
        assert [t.name for t in list_tools()] == [t.name for t in list_tools()]
        assert list_tools()[0].name == "get_event"
        assert list_tools()[-1].name == "search_events"

    def test_schemas_are_objects_with_declared_required(self) -> None:
        for tool in TOOLS:
            schema = tool.input_schema
            assert schema["type"] == "object"
            for key in schema["required"]:
                assert key in schema["properties"], (tool.name, key)

    def test_path_params_are_required(self) -> None:
        for name, route in ROUTES.items():
            required = get_tool(name).input_schema["required"]
            for segment in route.path_params:
                assert segment in required, (name, segment)

    def test_sort_enum(self) -> None:
        sort = get_tool("get_events").input_schema["properties"]["sort"]
        assert sort["enum"] == ["volume", "volume24h", "liquidity", "openInterest", "startDate"]

    def test_filter_outcome_mints_limit(self) -> None:
        addresses = get_tool("filter_outcome_mints").input_schema["properties"]["addresses"]
        assert addresses["type"] == "array"
        assert addresses["maxItems"] == 200


class TestDescriptorWire:
    def test_camel_case_keys(self) -> None:
        wire = get_tool("get_market").to_wire()
        assert set(wire) >= {"name", "title", "description", "inputSchema", "annotations"}
        assert wire["annotations"]["readOnlyHint"] is True
        assert wire["annotations"]["destructiveHint"] is False

    def test_descriptors_are_frozen(self) -> None:
        tool = get_tool("get_market")
        with pytest.raises(ValidationError):
            tool.name = "other"  # type: ignore[misc]


class TestGetTool:
    def test_unknown(self) -> None:
        with pytest.raises(ToolNotFoundError, match="Tool not found: nope"):
            get_tool("nope")
