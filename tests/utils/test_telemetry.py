"""Tests for OpenTelemetry tracing helpers."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from opentelemetry import trace

from dflow_mcp.utils.telemetry import (
    ATTR_HTTP_METHOD,
    ATTR_HTTP_PATH,
    ATTR_RPC_METHOD,
    ATTR_TOOL_ERROR,
    ATTR_TOOL_NAME,
    _INSTRUMENTATION_NAME,
    configure_telemetry,
    get_tracer,
)


class TestGetTracer:
    def test_returns_tracer(self) -> None:
        tracer = get_tracer("test.module")
        assert isinstance(tracer, trace.Tracer)

    def test_default_name(self) -> None:
        tracer = get_tracer()
        assert isinstance(tracer, trace.Tracer)

    def test_noop_span(self) -> None:
        """Without SDK configured, spans should be no-ops."""
        tracer = get_tracer("test.noop")
        with tracer.start_as_current_span("dflow.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, "get_events")


class TestConfigureTelemetry:
    def test_raises_without_sdk(self) -> None:
        with patch.dict("sys.modules", {"opentelemetry.sdk.resources": None}):
            with pytest.raises(ImportError, match="opentelemetry-sdk"):
                configure_telemetry()

    def test_installs_provider_with_service_name(self) -> None:
        try:
            import opentelemetry.sdk.trace  # noqa: F401
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch("opentelemetry.trace.set_tracer_provider") as set_provider:
            configure_telemetry(service_name="dflow-test")

        set_provider.assert_called_once()
        provider = set_provider.call_args.args[0]
        assert provider.resource.attributes["service.name"] == "dflow-test"


class TestAttributeConstants:
    def test_constants_are_namespaced(self) -> None:
        for key in (ATTR_TOOL_NAME, ATTR_TOOL_ERROR, ATTR_HTTP_METHOD, ATTR_HTTP_PATH,
                    ATTR_RPC_METHOD):
            assert key.startswith("dflow.")

    def test_instrumentation_name(self) -> None:
        assert _INSTRUMENTATION_NAME == "dflow_mcp"
