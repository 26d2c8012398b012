"""OpenTelemetry tracing helpers for dflow-mcp.

Code calls ``get_tracer()`` and opens spans whether or not the SDK is
installed; without a configured provider the API hands out no-op tracers.

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("dflow.tool.call") as span:
        span.set_attribute(ATTR_TOOL_NAME, "get_events")

``dflow-mcp --telemetry`` calls :func:`configure_telemetry`, which needs the
``otel`` extra (``pip install dflow-mcp[otel]``).
"""

from __future__ import annotations

import sys

from opentelemetry import trace

ATTR_TOOL_NAME = "dflow.tool.name"
ATTR_TOOL_ERROR = "dflow.tool.error"
ATTR_HTTP_METHOD = "dflow.http.method"
ATTR_HTTP_PATH = "dflow.http.path"
ATTR_RPC_METHOD = "dflow.rpc.method"

_INSTRUMENTATION_NAME = "dflow_mcp"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(*, service_name: str = "dflow-mcp") -> None:
    """Install an SDK tracer provider that prints finished spans to stderr.

    Stdout is left alone because the stdio transport writes frames there.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for --telemetry. "
            "Install it with: pip install dflow-mcp[otel]"
        )
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    trace.set_tracer_provider(provider)
