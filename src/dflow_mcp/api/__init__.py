"""Upstream Prediction Market Metadata API client."""

from dflow_mcp.api.client import DFlowClient, encode_query, render_value
from dflow_mcp.api.errors import (
    APIError,
    InvalidResponseError,
    NetworkError,
    RequestTimeoutError,
    UpstreamError,
)

__all__ = [
    "APIError",
    "DFlowClient",
    "InvalidResponseError",
    "NetworkError",
    "RequestTimeoutError",
    "UpstreamError",
    "encode_query",
    "render_value",
]
