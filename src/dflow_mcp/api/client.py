"""DFlowClient — time-bounded JSON client for the Prediction Market Metadata API.

Every tool invocation becomes exactly one :meth:`DFlowClient.call`.  ``GET``
arguments travel as query parameters, ``POST`` arguments as a JSON body, and
the parsed JSON response is returned verbatim.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from dflow_mcp.api.errors import (
    InvalidResponseError,
    NetworkError,
    RequestTimeoutError,
    UpstreamError,
)
from dflow_mcp.config import DEFAULT_API_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def render_value(value: Any) -> str:
    """Render one query or path value the way the upstream API parses it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(render_value(item) for item in value)
    return str(value)


def encode_query(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten *params* into ordered query pairs, dropping ``None`` values."""
    if not params:
        return []
    return [(key, render_value(value)) for key, value in params.items() if value is not None]


class DFlowClient:
    """Async client for the upstream REST API.

    Usage::

        client = DFlowClient("https://prediction-markets-api.dflow.net", timeout=10)
        events = await client.get("/api/v1/events", {"limit": 5})
        markets = await client.post("/api/v1/markets/batch", {"tickers": ["A"]})

    *transport* is handed to :class:`httpx.AsyncClient`; tests inject an
    :class:`httpx.MockTransport` there.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def make_url(self, path: str) -> str:
        """Join the base origin and *path* with exactly one slash."""
        return f"{self._base_url}{path if path.startswith('/') else '/' + path}"

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.call("GET", path, params)

    async def post(self, path: str, body: Mapping[str, Any] | None = None) -> Any:
        return await self.call("POST", path, body)

    async def call(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Perform one request and return the decoded JSON body.

        Raises
        ------
        UpstreamError
            The API answered with a non-2xx status.
        RequestTimeoutError
            No response within ``timeout`` seconds; the request is cancelled.
        NetworkError
            Transport-level failure.
        InvalidResponseError
            A 2xx response whose body is not JSON.
        """
        method = method.upper()
        url = self.make_url(path)
        query = encode_query(params) if method == "GET" else None
        body = dict(params) if method != "GET" and params is not None else None

        logger.debug("%s %s query=%s body=%s", method, url, query, body)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await asyncio.wait_for(
                    client.request(method, url, params=query, json=body, headers=_HEADERS),
                    timeout=self._timeout,
                )
        except TimeoutError as exc:
            raise RequestTimeoutError(self._timeout) from exc
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(self._timeout) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.info("%s %s -> HTTP %d", method, url, response.status_code)
            raise UpstreamError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponseError(response.status_code, str(exc)) from exc
