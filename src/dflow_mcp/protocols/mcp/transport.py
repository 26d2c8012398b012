"""MCP transports — stdio and HTTP bindings over one :class:`JsonRpcRouter`.

Each transport satisfies the :class:`Transport` protocol: a single
``serve()`` coroutine that runs until its input is exhausted or the server
is stopped.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, BinaryIO, Protocol, TextIO, runtime_checkable

from dflow_mcp.protocols.errors import PARSE_ERROR
from dflow_mcp.protocols.mcp.models import JsonRpcResponse

if TYPE_CHECKING:
    from dflow_mcp.config import ServerConfig
    from dflow_mcp.protocols.mcp.router import JsonRpcRouter

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """A binding that feeds inbound messages to the router."""

    async def serve(self) -> None: ...


class StdioTransport:
    """Serves newline-delimited JSON-RPC over stdin/stdout.

    Input is read as bytes and decoded one line at a time, so a line that is
    not valid UTF-8 is answered with a parse error and later lines are still
    served.  Every line is handled as its own task so a slow upstream call
    does not hold back later requests.  Replies are written one per line, in
    completion order.  At EOF the transport waits for in-flight requests
    before returning.
    """

    def __init__(
        self,
        router: JsonRpcRouter,
        stdin: BinaryIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._router = router
        self._stdin = stdin or sys.stdin.buffer
        self._stdout = stdout or sys.stdout
        self._pending: set[asyncio.Task[None]] = set()

    async def serve(self) -> None:
        logger.info("Serving MCP over stdio")
        try:
            while True:
                raw = await asyncio.to_thread(self._stdin.readline)
                if not raw:
                    break
                raw = raw.strip()
                if not raw:
                    continue
                task = asyncio.create_task(self._handle_line(raw))
                self._pending.add(task)
                task.add_done_callback(self._pending.discard)
        finally:
            if self._pending:
                await asyncio.gather(*self._pending)
        logger.info("stdin closed, stdio transport stopped")

    async def _handle_line(self, raw: bytes) -> None:
        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.info("Rejecting undecodable request: %s", exc)
            failure = JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error", str(exc))
            self._write(failure.to_wire())
            return

        response = await self._router.handle_raw(line)
        if response is None:
            return
        self._write(response)

    def _write(self, message: dict[str, object]) -> None:
        self._stdout.write(json.dumps(message, ensure_ascii=False) + "\n")
        self._stdout.flush()


class HttpTransport:
    """Serves the FastAPI app from :func:`create_app` with uvicorn."""

    def __init__(self, router: JsonRpcRouter, config: ServerConfig) -> None:
        self._router = router
        self._config = config

    async def serve(self) -> None:
        import uvicorn

        from dflow_mcp.protocols.mcp.http import create_app

        app = create_app(self._router)
        server = uvicorn.Server(
            uvicorn.Config(
                app,
                host=self._config.host,
                port=self._config.port,
                log_level=self._config.log_level.lower(),
            )
        )
        logger.info("Serving MCP over HTTP on %s:%d", self._config.host, self._config.port)
        await server.serve()
