"""Error types for the upstream REST client."""

from __future__ import annotations


class APIError(Exception):
    """Base error for all upstream API failures."""


class UpstreamError(APIError):
    """The API answered with a non-2xx status."""

    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}")


class RequestTimeoutError(APIError, TimeoutError):
    """No response arrived within the configured timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Request timeout after {timeout:g}s")


class NetworkError(APIError):
    """The request failed below HTTP (DNS, connection reset, TLS, ...)."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Network error" + (f": {detail}" if detail else ""))


class InvalidResponseError(APIError):
    """A successful response carried a body that is not JSON."""

    def __init__(self, status: int, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        super().__init__(
            f"Invalid JSON in HTTP {status} response" + (f": {detail}" if detail else "")
        )
