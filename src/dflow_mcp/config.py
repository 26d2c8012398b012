"""Server configuration: upstream origin, timeout and bind address."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_API_URL = "https://prediction-markets-api.dflow.net"
DEFAULT_TIMEOUT = 30.0


class ServerConfig(BaseModel):
    """Startup configuration shared by every transport.

    ``request_timeout`` is in seconds.  ``tool_errors_as_rpc_errors`` selects
    how a failed tool call is reported: as a JSON-RPC ``-32603`` error (the
    HTTP default) or as an ``isError`` content result (the stdio default).
    """

    api_url: str = DEFAULT_API_URL
    request_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=0, le=65535)
    log_level: str = "INFO"
    tool_errors_as_rpc_errors: bool = False

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            msg = "api_url must not be empty"
            raise ValueError(msg)
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.upper()
