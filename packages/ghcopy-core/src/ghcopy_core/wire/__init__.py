"""Minimal HTTP/1.1 over TLS."""

from ghcopy_core.wire.client import DEFAULT_USER_AGENT, WireHttpClient
from ghcopy_core.wire.framing import (
    IdleTimeoutReader,
    ResponseHead,
    build_request,
    read_body,
    read_chunked_body,
    read_headers,
    read_response_head,
    read_status_line,
)

__all__ = [
    "DEFAULT_USER_AGENT",
    "IdleTimeoutReader",
    "ResponseHead",
    "WireHttpClient",
    "build_request",
    "read_body",
    "read_chunked_body",
    "read_headers",
    "read_response_head",
    "read_status_line",
]
