"""HTTP/1.1 request framing and response decoding over asyncio streams.

Response grammar handled here::

    status-line   = "HTTP/1." ("0" | "1") SP 3DIGIT [SP reason] CRLF
    header-line   = name ":" value CRLF          (until an empty line)
    body          = content-length octets
                  | *(hex-size [";" ext] CRLF data CRLF) "0" CRLF *(trailer CRLF) CRLF
                  | octets until EOF              (no framing headers)

``Transfer-Encoding: chunked`` wins when both framing headers are present.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from ghcopy_core.errors import InvalidUrlError, NetworkError, ParseError, status_error

_STATUS_RE = re.compile(r"^HTTP/1\.[01] (\d{3})(?:\s|$)")
_SUCCESS_RE = re.compile(r"^HTTP/1\.[01] 2")
_CHUNK_SIZE_RE = re.compile(rb"^[0-9A-Fa-f]+$")

READ_PIECE = 64 * 1024


class IdleTimeoutReader:
    """StreamReader view where each read must make progress within *timeout* seconds.

    Fixed-size and to-EOF reads are split into pieces of at most
    ``READ_PIECE`` bytes, so a large body that keeps arriving never times
    out while a stalled connection does.
    """

    def __init__(self, reader: asyncio.StreamReader, timeout: float) -> None:
        self._reader = reader
        self.timeout = timeout

    async def _wait(self, awaitable):
        try:
            return await asyncio.wait_for(awaitable, self.timeout)
        except TimeoutError as e:
            raise NetworkError(f"Read timed out: no data for {self.timeout}s") from e

    async def readline(self) -> bytes:
        return await self._wait(self._reader.readline())

    async def readexactly(self, count: int) -> bytes:
        data = bytearray()
        while len(data) < count:
            piece = await self._wait(self._reader.read(min(count - len(data), READ_PIECE)))
            if not piece:
                raise asyncio.IncompleteReadError(bytes(data), count)
            data += piece
        return bytes(data)

    async def read(self, count: int = -1) -> bytes:
        if count >= 0:
            return await self._wait(self._reader.read(count))
        data = bytearray()
        while True:
            piece = await self._wait(self._reader.read(READ_PIECE))
            if not piece:
                return bytes(data)
            data += piece


ByteReader = asyncio.StreamReader | IdleTimeoutReader


@dataclass(frozen=True)
class ResponseHead:
    """Status line and headers of a successful response."""

    status: int
    status_line: str
    headers: dict[str, str] = field(default_factory=dict)  # lower-cased names

    @property
    def content_length(self) -> int | None:
        raw = self.headers.get("content-length")
        if raw is None or not raw.strip().isdigit():
            return None
        return int(raw)

    @property
    def chunked(self) -> bool:
        return "chunked" in self.headers.get("transfer-encoding", "").lower()


def build_request(
    host: str,
    path: str,
    user_agent: str,
    headers: Mapping[str, str] | None = None,
) -> bytes:
    """Frame a body-less GET request."""
    if not path.startswith("/"):
        path = "/" + path
    lines = [
        f"GET {path} HTTP/1.1",
        f"Host: {host}",
        f"User-Agent: {user_agent}",
        "Connection: close",
        "Accept: */*",
    ]
    lines.extend(f"{name}: {value}" for name, value in (headers or {}).items())
    for line in lines:
        if "\r" in line or "\n" in line:
            raise InvalidUrlError(path, "CR/LF in request line or header")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


async def _readline(reader: ByteReader, what: str) -> bytes:
    try:
        return await reader.readline()
    except ValueError as e:
        # StreamReader raises ValueError when a line exceeds its buffer limit
        raise ParseError(f"Oversized {what}: {e}") from e
    except (ConnectionError, OSError) as e:
        raise NetworkError(f"Failed to read {what}: {e}") from e


async def _read_exact(reader: ByteReader, count: int, what: str) -> bytes:
    try:
        return await reader.readexactly(count)
    except asyncio.IncompleteReadError as e:
        raise NetworkError(
            f"Short read of {what}: expected {count} bytes, got {len(e.partial)}"
        ) from e
    except (ConnectionError, OSError) as e:
        raise NetworkError(f"Failed to read {what}: {e}") from e


async def read_status_line(reader: ByteReader) -> tuple[int | None, str]:
    """Read the status line. Returns (status or None if unparsable, raw text)."""
    raw = await _readline(reader, "status line")
    if not raw:
        raise NetworkError("Connection closed before status line")
    line = raw.decode("latin-1").strip()
    match = _STATUS_RE.match(line)
    return (int(match.group(1)) if match else None), line


async def read_headers(reader: ByteReader) -> dict[str, str]:
    """Read header lines up to the blank separator line.

    Names are lower-cased; repeated headers are joined with ``", "``.
    """
    headers: dict[str, str] = {}
    while True:
        raw = await _readline(reader, "header")
        line = raw.decode("latin-1").strip()
        if not line:
            return headers
        name, sep, value = line.partition(":")
        if not sep:
            continue
        key = name.strip().lower()
        value = value.strip()
        headers[key] = f"{headers[key]}, {value}" if key in headers else value


async def read_response_head(reader: ByteReader) -> ResponseHead:
    """Read status line and headers, raising for anything but 2xx."""
    status, line = await read_status_line(reader)
    if status is None:
        raise NetworkError(f"HTTP request failed: {line}", status_line=line)
    headers = await read_headers(reader)
    if not _SUCCESS_RE.match(line):
        raise status_error(status, line, location=headers.get("location"))
    return ResponseHead(status=status, status_line=line, headers=headers)


async def read_chunked_body(reader: ByteReader) -> bytes:
    """Decode a chunked body, discarding chunk extensions and trailers."""
    body = bytearray()
    while True:
        raw = await _readline(reader, "chunk size")
        if not raw:
            raise NetworkError("Connection closed before final chunk")
        size_field = raw.split(b";", 1)[0].strip()
        if not _CHUNK_SIZE_RE.match(size_field):
            raise ParseError(f"Invalid chunk size line: {raw!r}")
        size = int(size_field, 16)
        if size == 0:
            break
        body += await _read_exact(reader, size, "chunk data")
        await _read_exact(reader, 2, "chunk terminator")

    while True:
        trailer = await _readline(reader, "trailer")
        if not trailer.strip():
            break
    return bytes(body)


async def read_body(reader: ByteReader, head: ResponseHead) -> bytes:
    """Read the body according to the framing announced in *head*."""
    if head.chunked:
        return await read_chunked_body(reader)
    length = head.content_length
    if length is not None:
        return await _read_exact(reader, length, "body")
    try:
        return await reader.read()
    except (ConnectionError, OSError) as e:
        raise NetworkError(f"Failed to read body: {e}") from e
