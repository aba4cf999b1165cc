"""Hand-rolled HTTPS GET client on top of asyncio streams."""

from __future__ import annotations

import asyncio
import logging
import ssl
from collections.abc import Mapping

from ghcopy_core.errors import NetworkError
from ghcopy_core.wire.framing import (
    IdleTimeoutReader,
    build_request,
    read_body,
    read_response_head,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "ghcopy/0.1.0"
HTTPS_PORT = 443


class WireHttpClient:
    """One TLS connection per request, ``Connection: close`` semantics.

    Owns no retry or redirect policy: non-2xx responses raise
    HttpStatusError (or a subclass) and transport failures raise
    NetworkError, both unchanged for the caller to handle.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        *,
        port: int = HTTPS_PORT,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self.port = port
        self._ssl_context = ssl_context or ssl.create_default_context()

    async def get(
        self, host: str, path: str, headers: Mapping[str, str] | None = None
    ) -> bytes:
        """GET ``https://{host}{path}`` and return the decoded body.

        ``timeout`` bounds the connect, the request write and every single
        read, so it measures how long the peer may stay silent rather than
        the length of the whole transfer.
        """
        request = build_request(host, path, self.user_agent, headers)
        try:
            reader, writer = await asyncio.wait_for(self._open_connection(host), self.timeout)
        except TimeoutError as e:
            raise NetworkError(f"Connecting to {host} timed out after {self.timeout}s") from e
        try:
            writer.write(request)
            await asyncio.wait_for(writer.drain(), self.timeout)
            stream = IdleTimeoutReader(reader, self.timeout)
            head = await read_response_head(stream)
            body = await read_body(stream, head)
        except TimeoutError as e:
            raise NetworkError(f"Sending request to {host} timed out after {self.timeout}s") from e
        except (ConnectionError, OSError) as e:
            raise NetworkError(f"Request to {host} failed: {e}") from e
        finally:
            await self._close(writer)

        logger.debug("GET https://%s%s -> %s (%d bytes)", host, path, head.status, len(body))
        return body

    async def _open_connection(
        self, host: str
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        try:
            return await asyncio.open_connection(
                host, self.port, ssl=self._ssl_context, server_hostname=host
            )
        except (ConnectionError, OSError) as e:
            raise NetworkError(f"Connection to {host}:{self.port} failed: {e}") from e

    @staticmethod
    async def _close(writer: asyncio.StreamWriter) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError) as e:
            # Servers commonly drop TLS without close_notify after Connection: close
            logger.debug("Ignoring error while closing connection: %s", e)
