"""Shared test fixtures for ghcopy."""

import asyncio
import base64
import json

import pytest

from ghcopy_core.config.models import GhCopyConfig, HttpSettings
from ghcopy_core.errors import HttpStatusError
from ghcopy_core.fetcher.fetcher import ContentFetcher

API = "https://api.github.com/repos/acme/widgets/contents"
RAW = "https://raw.githubusercontent.com/acme/widgets/main"


class FakeWireClient:
    """Stands in for WireHttpClient, answering GETs from a per-URL script.

    Each URL maps to a queue of responses (bytes or an exception to raise).
    The last response of a queue repeats; unknown URLs answer 404.
    """

    def __init__(self):
        self.routes: dict[str, list] = {}
        self.calls: list[tuple[str, dict[str, str]]] = []

    def add(self, url, *responses):
        self.routes.setdefault(url, []).extend(responses)

    def urls(self):
        return [url for url, _ in self.calls]

    async def get(self, host, path, headers=None):
        url = f"https://{host}{path}"
        self.calls.append((url, dict(headers or {})))
        queue = self.routes.get(url)
        if not queue:
            raise HttpStatusError(404, "HTTP/1.1 404 Not Found")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response


def entry(name, path=None, type="file", size=0, **extra):
    record = {
        "name": name,
        "path": path or name,
        "sha": f"sha-{name}",
        "size": size,
        "type": type,
        "download_url": None,
        "_links": {"self": f"{API}/{path or name}"},
    }
    record.update(extra)
    return record


def listing_json(*records) -> bytes:
    return json.dumps(list(records), indent=2).encode()


def api_file_json(name, path, data: bytes, **extra) -> bytes:
    encoded = base64.b64encode(data).decode()
    # GitHub wraps inline content at 60 columns
    wrapped = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60)) + "\n"
    record = entry(name, path, size=len(data), content=wrapped, encoding="base64")
    record.update(extra)
    return json.dumps(record).encode()


@pytest.fixture
def fake_client():
    return FakeWireClient()


@pytest.fixture
def http_settings():
    return HttpSettings(retry_delay=0, max_retries=2)


@pytest.fixture
def fetcher(fake_client, http_settings):
    return ContentFetcher(fake_client, settings=http_settings)


@pytest.fixture
def sample_config():
    return GhCopyConfig()


@pytest.fixture
def make_reader():
    """Build an exhausted StreamReader holding *data*. Call inside a coroutine."""

    def _make(data: bytes) -> asyncio.StreamReader:
        reader = asyncio.StreamReader()
        reader.feed_data(data)
        reader.feed_eof()
        return reader

    return _make


@pytest.fixture
def docs_tree(fake_client):
    """acme/widgets@main:docs with two files and a subdirectory holding one more."""
    fake_client.add(
        f"{API}/docs?ref=main",
        listing_json(
            entry("a.txt", "docs/a.txt", size=5),
            entry("b.md", "docs/b.md", size=5),
            entry("sub", "docs/sub", type="dir"),
        ),
    )
    fake_client.add(
        f"{API}/docs/sub?ref=main",
        listing_json(entry("c.txt", "docs/sub/c.txt", size=7)),
    )
    fake_client.add(f"{RAW}/docs/a.txt", b"alpha")
    fake_client.add(f"{RAW}/docs/b.md", b"bravo")
    fake_client.add(f"{RAW}/docs/sub/c.txt", b"charlie")
    return fake_client
