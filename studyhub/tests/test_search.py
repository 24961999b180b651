from __future__ import annotations

import json

import httpx
import pytest

from studyhub.search.config import SearchConfig
from studyhub.search.serper_client import find_external_resource

CONFIG = SearchConfig(api_key="test-key")


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_returns_first_organic_result():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.headers["X-API-KEY"]
        seen["query"] = json.loads(request.content)["q"]
        return httpx.Response(200, json={"organic": [
            {"link": "https://example.edu/graphs", "imageUrl": "https://example.edu/g.png"},
            {"link": "https://example.edu/other"},
        ]})

    async with _client(handler) as client:
        result = await find_external_resource("Graph Theory", CONFIG, client=client)

    assert result == {"url": "https://example.edu/graphs", "thumbnail_url": "https://example.edu/g.png"}
    assert seen["key"] == "test-key"
    assert seen["query"].startswith("Graph Theory")


@pytest.mark.asyncio
async def test_no_results_returns_empty():
    async with _client(lambda request: httpx.Response(200, json={"organic": []})) as client:
        assert await find_external_resource("Obscure topic", CONFIG, client=client) == {}


@pytest.mark.asyncio
async def test_http_error_returns_empty():
    async with _client(lambda request: httpx.Response(503)) as client:
        assert await find_external_resource("Graph Theory", CONFIG, client=client) == {}


@pytest.mark.asyncio
async def test_disabled_without_key():
    assert await find_external_resource("Graph Theory", SearchConfig(api_key="")) == {}
