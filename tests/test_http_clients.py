"""Tests for HTTP-based adapters."""

import asyncio

import httpx
import pytest

from foodscan.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient


def _client(handler) -> HttpxOpenFoodFactsClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxOpenFoodFactsClient(
        base_url="https://off.example/api/v2",
        user_agent="FoodScan/test",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_openfoodfacts_client_returns_product() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"status": 1, "product": {"product_name": "Oat drink"}}
        )

    client = _client(handler)

    product = asyncio.run(client.get_product("123"))

    assert product == {"product_name": "Oat drink"}
    assert seen[0].url.path == "/api/v2/product/123.json"
    assert seen[0].headers["User-Agent"] == "FoodScan/test"


def test_openfoodfacts_client_handles_unknown_barcode() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/404.json"):
            return httpx.Response(404, json={"status": 0})
        return httpx.Response(200, json={"status": 0, "status_verbose": "not found"})

    client = _client(handler)

    assert asyncio.run(client.get_product("000")) is None
    assert asyncio.run(client.get_product("404")) is None


def test_openfoodfacts_client_raises_on_server_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    client = _client(handler)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.get_product("123"))


def test_openfoodfacts_client_create_and_close() -> None:
    client = HttpxOpenFoodFactsClient.create(
        base_url="https://off.example/api/v2/", user_agent="FoodScan/test"
    )

    assert client.base_url == "https://off.example/api/v2"
    asyncio.run(client.close())
    assert client.http_client.is_closed
