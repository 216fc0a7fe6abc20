from __future__ import annotations

import json

import httpx
import pytest
import respx
from httpx import Response

from price_tracker.core.client import BackendClient
from price_tracker.core.config import Settings
from price_tracker.core.errors import ErrorCode, NetworkError, ValidationError
from price_tracker.core.filters import FilterState
from price_tracker.core.models import ProductFilter

PRODUCT_JSON = {
    "id": 1,
    "url": "https://www.flipkart.com/item/p/itm1",
    "title": "Phone",
    "description": None,
    "current_price": 100,
    "ratings": 4.3,
    "purchases": 120,
    "price_history": [
        {"date": "2024-01-01", "price": 120},
        {"date": "2024-01-02", "price": 100},
    ],
    "created_at": "ignored",
}


@pytest.mark.asyncio
@respx.mock
async def test_list_sends_filter_and_omits_absent_bounds(settings: Settings) -> None:
    route = respx.route(method="GET", host="backend.test", path="/api/products").mock(
        return_value=Response(200, json=[PRODUCT_JSON])
    )

    async with BackendClient(settings) as client:
        products = await client.list(ProductFilter(search="phone", max_price=500))

    params = route.calls.last.request.url.params
    assert params["search"] == "phone"
    assert params["max_price"] == "500"
    assert "min_price" not in params
    assert len(products) == 1
    assert products[0].description == ""
    assert [point.price for point in products[0].price_history] == [120, 100]


@pytest.mark.asyncio
@respx.mock
async def test_list_sends_empty_search_for_default_filter(settings: Settings) -> None:
    route = respx.route(method="GET", path="/api/products").mock(
        return_value=Response(200, json=[])
    )

    async with BackendClient(settings) as client:
        assert await client.list(ProductFilter()) == []

    params = route.calls.last.request.url.params
    assert params["search"] == ""
    assert "min_price" not in params
    assert "max_price" not in params


@pytest.mark.asyncio
@respx.mock
async def test_list_failure_status_raises_network_error(settings: Settings) -> None:
    respx.route(method="GET", path="/api/products").mock(return_value=Response(500))

    async with BackendClient(settings) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.list(ProductFilter())

    assert excinfo.value.message == "Error fetching products"
    assert excinfo.value.code is ErrorCode.NET_BAD_STATUS
    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
@respx.mock
async def test_list_transport_failure_raises_network_error(settings: Settings) -> None:
    respx.route(method="GET", path="/api/products").mock(
        side_effect=httpx.ConnectError
    )

    async with BackendClient(settings) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.list(ProductFilter())

    assert excinfo.value.code is ErrorCode.NET_REQUEST_FAILED


@pytest.mark.asyncio
@respx.mock
async def test_list_rejects_malformed_payload(settings: Settings) -> None:
    respx.route(method="GET", path="/api/products").mock(
        return_value=Response(200, json={"products": []})
    )

    async with BackendClient(settings) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.list(ProductFilter())

    assert excinfo.value.code is ErrorCode.NET_INVALID_RESPONSE


@pytest.mark.asyncio
@respx.mock
async def test_create_posts_url_and_returns_product(settings: Settings) -> None:
    route = respx.route(method="POST", path="/api/products").mock(
        return_value=Response(201, json=PRODUCT_JSON)
    )

    async with BackendClient(settings) as client:
        product = await client.create(PRODUCT_JSON["url"])

    assert json.loads(route.calls.last.request.content) == {"url": PRODUCT_JSON["url"]}
    assert product.id == 1
    assert product.title == "Phone"


@pytest.mark.asyncio
@respx.mock
async def test_create_rejection_uses_backend_error_message(settings: Settings) -> None:
    respx.route(method="POST", path="/api/products").mock(
        return_value=Response(400, json={"error": "Unsupported site"})
    )

    async with BackendClient(settings) as client:
        with pytest.raises(ValidationError) as excinfo:
            await client.create("https://example.com/thing")

    assert excinfo.value.message == "Unsupported site"
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
@respx.mock
async def test_create_rejection_without_body_uses_generic_message(settings: Settings) -> None:
    respx.route(method="POST", path="/api/products").mock(
        return_value=Response(422, text="nope")
    )

    async with BackendClient(settings) as client:
        with pytest.raises(ValidationError) as excinfo:
            await client.create("https://example.com/thing")

    assert excinfo.value.message == "Error adding product"


@pytest.mark.asyncio
@respx.mock
async def test_create_server_error_is_network_error(settings: Settings) -> None:
    respx.route(method="POST", path="/api/products").mock(
        return_value=Response(503, json={"error": "scraper down"})
    )

    async with BackendClient(settings) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.create("https://example.com/thing")

    assert excinfo.value.message == "Error adding product"


@pytest.mark.asyncio
@respx.mock
async def test_recheck_posts_url(settings: Settings) -> None:
    route = respx.route(method="POST", path="/api/products/recheck").mock(
        return_value=Response(200, text="")
    )

    async with BackendClient(settings) as client:
        assert await client.recheck("https://example.com/a") is None

    assert json.loads(route.calls.last.request.content) == {"url": "https://example.com/a"}


@pytest.mark.asyncio
@respx.mock
async def test_recheck_rejection_raises_validation_error(settings: Settings) -> None:
    respx.route(method="POST", path="/api/products/recheck").mock(
        return_value=Response(404, json={"error": "Product not found"})
    )

    async with BackendClient(settings) as client:
        with pytest.raises(ValidationError) as excinfo:
            await client.recheck("https://example.com/a")

    assert excinfo.value.message == "Product not found"


@pytest.mark.asyncio
@respx.mock
async def test_recheck_timeout_raises_network_error(settings: Settings) -> None:
    respx.route(method="POST", path="/api/products/recheck").mock(
        side_effect=httpx.ReadTimeout
    )

    async with BackendClient(settings) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.recheck("https://example.com/a")

    assert excinfo.value.message == "Error rechecking price"


@pytest.mark.asyncio
@respx.mock
async def test_typed_whole_number_bound_is_sent_as_typed(settings: Settings) -> None:
    route = respx.route(method="GET", path="/api/products").mock(
        return_value=Response(200, json=[])
    )
    filters = FilterState()
    filters.set_min_price("500")
    filters.set_max_price("1499.5")

    async with BackendClient(settings) as client:
        await client.list(filters.snapshot)

    params = route.calls.last.request.url.params
    assert params["min_price"] == "500"
    assert params["max_price"] == "1499.5"


@pytest.mark.asyncio
@respx.mock
async def test_list_keeps_products_without_a_current_price(settings: Settings) -> None:
    respx.route(method="GET", path="/api/products").mock(
        return_value=Response(
            200,
            json=[
                {"id": 1, "url": "u1", "current_price": 100},
                {"id": 2, "url": "u2", "current_price": None},
            ],
        )
    )

    async with BackendClient(settings) as client:
        products = await client.list(ProductFilter())

    assert [(p.id, p.current_price) for p in products] == [(1, 100), (2, 0)]


@pytest.mark.asyncio
@respx.mock
async def test_recheck_redirect_is_not_success(settings: Settings) -> None:
    respx.route(method="POST", path="/api/products/recheck").mock(
        return_value=Response(302, headers={"Location": "/login"})
    )

    async with BackendClient(settings) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.recheck("https://example.com/a")

    assert excinfo.value.message == "Error rechecking price"
    assert excinfo.value.status_code == 302
