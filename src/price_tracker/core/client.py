"""Async client for the price backend."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError as SchemaError

from .config import Settings
from .errors import (
    ADD_FAILED_MESSAGE,
    FETCH_FAILED_MESSAGE,
    RECHECK_FAILED_MESSAGE,
    ErrorCode,
    NetworkError,
    ValidationError,
)
from .models import PRODUCT_LIST_ADAPTER, Product, ProductFilter

LOGGER = logging.getLogger(__name__)

PRODUCTS_PATH = "/api/products"
RECHECK_PATH = "/api/products/recheck"


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Return the backend's ``{"error": ...}`` text, or ``fallback``."""

    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        message = data.get("error")
        if isinstance(message, str) and message.strip():
            return message
    return fallback


class BackendClient:
    """Wrapper around the price backend HTTP API."""

    def __init__(self, settings: Settings, *, timeout: float | None = None) -> None:
        self._settings = settings
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._client = httpx.AsyncClient(
            base_url=str(settings.backend_url),
            timeout=self._timeout,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def list(self, product_filter: ProductFilter) -> list[Product]:
        """Fetch the tracked products matching ``product_filter``."""

        params = product_filter.to_query_params()
        try:
            response = await self._client.get(PRODUCTS_PATH, params=params)
        except httpx.HTTPError as exc:
            LOGGER.warning("Listing products failed: %s", exc)
            raise NetworkError(FETCH_FAILED_MESSAGE) from exc

        if not response.is_success:
            LOGGER.warning("Listing products returned %s", response.status_code)
            raise NetworkError(
                FETCH_FAILED_MESSAGE,
                code=ErrorCode.NET_BAD_STATUS,
                status_code=response.status_code,
            )

        try:
            products = PRODUCT_LIST_ADAPTER.validate_python(response.json())
        except (ValueError, SchemaError) as exc:
            LOGGER.warning("Product list response could not be decoded: %s", exc)
            raise NetworkError(
                FETCH_FAILED_MESSAGE, code=ErrorCode.NET_INVALID_RESPONSE
            ) from exc

        LOGGER.debug("Fetched %d products", len(products), extra={"params": params})
        return products

    async def create(self, url: str) -> Product:
        """Register ``url`` for tracking and return the created product."""

        response = await self._post(PRODUCTS_PATH, {"url": url}, ADD_FAILED_MESSAGE)
        try:
            product = Product.model_validate(response.json())
        except (ValueError, SchemaError) as exc:
            LOGGER.warning("Create response could not be decoded: %s", exc)
            raise NetworkError(ADD_FAILED_MESSAGE, code=ErrorCode.NET_INVALID_RESPONSE) from exc

        LOGGER.info("Started tracking product %s", product.id, extra={"url": url})
        return product

    async def recheck(self, url: str) -> None:
        """Ask the backend to re-scrape the price for ``url``."""

        await self._post(RECHECK_PATH, {"url": url}, RECHECK_FAILED_MESSAGE)
        LOGGER.info("Recheck accepted", extra={"url": url})

    async def _post(self, path: str, payload: dict[str, Any], fallback: str) -> httpx.Response:
        try:
            response = await self._client.post(path, json=payload)
        except httpx.HTTPError as exc:
            LOGGER.warning("POST %s failed: %s", path, exc)
            raise NetworkError(fallback) from exc

        if response.is_client_error:
            message = _error_message(response, fallback)
            LOGGER.info("POST %s rejected (%s): %s", path, response.status_code, message)
            raise ValidationError(message, status_code=response.status_code)
        if not response.is_success:
            LOGGER.warning("POST %s returned %s", path, response.status_code)
            raise NetworkError(
                fallback, code=ErrorCode.NET_BAD_STATUS, status_code=response.status_code
            )
        return response


__all__ = ["BackendClient", "PRODUCTS_PATH", "RECHECK_PATH"]
