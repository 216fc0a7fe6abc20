"""In-memory ordered collection of tracked products."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .errors import ErrorCode, StateError
from .models import Product, ProductId

LOGGER = logging.getLogger(__name__)


class ProductStore:
    """Source of truth for the tracked product list.

    Only two mutations exist: :meth:`replace` with an authoritative list
    response and :meth:`append` with a freshly created product. Each one
    swaps the underlying tuple in a single assignment, so readers never
    observe a half-applied change.
    """

    def __init__(self) -> None:
        self._products: tuple[Product, ...] = ()

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def get(self, product_id: ProductId) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def ids(self) -> set[ProductId]:
        return {product.id for product in self._products}

    def contains_url(self, url: str) -> bool:
        """Exact string match against stored product URLs."""
        return any(product.url == url for product in self._products)

    def replace(self, products: Iterable[Product]) -> None:
        """Overwrite the store with a full list response.

        Raises:
            StateError: The response repeats a product id. The store is left as it was.
        """

        incoming = tuple(products)
        seen: set[ProductId] = set()
        for product in incoming:
            if product.id in seen:
                raise StateError(
                    f"Duplicate product id {product.id!r} in list response",
                    code=ErrorCode.STATE_DUPLICATE_ID,
                )
            seen.add(product.id)

        dropped = self.ids() - seen
        if dropped:
            LOGGER.debug("Dropping %d products absent from list response", len(dropped))
        self._products = incoming

    def append(self, product: Product) -> None:
        """Add a single newly created product at the end.

        Raises:
            StateError: A product with the same id is already stored.
        """

        if any(existing.id == product.id for existing in self._products):
            raise StateError(
                f"Product id {product.id!r} is already tracked",
                code=ErrorCode.STATE_DUPLICATE_ID,
            )
        self._products = (*self._products, product)


__all__ = ["ProductStore"]
