"""Application state coordinator for the tracker client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, Protocol

from price_tracker.observability.logging import setup_logging

from .add_product import AddProductWorkflow
from .client import BackendClient
from .config import Settings
from .errors import ErrorSlot, StateError, TrackerError
from .filters import FilterState
from .models import Product, ProductFilter, ProductId
from .recheck import RecheckCoordinator
from .store import ProductStore
from .views import ProductCard, TrackerHeader, build_header

LOGGER = logging.getLogger(__name__)


class Backend(Protocol):
    async def list(self, product_filter: ProductFilter) -> list[Product]: ...

    async def create(self, url: str) -> Product: ...

    async def recheck(self, url: str) -> None: ...


class TrackerApp:
    """Owns the client-side tracking state and the only paths that mutate it.

    Filter changes, adds and rechecks all funnel through here so that the store
    is only ever replaced by a list response or appended to by a create
    response. Every list request remembers the filter it was issued for; with
    ``discard_stale`` enabled a response whose filter has since changed is
    dropped instead of overwriting a newer result.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        discard_stale: bool = True,
        site_name: str = "Flipkart",
    ) -> None:
        self.backend = backend
        self.discard_stale = discard_stale
        self.site_name = site_name

        self.errors = ErrorSlot()
        self.store = ProductStore()
        self.filters = FilterState()
        self.rechecks = RecheckCoordinator(backend, self.refresh, self.errors.report)
        self.adder = AddProductWorkflow(backend, self.store, self.errors)

        self._pending: set[asyncio.Task[Any]] = set()
        self.filters.subscribe(self._on_filter_change)

    @classmethod
    def from_settings(cls, settings: Settings, *, configure_logging: bool = True) -> TrackerApp:
        """Build an app talking to ``settings.backend_url``.

        Unless ``configure_logging`` is false the root logger is set up from
        ``settings.log_level`` and ``settings.environment`` first.
        """

        if configure_logging:
            setup_logging(settings.log_level, environment=settings.environment)
        LOGGER.info(
            "Tracker client starting",
            extra={"backend_url": str(settings.backend_url), "environment": settings.environment},
        )
        return cls(
            BackendClient(settings),
            discard_stale=settings.discard_stale_responses,
            site_name=settings.site_name,
        )

    async def aclose(self) -> None:
        await self.settle()
        close = getattr(self.backend, "aclose", None)
        if close is not None:
            await close()

    @property
    def error(self) -> str:
        return self.errors.message

    async def start(self) -> None:
        """Initial load of the tracked list."""
        await self.refresh()

    async def refresh(self) -> bool:
        """Fetch the list for the current filter and replace the store.

        Returns ``True`` when the store was replaced. On failure the previous
        contents stay in place and the error is surfaced.
        """

        issued_for = self.filters.snapshot
        try:
            products = await self.backend.list(issued_for)
        except TrackerError as exc:
            self.errors.report(exc)
            return False

        if self.discard_stale and issued_for != self.filters.snapshot:
            LOGGER.debug(
                "Discarding stale list response",
                extra={"issued_for": issued_for.model_dump()},
            )
            return False

        try:
            self.store.replace(products)
        except StateError as exc:
            LOGGER.error("Rejected list response: %s", exc.message)
            return False
        return True

    async def settle(self) -> None:
        """Wait until every scheduled refresh and recheck has finished."""
        while self._pending:
            await asyncio.gather(*tuple(self._pending))

    async def add_product(self, url: str | None = None) -> Product | None:
        return await self.adder.submit(url)

    async def recheck(self, product_id: ProductId) -> bool:
        """Recheck the tracked product ``product_id``.

        Returns ``False`` when the product is unknown or already rechecking.
        """

        product = self.store.get(product_id)
        if product is None:
            LOGGER.error("Recheck requested for untracked product %r", product_id)
            return False
        return await self.rechecks.recheck(product)

    def request_recheck(self, product_id: ProductId) -> asyncio.Task[bool] | None:
        """Schedule a recheck unless the product's control is disabled."""

        if not self.is_rechecking(product_id) and self.store.get(product_id) is not None:
            return self._schedule(self.recheck(product_id))
        return None

    def is_rechecking(self, product_id: ProductId) -> bool:
        return product_id in self.store.ids() and self.rechecks.is_rechecking(product_id)

    def recheck_status(self) -> dict[ProductId, bool]:
        return self.rechecks.status(product.id for product in self.store)

    def cards(self) -> list[ProductCard]:
        busy = self.rechecks.in_flight(self.store.ids())
        return [
            ProductCard.from_product(
                product, busy=product.id in busy, site_name=self.site_name
            )
            for product in self.store
        ]

    def header(self) -> TrackerHeader:
        return build_header(len(self.store), error=self.error, adding=self.adder.busy)

    def _on_filter_change(self, _snapshot: ProductFilter) -> None:
        self._schedule(self.refresh())

    def _schedule(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task


__all__ = ["Backend", "TrackerApp"]
