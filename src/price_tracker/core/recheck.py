"""Per-product recheck state machine."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from typing import Protocol

from price_tracker.observability.logging import log_event

from .errors import TrackerError
from .models import Product, ProductId, TransitionEvent

LOGGER = logging.getLogger(__name__)


class RecheckState(str, Enum):
    IDLE = "idle"
    RECHECKING = "rechecking"


class RecheckBackend(Protocol):
    async def recheck(self, url: str) -> None: ...


class RecheckCoordinator:
    """Tracks which products have a recheck in flight.

    State is keyed by product id, never by list position, because a refetch may
    reorder the store while a recheck is running. A product is ``RECHECKING``
    from the moment its recheck request is issued until the follow-up list
    refetch has completed, whatever the outcome of either call.
    """

    def __init__(
        self,
        backend: RecheckBackend,
        refresh: Callable[[], Awaitable[object]],
        report_error: Callable[[TrackerError], None],
    ) -> None:
        self._backend = backend
        self._refresh = refresh
        self._report_error = report_error
        self._states: dict[ProductId, RecheckState] = {}

    def state(self, product_id: ProductId) -> RecheckState:
        return self._states.get(product_id, RecheckState.IDLE)

    def is_rechecking(self, product_id: ProductId) -> bool:
        return self.state(product_id) is RecheckState.RECHECKING

    def in_flight(self, tracked_ids: Iterable[ProductId]) -> frozenset[ProductId]:
        """Ids among ``tracked_ids`` with a recheck running."""

        return frozenset(self._states).intersection(tracked_ids)

    def status(self, tracked_ids: Iterable[ProductId]) -> dict[ProductId, bool]:
        """Busy flags for ``tracked_ids`` only; untracked ids never appear busy."""

        return {product_id: self.is_rechecking(product_id) for product_id in tracked_ids}

    async def recheck(self, product: Product) -> bool:
        """Run a recheck for ``product``.

        Returns ``False`` without doing anything when a recheck for the same
        product is already running.
        """

        if self.is_rechecking(product.id):
            LOGGER.debug("Recheck for %s already in flight, ignoring", product.id)
            return False

        self._transition(product.id, RecheckState.RECHECKING)
        try:
            try:
                await self._backend.recheck(product.url)
            except TrackerError as exc:
                self._report_error(exc)
            await self._refresh()
        finally:
            self._transition(product.id, RecheckState.IDLE)
        return True

    def _transition(self, product_id: ProductId, target: RecheckState) -> None:
        previous = self.state(product_id)
        if target is RecheckState.IDLE:
            self._states.pop(product_id, None)
        else:
            self._states[product_id] = target
        log_event(
            TransitionEvent(
                component="recheck",
                subject=str(product_id),
                from_state=previous.value,
                to_state=target.value,
            ),
            level=logging.DEBUG,
        )


__all__ = ["RecheckBackend", "RecheckCoordinator", "RecheckState"]
