"""Search and price-bound filter state."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from .errors import ErrorCode, ValidationError
from .models import ProductFilter

LOGGER = logging.getLogger(__name__)

FilterListener = Callable[[ProductFilter], None]

_UNSET = object()


def parse_bound(raw: str | float | int | None) -> float | None:
    """Convert a price-bound input into a number, or ``None`` for "no constraint".

    Empty input clears the bound; it is never read as zero.
    """

    if raw is None:
        return None
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError as exc:
            raise ValidationError(
                f"Price bound must be a number: {raw!r}", code=ErrorCode.VALIDATION_INVALID_BOUND
            ) from exc
    else:
        value = float(raw)
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise ValidationError(
            f"Price bound must be a non-negative number: {raw!r}",
            code=ErrorCode.VALIDATION_INVALID_BOUND,
        )
    return value


class FilterState:
    """Holds the current :class:`ProductFilter` and notifies listeners on change."""

    def __init__(self, initial: ProductFilter | None = None) -> None:
        self._snapshot = initial or ProductFilter()
        self._listeners: list[FilterListener] = []

    @property
    def snapshot(self) -> ProductFilter:
        return self._snapshot

    def subscribe(self, listener: FilterListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_search(self, text: str | None) -> bool:
        return self.update(search=text or "")

    def set_min_price(self, raw: str | float | int | None) -> bool:
        return self.update(min_price=raw)

    def set_max_price(self, raw: str | float | int | None) -> bool:
        return self.update(max_price=raw)

    def update(
        self,
        *,
        search: object = _UNSET,
        min_price: object = _UNSET,
        max_price: object = _UNSET,
    ) -> bool:
        """Apply any subset of fields at once.

        Returns ``True`` when the snapshot changed. Listeners only fire on change.
        Invalid bounds raise :class:`ValidationError` and leave the filter untouched.
        """

        changes: dict[str, object] = {}
        if search is not _UNSET:
            changes["search"] = str(search or "")
        if min_price is not _UNSET:
            changes["min_price"] = parse_bound(min_price)  # type: ignore[arg-type]
        if max_price is not _UNSET:
            changes["max_price"] = parse_bound(max_price)  # type: ignore[arg-type]

        candidate = self._snapshot.model_copy(update=changes)
        if candidate == self._snapshot:
            return False

        self._snapshot = candidate
        LOGGER.debug("Filter changed", extra={"product_filter": candidate.model_dump()})
        for listener in list(self._listeners):
            listener(candidate)
        return True


__all__ = ["FilterListener", "FilterState", "parse_bound"]
