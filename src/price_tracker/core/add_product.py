"""Workflow for registering a new product URL."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from price_tracker.observability.logging import log_event

from .errors import (
    DUPLICATE_PRODUCT_MESSAGE,
    EMPTY_URL_MESSAGE,
    ErrorCode,
    ErrorSlot,
    StateError,
    TrackerError,
    ValidationError,
)
from .models import Product, TransitionEvent
from .store import ProductStore

LOGGER = logging.getLogger(__name__)


class AddState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class CreateBackend(Protocol):
    async def create(self, url: str) -> Product: ...


class AddProductWorkflow:
    """Validates, dedupes and submits the shared URL input.

    The duplicate check is an exact string comparison against stored URLs and
    only saves a round trip; the backend still decides true uniqueness.
    """

    def __init__(self, backend: CreateBackend, store: ProductStore, errors: ErrorSlot) -> None:
        self._backend = backend
        self._store = store
        self._errors = errors
        self._state = AddState.IDLE
        self.url = ""

    @property
    def state(self) -> AddState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is AddState.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return not self.busy

    def set_url(self, url: str) -> None:
        self.url = url

    async def submit(self, url: str | None = None) -> Product | None:
        """Submit ``url`` (or the current input) and return the new product.

        Failures are written to the error slot and ``None`` is returned.
        """

        if self.busy:
            LOGGER.debug("Submission ignored while another add is in flight")
            return None
        if url is not None:
            self.url = url
        candidate = self.url

        self._errors.clear()
        try:
            self._validate(candidate)
        except ValidationError as exc:
            self._errors.report(exc)
            return None

        self._transition(AddState.SUBMITTING, candidate)
        outcome = "failed"
        try:
            product = await self._backend.create(candidate)
        except TrackerError as exc:
            self._errors.report(exc)
            outcome = exc.code.value
            return None
        else:
            try:
                self._store.append(product)
            except StateError as exc:
                # Backend handed back a product we already hold; nothing to add.
                LOGGER.error("%s", exc.message)
            self.url = ""
            outcome = "created"
            return product
        finally:
            self._transition(AddState.IDLE, candidate, detail=outcome)

    def _validate(self, url: str) -> None:
        if not url:
            raise ValidationError(EMPTY_URL_MESSAGE, code=ErrorCode.VALIDATION_EMPTY_URL)
        if self._store.contains_url(url):
            raise ValidationError(
                DUPLICATE_PRODUCT_MESSAGE, code=ErrorCode.VALIDATION_DUPLICATE_URL
            )

    def _transition(self, target: AddState, url: str, detail: str | None = None) -> None:
        previous = self._state
        self._state = target
        log_event(
            TransitionEvent(
                component="add_product",
                subject=url,
                from_state=previous.value,
                to_state=target.value,
                detail=detail,
            ),
            level=logging.DEBUG,
        )


__all__ = ["AddProductWorkflow", "AddState", "CreateBackend"]
