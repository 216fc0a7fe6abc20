"""Domain models exchanged with the price backend."""

from __future__ import annotations

from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

ProductId: TypeAlias = int | str


class PricePoint(BaseModel):
    """A single observation in a product's price history."""

    model_config = ConfigDict(extra="ignore")

    date: str = Field(description="Observation date exactly as sent by the backend.")
    price: float = Field(ge=0, description="Observed price.")

    @field_validator("date", mode="before")
    @classmethod
    def _stringify_date(cls, value: Any) -> Any:
        if value is None:
            return value
        return str(value)


class Product(BaseModel):
    """A tracked product as returned by ``/api/products``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: ProductId = Field(description="Server-assigned identifier, stable for the product.")
    url: str = Field(description="Canonical source URL.")
    title: str = Field(default="", description="Display title, may be empty.")
    description: str = Field(default="", description="Display description, may be empty.")
    current_price: float = Field(default=0.0, ge=0)
    original_price: float | None = Field(
        default=None,
        ge=0,
        description="Listed price before discount when the backend knows it.",
    )
    ratings: float | None = Field(default=None, description="Rating score, may be absent.")
    purchases: int = Field(default=0, ge=0)
    price_history: list[PricePoint] = Field(
        default_factory=list,
        description="Chronological price points; never reordered by the client.",
    )

    @field_validator("title", "description", mode="before")
    @classmethod
    def _blank_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("current_price", "purchases", mode="before")
    @classmethod
    def _zero_when_missing(cls, value: Any) -> Any:
        # Backend sends null when a scrape found no price yet.
        return 0 if value is None else value

    @field_validator("price_history", mode="before")
    @classmethod
    def _empty_history(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def has_trend(self) -> bool:
        return bool(self.price_history)


class ProductFilter(BaseModel):
    """Immutable snapshot of the active list filter."""

    model_config = ConfigDict(frozen=True)

    search: str = ""
    min_price: float | None = None
    max_price: float | None = None

    def to_query_params(self) -> dict[str, str]:
        """Return query parameters for ``GET /api/products``, omitting absent bounds.

        Whole-number bounds go out without a decimal part (``500``, not ``500.0``).
        """

        params = {"search": self.search}
        if self.min_price is not None:
            params["min_price"] = _format_bound(self.min_price)
        if self.max_price is not None:
            params["max_price"] = _format_bound(self.max_price)
        return params


def _format_bound(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class TransitionEvent(BaseModel):
    """Structured log record for a workflow state transition."""

    component: str
    subject: str | None = None
    from_state: str
    to_state: str
    detail: str | None = None


PRODUCT_LIST_ADAPTER: TypeAdapter[list[Product]] = TypeAdapter(list[Product])


__all__ = [
    "PRODUCT_LIST_ADAPTER",
    "PricePoint",
    "Product",
    "ProductFilter",
    "ProductId",
    "TransitionEvent",
]
