"""View models describing what the tracker page renders.

These carry display-ready values only; layout and chart drawing belong to
whatever front end consumes them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .formatting import calculate_discount, format_price
from .models import PricePoint, Product, ProductId


class ProductCard(BaseModel):
    id: ProductId
    title: str
    description: str
    price_label: str
    discount_percent: int | None = None
    discount_label: str | None = None
    ratings_label: str
    purchases_label: str
    show_trend: bool
    trend: list[PricePoint] = Field(default_factory=list)
    url: str
    link_label: str
    recheck_busy: bool = False
    recheck_disabled: bool = False

    @classmethod
    def from_product(cls, product: Product, *, busy: bool, site_name: str) -> ProductCard:
        discount = calculate_discount(product.original_price, product.current_price)
        ratings = product.ratings if product.ratings is not None else 0
        return cls(
            id=product.id,
            title=product.title,
            description=product.description,
            price_label=format_price(product.current_price),
            discount_percent=discount,
            discount_label=f"{discount}% off" if discount and discount > 0 else None,
            ratings_label=f"{ratings:g}",
            purchases_label=f"{product.purchases} Purchases",
            show_trend=product.has_trend,
            trend=list(product.price_history),
            url=product.url,
            link_label=f"View on {site_name}",
            recheck_busy=busy,
            recheck_disabled=busy,
        )


class TrackerHeader(BaseModel):
    product_count: int
    product_count_label: str
    error: str = ""
    adding: bool = False
    add_button_label: str = "Add Product"


def build_header(product_count: int, *, error: str, adding: bool) -> TrackerHeader:
    return TrackerHeader(
        product_count=product_count,
        product_count_label=f"{product_count} Products",
        error=error,
        adding=adding,
        add_button_label="Adding..." if adding else "Add Product",
    )


__all__ = ["ProductCard", "TrackerHeader", "build_header"]
