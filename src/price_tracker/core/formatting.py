"""Display formatting for prices and discounts."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

RUPEE_SYMBOL = "₹"


def _group_indian(digits: str) -> str:
    """Group an integer digit string the en-IN way (12,34,567)."""

    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_price(value: float | int | Decimal | None) -> str:
    """Render ``value`` as Indian rupees, e.g. ``₹1,23,456.50``."""

    if value is None:
        value = 0
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):.2f}".partition(".")
    return f"{sign}{RUPEE_SYMBOL}{_group_indian(whole)}.{fraction}"


def calculate_discount(original: float | None, current: float | None) -> int | None:
    """Percentage saved from ``original`` to ``current``, rounded half up.

    Returns ``None`` when there is no usable original price.
    """

    if original is None or current is None or original <= 0:
        return None
    return math.floor((original - current) / original * 100 + 0.5)


__all__ = ["RUPEE_SYMBOL", "calculate_discount", "format_price"]
