"""Catalog reference data: menu items and discount codes."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .enums import DiscountType


@dataclass(frozen=True, slots=True)
class MenuItem:
    """A catalog entry. Orders keep a copy of it rather than a reference."""

    id: str
    name: str
    price: Decimal
    category: str
    description: str = ""
    images: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"Menu item {self.name!r} has a negative price")


@dataclass(frozen=True, slots=True)
class DiscountCode:
    code: str
    type: DiscountType
    value: Decimal
    description: str = ""

    def amount_for(self, subtotal: Decimal) -> Decimal:
        """Return the discount this code grants on ``subtotal``."""

        if subtotal <= 0:
            return Decimal(0)
        if self.type is DiscountType.PERCENTAGE:
            return subtotal * self.value / Decimal(100)
        return min(self.value, subtotal)
