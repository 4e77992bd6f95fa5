"""Canonical order representation shared by every order source."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from .enums import OrderSource, OrderStatus, PaymentType

if TYPE_CHECKING:
    from datetime import datetime

    from .catalog import MenuItem

MONEY_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class Customer:
    """Customer details as denormalised onto an order."""

    name: str
    mobile: str


@dataclass(frozen=True, slots=True)
class OrderItem:
    """A menu item snapshot plus the ordered quantity."""

    menu_item: MenuItem
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Quantity must be positive, got {self.quantity}")

    @property
    def unit_price(self) -> Decimal:
        return self.menu_item.price

    @property
    def line_total(self) -> Decimal:
        return self.menu_item.price * self.quantity


@dataclass(frozen=True, slots=True)
class Order:
    id: str
    customer: Customer
    items: tuple[OrderItem, ...]
    subtotal: Decimal
    discount_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    payment_type: PaymentType
    timestamp: datetime
    status: OrderStatus = OrderStatus.COMPLETED
    db_id: str | None = None
    discount_code: str | None = None
    outlet: str | None = None
    source: OrderSource = field(default=OrderSource.LIVE, compare=False)

    def totals_consistent(self, tolerance: Decimal = MONEY_TOLERANCE) -> bool:
        """Check the total and tax invariants within ``tolerance``."""

        taxable = self.subtotal - self.discount_amount
        expected_tax = taxable * self.tax_rate
        expected_total = taxable + self.tax_amount
        return (
            abs(self.tax_amount - expected_tax) <= tolerance
            and abs(self.total - expected_total) <= tolerance
        )

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
