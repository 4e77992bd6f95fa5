"""Row shapes exchanged with the live store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal

    from .enums import OrderStatus, PaymentType


@dataclass(frozen=True, slots=True)
class CustomerRecord:
    """A customer as known to the live store, with its store-assigned id."""

    id: str
    name: str
    mobile: str


@dataclass(frozen=True, slots=True)
class OrderHeaderRecord:
    """An order header row.

    ``id`` and ``customer`` are filled in by the store when reading; writers leave
    them unset and provide ``customer_id`` instead.
    """

    order_number: str
    customer_id: str
    subtotal: Decimal
    discount_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    payment_type: PaymentType
    status: OrderStatus
    created_at: datetime
    discount_code: str | None = None
    id: str | None = None
    customer: CustomerRecord | None = None


@dataclass(frozen=True, slots=True)
class OrderItemRecord:
    """An order line item row carrying the menu item snapshot taken at write time."""

    order_id: str
    menu_item_id: str
    name: str
    category: str
    unit_price: Decimal
    quantity: int
    total_price: Decimal
    position: int = 0
    description: str = ""
