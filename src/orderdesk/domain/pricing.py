"""Order total calculations and assembly of new orders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Final

from .model import (
    Customer,
    DiscountCode,
    DiscountType,
    Order,
    OrderItem,
    OrderSource,
    OrderStatus,
    PaymentType,
)
from .outlets import outlet_code

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

TAX_RATE: Final[Decimal] = Decimal("0.10")


@dataclass(frozen=True, slots=True)
class OrderTotals:
    subtotal: Decimal
    discount_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal


def compute_totals(
    items: Iterable[OrderItem],
    *,
    discount: DiscountCode | None = None,
    tax_rate: Decimal = TAX_RATE,
) -> OrderTotals:
    """Compute subtotal, discount, tax and total for ``items``.

    Tax is charged on the discounted subtotal.
    """

    subtotal = sum((item.line_total for item in items), Decimal(0))
    discount_amount = discount.amount_for(subtotal) if discount is not None else Decimal(0)
    taxable = subtotal - discount_amount
    tax_amount = taxable * tax_rate
    return OrderTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax_rate=tax_rate,
        tax_amount=tax_amount,
        total=taxable + tax_amount,
    )


def percentage_discount(percent: Decimal | int | str) -> DiscountCode:
    """Build an ad-hoc percentage discount labelled like ``"12.5%"``."""

    value = Decimal(str(percent))
    if value < 0 or value > 100:  # noqa: PLR2004
        raise ValueError(f"Discount percentage out of range: {percent}")
    return DiscountCode(
        code=f"{value.normalize():f}%",
        type=DiscountType.PERCENTAGE,
        value=value,
        description=f"{value.normalize():f}% manual discount",
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)


def display_order_number(outlet: str | None, timestamp: datetime) -> str:
    """Return ``<outletCode>-<epochMillis>`` for a newly placed order."""

    return f"{outlet_code(outlet)}-{epoch_millis(timestamp)}"


def epoch_millis(timestamp: datetime) -> int:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return int(timestamp.timestamp() * 1000)


def build_order(
    *,
    customer: Customer,
    items: Iterable[OrderItem],
    payment_type: PaymentType,
    discount: DiscountCode | None = None,
    outlet: str | None = None,
    status: OrderStatus = OrderStatus.COMPLETED,
    tax_rate: Decimal = TAX_RATE,
    clock: Callable[[], datetime] = _utcnow,
) -> Order:
    """Assemble a fully priced order ready for ``OrderBook.create_order``.

    ``outlet`` only picks the display id prefix; live orders carry no outlet.
    """

    line_items = tuple(items)
    if not line_items:
        raise ValueError("An order needs at least one item")
    totals = compute_totals(line_items, discount=discount, tax_rate=tax_rate)
    placed_at = clock()
    return Order(
        id=display_order_number(outlet, placed_at),
        customer=customer,
        items=line_items,
        subtotal=totals.subtotal,
        discount_code=discount.code if discount is not None else None,
        discount_amount=totals.discount_amount,
        tax_rate=totals.tax_rate,
        tax_amount=totals.tax_amount,
        total=totals.total,
        payment_type=payment_type,
        timestamp=placed_at,
        status=status,
        source=OrderSource.LIVE,
    )
