"""Persist new orders as header plus line items."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .customers import resolve_customer
from .errors import InvalidOrderError
from .model import OrderHeaderRecord, OrderItemRecord

if TYPE_CHECKING:
    from collections.abc import Callable

    from .model import Order
    from .ports.unit_of_work import OrderStoreUnitOfWork

log = getLogger(__name__)


def validate_order(order: Order) -> None:
    """Reject orders the store should never see."""

    if not order.items:
        raise InvalidOrderError(f"Order {order.id} has no items")
    if not order.customer.mobile.strip() or not order.customer.name.strip():
        raise InvalidOrderError(f"Order {order.id} is missing customer details")
    if not order.totals_consistent():
        raise InvalidOrderError(
            f"Order {order.id} totals do not add up: subtotal={order.subtotal}, "
            f"discount={order.discount_amount}, tax={order.tax_amount}, total={order.total}"
        )


def write_order(
    unit_of_work_factory: Callable[[], OrderStoreUnitOfWork],
    order: Order,
) -> str:
    """Store ``order`` and return the store id of its header.

    The customer is resolved and committed first. Header and items are committed
    together afterwards, so a failed item insert leaves no orphan header behind.
    Store failures propagate; nothing is retried.
    """

    validate_order(order)
    log.info("Creating order %s", order.id)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        customer = resolve_customer(repositories.customers, order.customer)
        uow.commit()

        order_id = repositories.orders.add(
            OrderHeaderRecord(
                order_number=order.id,
                customer_id=customer.id,
                subtotal=order.subtotal,
                discount_code=order.discount_code,
                discount_amount=order.discount_amount,
                tax_rate=order.tax_rate,
                tax_amount=order.tax_amount,
                total=order.total,
                payment_type=order.payment_type,
                status=order.status,
                created_at=order.timestamp,
            )
        )
        rows = [
            OrderItemRecord(
                order_id=order_id,
                menu_item_id=item.menu_item.id,
                name=item.menu_item.name,
                category=item.menu_item.category,
                description=item.menu_item.description,
                unit_price=item.unit_price,
                quantity=item.quantity,
                total_price=item.line_total,
                position=position,
            )
            for position, item in enumerate(order.items)
        ]
        repositories.order_items.add_many(rows)
        uow.commit()

    log.info("Created order %s as %s with %d item(s)", order.id, order_id, len(rows))
    return order_id
