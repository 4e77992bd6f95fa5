"""Rebuild canonical orders from the live store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .errors import OrderStoreError
from .model import Customer, MenuItem, Order, OrderItem, OrderSource

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .model import OrderHeaderRecord, OrderItemRecord
    from .ports.unit_of_work import OrderStoreUnitOfWork

log = getLogger(__name__)

UNKNOWN_CUSTOMER = Customer(name="Unknown Customer", mobile="Unknown Mobile")


def read_orders(unit_of_work_factory: Callable[[], OrderStoreUnitOfWork]) -> list[Order]:
    """Return every stored order with its line items, newest first.

    Item lookups run one order at a time. If the items of an order cannot be
    fetched, that order is left out and the scan continues; a failure to list the
    headers themselves propagates.
    """

    orders: list[Order] = []
    with unit_of_work_factory() as uow:
        headers = uow.repositories.orders.list_headers()
        for header in headers:
            if header.id is None:
                continue
            try:
                rows = uow.repositories.order_items.list_for_order(header.id)
            except OrderStoreError:
                log.exception("Error fetching items for order %s", header.id)
                uow.rollback()
                continue
            orders.append(order_from_records(header, rows))

    log.info("Fetched %d order(s) from the live store", len(orders))
    return orders


def order_from_records(header: OrderHeaderRecord, rows: Sequence[OrderItemRecord]) -> Order:
    customer = (
        Customer(name=header.customer.name, mobile=header.customer.mobile)
        if header.customer is not None
        else UNKNOWN_CUSTOMER
    )
    items = tuple(
        OrderItem(
            menu_item=MenuItem(
                id=row.menu_item_id,
                name=row.name,
                price=row.unit_price,
                category=row.category,
                description=row.description,
            ),
            quantity=row.quantity,
        )
        for row in sorted(rows, key=lambda row: row.position)
    )
    return Order(
        id=header.order_number,
        db_id=header.id,
        customer=customer,
        items=items,
        subtotal=header.subtotal,
        discount_code=header.discount_code,
        discount_amount=header.discount_amount,
        tax_rate=header.tax_rate,
        tax_amount=header.tax_amount,
        total=header.total,
        payment_type=header.payment_type,
        timestamp=header.created_at,
        status=header.status,
        outlet=None,
        source=OrderSource.LIVE,
    )
