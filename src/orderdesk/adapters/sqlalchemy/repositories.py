"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from functools import wraps
from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from orderdesk.adapters.sqlalchemy.mappings import (
    customer_table,
    discount_code_table,
    menu_item_table,
    order_item_table,
    order_table,
)
from orderdesk.domain.errors import OrderStoreError
from orderdesk.domain.model import (
    CustomerRecord,
    DiscountCode,
    MenuItem,
    OrderHeaderRecord,
    OrderItemRecord,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy import CursorResult, Row
    from sqlalchemy.orm import Session

    from orderdesk.domain.model import Customer


def translate_errors[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Re-raise SQLAlchemy failures as ``OrderStoreError``."""

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as exc:
            raise OrderStoreError(f"{func.__qualname__} failed: {exc}") from exc

    return wrapper


def _new_id() -> str:
    return str(uuid.uuid4())


class SqlAlchemyCustomerRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    @translate_errors
    def find_by_mobile(self, mobile: str) -> CustomerRecord | None:
        stmt = (
            select(customer_table.c.id, customer_table.c.name, customer_table.c.mobile)
            .where(customer_table.c.mobile == mobile)
            .limit(1)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        return CustomerRecord(id=row.id, name=row.name, mobile=row.mobile)

    @translate_errors
    def add(self, customer: Customer) -> CustomerRecord:
        record = CustomerRecord(id=_new_id(), name=customer.name, mobile=customer.mobile)
        self.session.execute(
            insert(customer_table).values(
                id=record.id,
                name=record.name,
                mobile=record.mobile,
                created_at=datetime.now(UTC),
            )
        )
        return record

    @translate_errors
    def rename(self, customer_id: str, name: str) -> None:
        # savepoint keeps a failed rename from aborting the caller's transaction
        with self.session.begin_nested():
            self.session.execute(
                update(customer_table).where(customer_table.c.id == customer_id).values(name=name)
            )


class SqlAlchemyOrderRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    @translate_errors
    def add(self, header: OrderHeaderRecord) -> str:
        order_id = header.id or _new_id()
        self.session.execute(
            insert(order_table).values(
                id=order_id,
                order_number=header.order_number,
                customer_id=header.customer_id,
                subtotal=header.subtotal,
                discount_code=header.discount_code,
                discount_amount=header.discount_amount,
                tax_rate=header.tax_rate,
                tax_amount=header.tax_amount,
                total=header.total,
                payment_type=header.payment_type,
                status=header.status,
                created_at=header.created_at,
            )
        )
        return order_id

    @translate_errors
    def list_headers(self) -> list[OrderHeaderRecord]:
        stmt = (
            select(
                order_table,
                customer_table.c.name.label("customer_name"),
                customer_table.c.mobile.label("customer_mobile"),
            )
            .join(customer_table, customer_table.c.id == order_table.c.customer_id)
            .order_by(order_table.c.created_at.desc(), order_table.c.order_number.desc())
        )
        return [self._header_from_row(row) for row in self.session.execute(stmt)]

    @translate_errors
    def delete(self, order_id: str) -> bool:
        self.session.execute(
            delete(order_item_table).where(order_item_table.c.order_id == order_id)
        )
        result = cast(
            "CursorResult[tuple[()]]",
            self.session.execute(delete(order_table).where(order_table.c.id == order_id)),
        )
        return result.rowcount > 0

    @staticmethod
    def _header_from_row(row: Row[tuple[object, ...]]) -> OrderHeaderRecord:
        data = row._mapping  # noqa: SLF001
        return OrderHeaderRecord(
            id=data["id"],
            order_number=data["order_number"],
            customer_id=data["customer_id"],
            customer=CustomerRecord(
                id=data["customer_id"],
                name=data["customer_name"],
                mobile=data["customer_mobile"],
            ),
            subtotal=data["subtotal"],
            discount_code=data["discount_code"],
            discount_amount=data["discount_amount"],
            tax_rate=data["tax_rate"],
            tax_amount=data["tax_amount"],
            total=data["total"],
            payment_type=data["payment_type"],
            status=data["status"],
            created_at=data["created_at"],
        )


class SqlAlchemyOrderItemRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    @translate_errors
    def add_many(self, rows: Sequence[OrderItemRecord]) -> None:
        if not rows:
            return
        self.session.execute(
            insert(order_item_table),
            [
                {
                    "order_id": row.order_id,
                    "position": row.position,
                    "menu_item_id": row.menu_item_id,
                    "name": row.name,
                    "category": row.category,
                    "description": row.description,
                    "unit_price": row.unit_price,
                    "quantity": row.quantity,
                    "total_price": row.total_price,
                }
                for row in rows
            ],
        )

    @translate_errors
    def list_for_order(self, order_id: str) -> list[OrderItemRecord]:
        stmt = (
            select(order_item_table)
            .where(order_item_table.c.order_id == order_id)
            .order_by(order_item_table.c.position, order_item_table.c.id)
        )
        return [
            OrderItemRecord(
                order_id=row.order_id,
                menu_item_id=row.menu_item_id,
                name=row.name,
                category=row.category,
                description=row.description,
                unit_price=row.unit_price,
                quantity=row.quantity,
                total_price=row.total_price,
                position=row.position,
            )
            for row in self.session.execute(stmt)
        ]


class SqlAlchemyMenuItemRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    @translate_errors
    def list_active(self) -> list[MenuItem]:
        stmt = (
            select(menu_item_table)
            .where(menu_item_table.c.is_active.is_(True))
            .order_by(menu_item_table.c.category, menu_item_table.c.id)
        )
        return [
            MenuItem(
                id=row.id,
                name=row.name,
                price=row.price,
                category=row.category,
                description=row.description,
                images=tuple(row.images or ()),
            )
            for row in self.session.execute(stmt)
        ]


class SqlAlchemyDiscountCodeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    @translate_errors
    def list_active(self) -> list[DiscountCode]:
        stmt = (
            select(discount_code_table)
            .where(discount_code_table.c.is_active.is_(True))
            .order_by(discount_code_table.c.code)
        )
        return [
            DiscountCode(
                code=row.code,
                type=row.type,
                value=row.value,
                description=row.description,
            )
            for row in self.session.execute(stmt)
        ]


if TYPE_CHECKING:
    from orderdesk.domain.ports.persistence import (
        CustomerRepository,
        DiscountCodeRepository,
        MenuItemRepository,
        OrderItemRepository,
        OrderRepository,
    )

    _session_stub = cast("Session", object())
    _customer_repo: CustomerRepository = SqlAlchemyCustomerRepository(_session_stub)
    _order_repo: OrderRepository = SqlAlchemyOrderRepository(_session_stub)
    _item_repo: OrderItemRepository = SqlAlchemyOrderItemRepository(_session_stub)
    _menu_repo: MenuItemRepository = SqlAlchemyMenuItemRepository(_session_stub)
    _code_repo: DiscountCodeRepository = SqlAlchemyDiscountCodeRepository(_session_stub)
