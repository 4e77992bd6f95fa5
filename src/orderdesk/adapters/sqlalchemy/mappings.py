"""SQLAlchemy table metadata for the live order store."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    func,
    select,
)

from orderdesk.domain.model import DiscountType, OrderStatus, PaymentType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.engine import Engine

    from orderdesk.domain.model import DiscountCode, MenuItem

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class DecimalText(TypeDecorator[Decimal]):
    """Store money as its exact decimal string so every backend round-trips it."""

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> Decimal | None:
        _ = dialect
        if value is None:
            return None
        return Decimal(value)


def _enum_column(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
    )


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

customer_table = Table(
    "customer",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String, nullable=False),
    Column("mobile", String(32), nullable=False, unique=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
)

menu_item_table = Table(
    "menu_item",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String, nullable=False),
    Column("price", DecimalText(), nullable=False),
    Column("category", String, nullable=False),
    Column("description", String, nullable=False, default=""),
    Column("images", JSON, nullable=False, default=list),
    Column("is_active", Boolean, nullable=False, default=True),
)

discount_code_table = Table(
    "discount_code",
    metadata,
    Column("code", String(64), primary_key=True),
    Column("type", _enum_column(DiscountType), nullable=False),
    Column("value", DecimalText(), nullable=False),
    Column("description", String, nullable=False, default=""),
    Column("is_active", Boolean, nullable=False, default=True),
)

order_table = Table(
    "customer_order",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("order_number", String(64), nullable=False),
    Column(
        "customer_id",
        String(36),
        ForeignKey("customer.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("subtotal", DecimalText(), nullable=False),
    Column("discount_code", String(64), nullable=True),
    Column("discount_amount", DecimalText(), nullable=False),
    Column("tax_rate", DecimalText(), nullable=False),
    Column("tax_amount", DecimalText(), nullable=False),
    Column("total", DecimalText(), nullable=False),
    Column("payment_type", _enum_column(PaymentType), nullable=False),
    Column("status", _enum_column(OrderStatus), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_customer_order_created_at", "created_at"),
)

order_item_table = Table(
    "order_item",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "order_id",
        String(36),
        ForeignKey("customer_order.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("position", Integer, nullable=False, default=0),
    Column("menu_item_id", String(36), nullable=False),
    Column("name", String, nullable=False),
    Column("category", String, nullable=False),
    Column("description", String, nullable=False, default=""),
    Column("unit_price", DecimalText(), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("total_price", DecimalText(), nullable=False),
    Index("ix_order_item_order_id", "order_id"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the store metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)


def seed_catalog(
    engine: Engine,
    *,
    menu_items: Iterable[MenuItem],
    discount_codes: Iterable[DiscountCode],
) -> bool:
    """Insert catalog rows when the menu table is still empty.

    Returns whether anything was inserted.
    """

    with engine.begin() as connection:
        existing = connection.execute(select(func.count()).select_from(menu_item_table)).scalar()
        if existing:
            return False
        menu_rows = [
            {
                "id": item.id,
                "name": item.name,
                "price": item.price,
                "category": item.category,
                "description": item.description,
                "images": list(item.images),
                "is_active": True,
            }
            for item in menu_items
        ]
        code_rows = [
            {
                "code": code.code,
                "type": code.type,
                "value": code.value,
                "description": code.description,
                "is_active": True,
            }
            for code in discount_codes
        ]
        if menu_rows:
            connection.execute(menu_item_table.insert(), menu_rows)
        if code_rows:
            connection.execute(discount_code_table.insert(), code_rows)
    log.info(
        "Seeded catalog with %d item(s) and %d discount code(s)", len(menu_rows), len(code_rows)
    )
    return True
