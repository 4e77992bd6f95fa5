"""Domain model for orders, customers and catalog data."""

from __future__ import annotations

from .catalog import DiscountCode, MenuItem
from .enums import DiscountType, OrderSource, OrderStatus, PaymentType
from .order import MONEY_TOLERANCE, Customer, Order, OrderItem
from .records import CustomerRecord, OrderHeaderRecord, OrderItemRecord

__all__ = [
    "MONEY_TOLERANCE",
    "Customer",
    "CustomerRecord",
    "DiscountCode",
    "DiscountType",
    "MenuItem",
    "Order",
    "OrderHeaderRecord",
    "OrderItem",
    "OrderItemRecord",
    "OrderSource",
    "OrderStatus",
    "PaymentType",
]
