"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class PaymentType(StrEnum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"


class OrderStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DiscountType(StrEnum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class OrderSource(StrEnum):
    """Where a canonical order came from."""

    LIVE = "live"
    BULK = "bulk"
