"""Ports for the live order store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from orderdesk.domain.model import (
        Customer,
        CustomerRecord,
        DiscountCode,
        MenuItem,
        OrderHeaderRecord,
        OrderItemRecord,
    )


@runtime_checkable
class CustomerRepository(Protocol):
    """Persistence contract for customers keyed by mobile number."""

    def find_by_mobile(self, mobile: str) -> CustomerRecord | None: ...

    def add(self, customer: Customer) -> CustomerRecord: ...

    def rename(self, customer_id: str, name: str) -> None: ...


@runtime_checkable
class OrderRepository(Protocol):
    """Persistence contract for order headers."""

    def add(self, header: OrderHeaderRecord) -> str: ...

    def list_headers(self) -> list[OrderHeaderRecord]:
        """Return every header, newest first, with ``customer`` populated."""
        ...

    def delete(self, order_id: str) -> bool: ...


@runtime_checkable
class OrderItemRepository(Protocol):
    """Persistence contract for order line items."""

    def add_many(self, rows: Sequence[OrderItemRecord]) -> None: ...

    def list_for_order(self, order_id: str) -> list[OrderItemRecord]: ...


@runtime_checkable
class MenuItemRepository(Protocol):
    def list_active(self) -> list[MenuItem]: ...


@runtime_checkable
class DiscountCodeRepository(Protocol):
    def list_active(self) -> list[DiscountCode]: ...
