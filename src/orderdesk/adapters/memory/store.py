"""In-memory order store used when no live database is configured."""

from __future__ import annotations

import dataclasses
import itertools
from dataclasses import dataclass, field
from logging import getLogger
from threading import Lock
from typing import TYPE_CHECKING, Literal

from orderdesk.domain.catalog import DEFAULT_DISCOUNT_CODES, DEFAULT_MENU_ITEMS
from orderdesk.domain.errors import OrderStoreError
from orderdesk.domain.model import CustomerRecord
from orderdesk.domain.ports.unit_of_work import OrderStoreRepositories

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from types import TracebackType

    from orderdesk.domain.model import (
        Customer,
        DiscountCode,
        MenuItem,
        OrderHeaderRecord,
        OrderItemRecord,
    )

log = getLogger(__name__)

LOCAL_ID_PREFIX = "local"


@dataclass(slots=True)
class _StoreState:
    customers: dict[str, CustomerRecord] = field(default_factory=dict)
    orders: dict[str, OrderHeaderRecord] = field(default_factory=dict)
    order_items: dict[str, list[OrderItemRecord]] = field(default_factory=dict)
    menu_items: list[MenuItem] = field(default_factory=list)
    discount_codes: list[DiscountCode] = field(default_factory=list)

    def copy(self) -> _StoreState:
        # records are frozen, so copying the containers is enough
        return _StoreState(
            customers=dict(self.customers),
            orders=dict(self.orders),
            order_items={key: list(rows) for key, rows in self.order_items.items()},
            menu_items=list(self.menu_items),
            discount_codes=list(self.discount_codes),
        )


class MemoryCustomerRepository:
    def __init__(self, state: _StoreState, new_id: Callable[[], str]) -> None:
        self._state = state
        self._new_id = new_id

    def find_by_mobile(self, mobile: str) -> CustomerRecord | None:
        return next(
            (record for record in self._state.customers.values() if record.mobile == mobile),
            None,
        )

    def add(self, customer: Customer) -> CustomerRecord:
        if self.find_by_mobile(customer.mobile) is not None:
            raise OrderStoreError(f"A customer with mobile {customer.mobile} already exists")
        record = CustomerRecord(id=self._new_id(), name=customer.name, mobile=customer.mobile)
        self._state.customers[record.id] = record
        return record

    def rename(self, customer_id: str, name: str) -> None:
        record = self._state.customers.get(customer_id)
        if record is None:
            raise OrderStoreError(f"Customer {customer_id} does not exist")
        self._state.customers[customer_id] = dataclasses.replace(record, name=name)


class MemoryOrderRepository:
    def __init__(self, state: _StoreState, new_id: Callable[[], str]) -> None:
        self._state = state
        self._new_id = new_id

    def add(self, header: OrderHeaderRecord) -> str:
        if header.customer_id not in self._state.customers:
            raise OrderStoreError(f"Customer {header.customer_id} does not exist")
        order_id = header.id or self._new_id()
        self._state.orders[order_id] = dataclasses.replace(header, id=order_id, customer=None)
        return order_id

    def list_headers(self) -> list[OrderHeaderRecord]:
        headers = [
            dataclasses.replace(header, customer=self._state.customers.get(header.customer_id))
            for header in self._state.orders.values()
        ]
        headers.sort(key=lambda header: (header.created_at, header.order_number), reverse=True)
        return headers

    def delete(self, order_id: str) -> bool:
        self._state.order_items.pop(order_id, None)
        return self._state.orders.pop(order_id, None) is not None


class MemoryOrderItemRepository:
    def __init__(self, state: _StoreState) -> None:
        self._state = state

    def add_many(self, rows: Sequence[OrderItemRecord]) -> None:
        for row in rows:
            if row.order_id not in self._state.orders:
                raise OrderStoreError(f"Order {row.order_id} does not exist")
            self._state.order_items.setdefault(row.order_id, []).append(row)

    def list_for_order(self, order_id: str) -> list[OrderItemRecord]:
        rows = self._state.order_items.get(order_id, [])
        return sorted(rows, key=lambda row: row.position)


class MemoryMenuItemRepository:
    def __init__(self, state: _StoreState) -> None:
        self._state = state

    def list_active(self) -> list[MenuItem]:
        return list(self._state.menu_items)


class MemoryDiscountCodeRepository:
    def __init__(self, state: _StoreState) -> None:
        self._state = state

    def list_active(self) -> list[DiscountCode]:
        return list(self._state.discount_codes)


class MemoryOrderStore:
    """Process-local order store.

    Each unit of work edits a private copy of the committed state; ``commit``
    publishes the copy and leaving the block without committing discards it.
    Ids are ``local-<n>`` and are never reused, even after a rollback.
    """

    def __init__(
        self,
        *,
        menu_items: Iterable[MenuItem] = DEFAULT_MENU_ITEMS,
        discount_codes: Iterable[DiscountCode] = DEFAULT_DISCOUNT_CODES,
    ) -> None:
        self._state = _StoreState(
            menu_items=list(menu_items),
            discount_codes=list(discount_codes),
        )
        self._lock = Lock()
        self._counter = itertools.count(1)

    def new_id(self) -> str:
        with self._lock:
            return f"{LOCAL_ID_PREFIX}-{next(self._counter)}"

    def snapshot(self) -> _StoreState:
        with self._lock:
            return self._state.copy()

    def publish(self, state: _StoreState) -> None:
        with self._lock:
            self._state = state.copy()

    def unit_of_work(self) -> MemoryUnitOfWork:
        return MemoryUnitOfWork(self)

    @property
    def order_count(self) -> int:
        return len(self._state.orders)


class MemoryUnitOfWork:
    def __init__(self, store: MemoryOrderStore) -> None:
        self.store = store
        self._working: _StoreState | None = None
        self._repositories: OrderStoreRepositories | None = None

    def __enter__(self) -> MemoryUnitOfWork:
        self._begin()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self._working = None
        self._repositories = None
        return False

    def commit(self) -> None:
        self.store.publish(self._require_working())

    def rollback(self) -> None:
        self._require_working()
        log.debug("Discarding uncommitted in-memory changes")
        self._begin()

    @property
    def repositories(self) -> OrderStoreRepositories:
        if self._repositories is None:
            raise OrderStoreError("In-memory unit of work used outside its context")
        return self._repositories

    def _begin(self) -> None:
        working = self.store.snapshot()
        self._working = working
        self._repositories = OrderStoreRepositories(
            customers=MemoryCustomerRepository(working, self.store.new_id),
            orders=MemoryOrderRepository(working, self.store.new_id),
            order_items=MemoryOrderItemRepository(working),
            menu_items=MemoryMenuItemRepository(working),
            discount_codes=MemoryDiscountCodeRepository(working),
        )

    def _require_working(self) -> _StoreState:
        if self._working is None:
            raise OrderStoreError("In-memory unit of work used outside its context")
        return self._working


if TYPE_CHECKING:
    from orderdesk.domain.ports.unit_of_work import OrderStoreUnitOfWork

    _uow_check: OrderStoreUnitOfWork = MemoryUnitOfWork(MemoryOrderStore())
