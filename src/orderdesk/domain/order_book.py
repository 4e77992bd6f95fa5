"""Long-lived service holding the merged order timeline."""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from threading import RLock
from typing import TYPE_CHECKING, Literal

from .catalog import DEFAULT_DISCOUNT_CODES, DEFAULT_MENU_ITEMS
from .errors import InitializationError, OrderDeskError, OrderStoreError
from .model import OrderSource
from .order_writer import write_order
from .reconciliation import ReconciliationResult, reconcile

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from .model import DiscountCode, MenuItem, Order
    from .ports.fetching import HistoricalOrderFetcher, SkippedLine
    from .ports.unit_of_work import OrderStoreUnitOfWork

log = getLogger(__name__)


class LoadState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class OrderBook:
    """Owns the in-memory order list and the only operations that change it.

    The list is replaced wholesale on every refresh and never patched in place.
    ``refresh``, ``create_order`` and ``delete_order`` are serialised by a lock, so
    overlapping calls run one after the other and the last completed refresh wins.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], OrderStoreUnitOfWork],
        historical: HistoricalOrderFetcher,
        offline: bool = False,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._historical = historical
        self._offline = offline
        self._on_close = on_close
        self._lock = RLock()
        self._orders: tuple[Order, ...] = ()
        self._menu_items: tuple[MenuItem, ...] = DEFAULT_MENU_ITEMS
        self._discount_codes: tuple[DiscountCode, ...] = DEFAULT_DISCOUNT_CODES
        self._last_result: ReconciliationResult | None = None
        self._refresh_count = 0
        self._state = LoadState.IDLE
        self._last_error: str | None = None
        self._closed = False

    # Read-only views -----------------------------------------------------------

    @property
    def orders(self) -> list[Order]:
        return list(self._orders)

    @property
    def menu_items(self) -> list[MenuItem]:
        return list(self._menu_items)

    @property
    def discount_codes(self) -> list[DiscountCode]:
        return list(self._discount_codes)

    @property
    def skipped_lines(self) -> list[SkippedLine]:
        if self._last_result is None:
            return []
        return list(self._last_result.skipped)

    @property
    def refresh_count(self) -> int:
        return self._refresh_count

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def offline(self) -> bool:
        return self._offline

    # Mutators -----------------------------------------------------------------

    def load(self) -> list[Order]:
        """Run the first load of catalog data and orders.

        A failure leaves the book in ``LoadState.FAILED`` and raises
        ``InitializationError``; calling ``load`` again retries.
        """

        with self._lock:
            self._state = LoadState.LOADING
            self._last_error = None
            try:
                self._load_catalog()
                orders = self.refresh()
            except Exception as exc:
                self._state = LoadState.FAILED
                self._last_error = str(exc) or type(exc).__name__
                log.exception("Error initializing order data")
                raise InitializationError("Failed to load data") from exc
            return orders

    def refresh(self) -> list[Order]:
        """Re-read both order sources and replace the visible list."""

        with self._lock:
            result = reconcile(
                unit_of_work_factory=self._unit_of_work_factory,
                historical=self._historical,
            )
            self._orders = tuple(result.orders)
            self._last_result = result
            self._refresh_count += 1
            self._state = LoadState.READY
            return list(self._orders)

    def create_order(self, order: Order) -> bool:
        """Persist ``order`` and refresh; store failures propagate to the caller."""

        with self._lock:
            try:
                write_order(self._unit_of_work_factory, order)
            except OrderDeskError:
                log.exception("Error creating order %s", order.id)
                raise

            try:
                self.refresh()
            except Exception:
                log.exception("Refresh after creating order %s failed", order.id)
            return True

    def delete_order(self, db_id: str) -> bool:
        """Delete the order stored as ``db_id``; returns ``False`` instead of raising.

        Orders that came from the historical export have no store row. They are
        only dropped from the current view and reappear on the next refresh.
        """

        with self._lock:
            current = next((order for order in self._orders if order.db_id == db_id), None)
            if current is not None and current.source is OrderSource.BULK:
                self._drop_from_view(db_id)
                log.info("Removed historical order %s from the current view", db_id)
                return True

            log.info("Deleting order %s from the live store", db_id)
            try:
                with self._unit_of_work_factory() as uow:
                    deleted = uow.repositories.orders.delete(db_id)
                    if deleted:
                        uow.commit()
            except Exception:  # noqa: BLE001
                log.exception("Error deleting order %s", db_id)
                return False

            if not deleted:
                log.warning("Order %s not found in the live store", db_id)
                return False

            try:
                self.refresh()
            except Exception:
                log.exception("Refresh after deleting order %s failed", db_id)
                self._drop_from_view(db_id)
            log.info("Order %s deleted", db_id)
            return True

    def close(self) -> None:
        """Release the store; further use of the book is not supported."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._on_close is not None:
                self._on_close()

    def __enter__(self) -> OrderBook:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.close()
        return False

    # Helpers -----------------------------------------------------------------

    def _load_catalog(self) -> None:
        try:
            with self._unit_of_work_factory() as uow:
                menu_items = uow.repositories.menu_items.list_active()
                discount_codes = uow.repositories.discount_codes.list_active()
        except OrderStoreError:
            log.exception("Error fetching catalog, using default catalog")
            menu_items, discount_codes = [], []

        self._menu_items = tuple(menu_items) or DEFAULT_MENU_ITEMS
        self._discount_codes = tuple(discount_codes) or DEFAULT_DISCOUNT_CODES

    def _drop_from_view(self, db_id: str) -> None:
        self._orders = tuple(order for order in self._orders if order.db_id != db_id)
