"""Merge live-store orders and historical orders into one timeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import HistoricalSourceError, HistoricalSourceMissingError, OrderStoreError
from .order_reader import read_orders
from .ports.fetching import HistoricalFetchResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from .model import Order
    from .ports.fetching import HistoricalOrderFetcher, SkippedLine
    from .ports.unit_of_work import OrderStoreUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationResult:
    """Outcome of one reconciliation run."""

    orders: list[Order]
    live_count: int
    bulk_count: int
    live_failed: bool = False
    skipped: list[SkippedLine] = field(default_factory=list["SkippedLine"])


def merge_orders(live: Iterable[Order], bulk: Iterable[Order]) -> list[Order]:
    """Concatenate live then bulk orders and sort newest first.

    The sort is stable, so orders with equal timestamps keep live-before-bulk order.
    """

    combined = [*live, *bulk]
    return sorted(combined, key=lambda order: order.timestamp, reverse=True)


def fetch_live_orders(
    unit_of_work_factory: Callable[[], OrderStoreUnitOfWork],
) -> tuple[list[Order], bool]:
    """Read live orders, degrading to an empty list if the store fails.

    Returns the orders and whether the store failed.
    """

    try:
        return read_orders(unit_of_work_factory), False
    except OrderStoreError:
        log.warning("Live store unavailable, using historical orders only", exc_info=True)
        return [], True


def fetch_bulk_orders(fetcher: HistoricalOrderFetcher) -> HistoricalFetchResult:
    """Parse the historical export; an export that cannot be read counts as empty."""

    try:
        result = fetcher()
    except HistoricalSourceMissingError as exc:
        log.warning("Historical export not found (%s), continuing without it", exc)
        return HistoricalFetchResult()
    except HistoricalSourceError:
        log.exception("Error loading historical export, continuing without it")
        return HistoricalFetchResult()
    log.info(
        "Loaded %d order(s) from historical export, skipped %d line(s)",
        len(result.orders),
        len(result.skipped),
    )
    return result


def reconcile(
    *,
    unit_of_work_factory: Callable[[], OrderStoreUnitOfWork],
    historical: HistoricalOrderFetcher,
) -> ReconciliationResult:
    """Produce the merged order timeline from both sources."""

    live, live_failed = fetch_live_orders(unit_of_work_factory)
    bulk = fetch_bulk_orders(historical)
    merged = merge_orders(live, bulk.orders)
    log.info(
        "Total orders loaded: total=%d, live=%d, bulk=%d",
        len(merged),
        len(live),
        len(bulk.orders),
    )
    return ReconciliationResult(
        orders=merged,
        live_count=len(live),
        bulk_count=len(bulk.orders),
        live_failed=live_failed,
        skipped=list(bulk.skipped),
    )
