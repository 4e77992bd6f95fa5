from __future__ import annotations

import dataclasses
from datetime import timedelta
from typing import TYPE_CHECKING

from orderdesk.adapters.bulk_csv import parse_bulk_orders
from orderdesk.domain.errors import HistoricalSourceError, HistoricalSourceMissingError
from orderdesk.domain.model import OrderSource
from orderdesk.domain.order_writer import write_order
from orderdesk.domain.reconciliation import merge_orders, reconcile
from tests.helpers.orders import (
    DEFAULT_TIMESTAMP,
    FakeHistoricalFetcher,
    StoreFaults,
    faulty_factory,
    make_order,
)

if TYPE_CHECKING:
    from orderdesk.adapters.memory import MemoryOrderStore


def test_merge_sorts_newest_first() -> None:
    old = make_order(timestamp=DEFAULT_TIMESTAMP - timedelta(days=1))
    new = make_order(timestamp=DEFAULT_TIMESTAMP + timedelta(days=1))
    middle = dataclasses.replace(make_order(), source=OrderSource.BULK)

    merged = merge_orders([old], [middle, new])

    assert [order.timestamp for order in merged] == [new.timestamp, middle.timestamp, old.timestamp]


def test_merge_ties_keep_live_before_bulk() -> None:
    live = dataclasses.replace(make_order(), db_id="live-1")
    bulk = dataclasses.replace(make_order(), db_id="bulk-order-1", source=OrderSource.BULK)

    merged = merge_orders([live], [bulk])

    assert [order.db_id for order in merged] == ["live-1", "bulk-order-1"]


def test_merge_of_nothing_is_empty() -> None:
    assert merge_orders([], []) == []


def test_reconcile_combines_both_sources(
    memory_store: MemoryOrderStore,
    historical_csv_text: str,
) -> None:
    write_order(memory_store.unit_of_work, make_order())
    bulk = parse_bulk_orders(historical_csv_text).orders

    result = reconcile(
        unit_of_work_factory=memory_store.unit_of_work,
        historical=FakeHistoricalFetcher(bulk),
    )

    assert result.live_count == 1
    assert result.bulk_count == 4
    assert not result.live_failed
    assert result.orders[0].source is OrderSource.LIVE
    timestamps = [order.timestamp for order in result.orders]
    assert timestamps == sorted(timestamps, reverse=True)


def test_reconcile_is_idempotent(memory_store: MemoryOrderStore, historical_csv_text: str) -> None:
    write_order(memory_store.unit_of_work, make_order())
    fetcher = FakeHistoricalFetcher(parse_bulk_orders(historical_csv_text).orders)

    first = reconcile(unit_of_work_factory=memory_store.unit_of_work, historical=fetcher)
    second = reconcile(unit_of_work_factory=memory_store.unit_of_work, historical=fetcher)

    assert first.orders == second.orders
    assert fetcher.calls == 2


def test_live_failure_degrades_to_bulk_only(
    memory_store: MemoryOrderStore,
    historical_csv_text: str,
) -> None:
    write_order(memory_store.unit_of_work, make_order())
    bulk = parse_bulk_orders(historical_csv_text).orders

    result = reconcile(
        unit_of_work_factory=faulty_factory(memory_store, StoreFaults(list_headers=True)),
        historical=FakeHistoricalFetcher(bulk),
    )

    assert result.live_failed
    assert result.orders == merge_orders([], bulk)


def test_missing_export_counts_as_empty(memory_store: MemoryOrderStore) -> None:
    write_order(memory_store.unit_of_work, make_order())

    result = reconcile(
        unit_of_work_factory=memory_store.unit_of_work,
        historical=FakeHistoricalFetcher(error=HistoricalSourceMissingError("gone")),
    )

    assert result.bulk_count == 0
    assert len(result.orders) == 1


def test_unreadable_export_keeps_live_orders(memory_store: MemoryOrderStore) -> None:
    write_order(memory_store.unit_of_work, make_order())

    result = reconcile(
        unit_of_work_factory=memory_store.unit_of_work,
        historical=FakeHistoricalFetcher(error=HistoricalSourceError("HTTP 500")),
    )

    assert result.bulk_count == 0
    assert result.skipped == []
    assert [order.source for order in result.orders] == [OrderSource.LIVE]
