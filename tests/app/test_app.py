from __future__ import annotations

from typing import TYPE_CHECKING

from orderdesk.app import build_order_book, check_import
from orderdesk.config import StoreConfig, StoreMode
from orderdesk.domain.catalog import DEFAULT_MENU_ITEMS
from orderdesk.domain.model import OrderSource
from orderdesk.domain.order_book import LoadState
from tests.helpers.orders import make_order

if TYPE_CHECKING:
    from pathlib import Path


def _config(source: Path, database_uri: str | None = None) -> StoreConfig:
    return StoreConfig(
        mode=StoreMode.DATABASE if database_uri else StoreMode.OFFLINE,
        database_uri=database_uri,
        historical_source=str(source),
    )


def test_offline_book_uses_memory_store(historical_csv_path: Path) -> None:
    with build_order_book(_config(historical_csv_path)) as book:
        orders = book.load()

    assert book.offline
    assert len(orders) == 4


def test_database_book_persists_between_instances(
    tmp_path: Path,
    historical_csv_path: Path,
) -> None:
    config = _config(historical_csv_path, f"sqlite+pysqlite:///{tmp_path / 'orders.db'}")

    with build_order_book(config) as book:
        book.load()
        book.create_order(make_order())

    with build_order_book(config) as reopened:
        orders = reopened.load()

    assert not reopened.offline
    assert len(orders) == 5


def test_missing_export_still_loads(tmp_path: Path) -> None:
    with build_order_book(_config(tmp_path / "absent.csv")) as book:
        assert book.load() == []


def test_check_import_reports_skips(historical_csv_path: Path) -> None:
    result = check_import(_config(historical_csv_path))

    assert len(result.orders) == 4
    assert [skip.line_number for skip in result.skipped] == [4, 5, 6]


def test_unreachable_database_falls_back_to_bulk_orders(
    tmp_path: Path,
    historical_csv_path: Path,
) -> None:
    uri = f"sqlite+pysqlite:///{tmp_path / 'missing-dir' / 'orders.db'}"

    with build_order_book(_config(historical_csv_path, uri)) as book:
        orders = book.load()

    assert not book.offline
    assert book.state is LoadState.READY
    assert len(orders) == 4
    assert {order.source for order in orders} == {OrderSource.BULK}
    assert book.menu_items == list(DEFAULT_MENU_ITEMS)
