"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from orderdesk.adapters.bulk_csv import BulkCsvFetcher, build_text_source
from orderdesk.adapters.memory import MemoryOrderStore
from orderdesk.adapters.sqlalchemy import SqlAlchemyOrderStore
from orderdesk.config import get_store_config
from orderdesk.domain.catalog import DEFAULT_MENU_BY_NAME
from orderdesk.domain.order_book import OrderBook

if TYPE_CHECKING:
    from orderdesk.config import StoreConfig
    from orderdesk.domain.ports.fetching import HistoricalFetchResult, HistoricalOrderFetcher

log = getLogger(__name__)


def build_historical_fetcher(
    config: StoreConfig,
    *,
    source: str | None = None,
) -> BulkCsvFetcher:
    """Build the export fetcher for ``source`` or the configured location."""

    location = source or config.historical_source
    return BulkCsvFetcher(
        source=build_text_source(location),
        catalog=dict(DEFAULT_MENU_BY_NAME),
        timezone=config.timezone,
    )


def build_order_book(
    config: StoreConfig | None = None,
    *,
    historical: HistoricalOrderFetcher | None = None,
) -> OrderBook:
    """Wire an ``OrderBook`` to the store chosen by ``config``.

    Offline mode uses a fresh in-memory store; otherwise the SQL store is
    configured but not connected. Its tables and default catalog are created
    on first use, so an unreachable database only degrades ``load``.
    The book is not loaded yet.
    """

    effective_config = config or get_store_config()
    effective_historical = historical or build_historical_fetcher(effective_config)

    if effective_config.offline or effective_config.database_uri is None:
        log.info("No live store configured, running in offline mode")
        memory_store = MemoryOrderStore()
        return OrderBook(
            unit_of_work_factory=memory_store.unit_of_work,
            historical=effective_historical,
            offline=True,
        )

    sql_store = SqlAlchemyOrderStore.from_uri(effective_config.database_uri)
    return OrderBook(
        unit_of_work_factory=sql_store.unit_of_work,
        historical=effective_historical,
        offline=False,
        on_close=sql_store.dispose,
    )


def check_import(
    config: StoreConfig | None = None,
    *,
    source: str | None = None,
) -> HistoricalFetchResult:
    """Parse the historical export once without touching any store."""

    effective_config = config or get_store_config()
    fetcher = build_historical_fetcher(effective_config, source=source)
    result = fetcher()
    log.info(
        "Parsed historical export from %s: orders=%d, skipped=%d",
        fetcher.source.location,
        len(result.orders),
        len(result.skipped),
    )
    return result
