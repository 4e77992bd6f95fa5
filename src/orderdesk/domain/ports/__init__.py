"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import HistoricalFetchResult, HistoricalOrderFetcher, SkippedLine
from .persistence import (
    CustomerRepository,
    DiscountCodeRepository,
    MenuItemRepository,
    OrderItemRepository,
    OrderRepository,
)
from .unit_of_work import (
    OrderStoreRepositories,
    OrderStoreUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CustomerRepository",
    "DiscountCodeRepository",
    "HistoricalFetchResult",
    "HistoricalOrderFetcher",
    "MenuItemRepository",
    "OrderItemRepository",
    "OrderRepository",
    "OrderStoreRepositories",
    "OrderStoreUnitOfWork",
    "RepositoryCollection",
    "SkippedLine",
    "UnitOfWork",
]
