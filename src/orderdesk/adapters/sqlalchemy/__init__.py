"""SQLAlchemy adapter package for the live order store."""

from __future__ import annotations

from .mappings import create_all_tables, metadata, seed_catalog
from .repositories import (
    SqlAlchemyCustomerRepository,
    SqlAlchemyDiscountCodeRepository,
    SqlAlchemyMenuItemRepository,
    SqlAlchemyOrderItemRepository,
    SqlAlchemyOrderRepository,
)
from .unit_of_work import (
    SqlAlchemyOrderStore,
    SqlAlchemyUnitOfWork,
    UnitOfWorkError,
    create_store_engine,
    startup,
)

__all__ = [
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyDiscountCodeRepository",
    "SqlAlchemyMenuItemRepository",
    "SqlAlchemyOrderItemRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyOrderStore",
    "SqlAlchemyUnitOfWork",
    "UnitOfWorkError",
    "create_all_tables",
    "create_store_engine",
    "metadata",
    "seed_catalog",
    "startup",
]
