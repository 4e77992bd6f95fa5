from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import inspect, select

from orderdesk.adapters.sqlalchemy import seed_catalog
from orderdesk.adapters.sqlalchemy.mappings import discount_code_table, menu_item_table
from orderdesk.domain.catalog import DEFAULT_DISCOUNT_CODES, DEFAULT_MENU_ITEMS

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_startup_creates_store_tables(sqlite_engine: Engine) -> None:
    tables = set(inspect(sqlite_engine).get_table_names())

    assert {"customer", "menu_item", "discount_code", "customer_order", "order_item"} <= tables


def test_startup_seeds_default_catalog(sqlite_engine: Engine) -> None:
    with sqlite_engine.connect() as connection:
        names = connection.execute(select(menu_item_table.c.name)).scalars().all()
        prices = connection.execute(select(menu_item_table.c.price)).scalars().all()
        codes = connection.execute(select(discount_code_table.c.code)).scalars().all()

    assert sorted(names) == sorted(item.name for item in DEFAULT_MENU_ITEMS)
    assert all(isinstance(price, Decimal) for price in prices)
    assert sorted(codes) == sorted(code.code for code in DEFAULT_DISCOUNT_CODES)


def test_seed_catalog_only_runs_on_empty_menu(sqlite_engine: Engine) -> None:
    inserted = seed_catalog(
        sqlite_engine,
        menu_items=DEFAULT_MENU_ITEMS,
        discount_codes=DEFAULT_DISCOUNT_CODES,
    )

    assert inserted is False
