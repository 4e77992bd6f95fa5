from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import Engine  # noqa: TC002

from orderdesk.adapters.memory import MemoryOrderStore
from orderdesk.adapters.sqlalchemy import SqlAlchemyOrderStore, create_store_engine, startup

if TYPE_CHECKING:
    from collections.abc import Iterator

DATA_DIR = Path(__file__).resolve().parent / "data"

_ORDERDESK_ENV = (
    "ORDERDESK_DATABASE_URI",
    "ORDERDESK_DATA_DIR",
    "ORDERDESK_HISTORICAL_SOURCE",
    "ORDERDESK_TIMEZONE",
    "ORDERDESK_OFFLINE",
    "ORDERDESK_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_orderdesk_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ORDERDESK_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def historical_csv_path() -> Path:
    return DATA_DIR / "historical_orders.csv"


@pytest.fixture(scope="session")
def historical_csv_text(historical_csv_path: Path) -> str:
    return historical_csv_path.read_text(encoding="utf-8")


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_store_engine("sqlite+pysqlite:///:memory:")
    startup(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine: Engine) -> SqlAlchemyOrderStore:
    return SqlAlchemyOrderStore(engine=sqlite_engine)


@pytest.fixture
def memory_store() -> MemoryOrderStore:
    return MemoryOrderStore()
