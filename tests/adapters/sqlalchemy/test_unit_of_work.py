from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from orderdesk.adapters.sqlalchemy import (
    SqlAlchemyOrderStore,
    SqlAlchemyUnitOfWork,
    UnitOfWorkError,
)
from orderdesk.domain.errors import OrderStoreError
from orderdesk.domain.model import Customer

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine


def test_unit_of_work_requires_context() -> None:
    uow = SqlAlchemyUnitOfWork(sessionmaker())

    with pytest.raises(UnitOfWorkError):
        _ = uow.repositories


def test_uncommitted_changes_are_discarded(sql_store: SqlAlchemyOrderStore) -> None:
    with sql_store.unit_of_work() as uow:
        uow.repositories.customers.add(Customer(name="Asha Rao", mobile="9990001111"))

    with sql_store.unit_of_work() as uow:
        assert uow.repositories.customers.find_by_mobile("9990001111") is None


def test_exception_rolls_back(sql_store: SqlAlchemyOrderStore) -> None:
    class BoomError(Exception):
        pass

    with pytest.raises(BoomError), sql_store.unit_of_work() as uow:
        uow.repositories.customers.add(Customer(name="Asha Rao", mobile="9990001111"))
        raise BoomError

    with sql_store.unit_of_work() as uow:
        assert uow.repositories.customers.find_by_mobile("9990001111") is None


def test_rename_failure_keeps_outer_transaction(sql_store: SqlAlchemyOrderStore) -> None:
    with sql_store.unit_of_work() as uow:
        customers = uow.repositories.customers
        created = customers.add(Customer(name="Asha Rao", mobile="9990001111"))

        with pytest.raises(OrderStoreError):
            customers.rename(created.id, None)  # pyright: ignore[reportArgumentType]

        uow.commit()

    with sql_store.unit_of_work() as uow:
        found = uow.repositories.customers.find_by_mobile("9990001111")
        assert found is not None
        assert found.name == "Asha Rao"


def test_store_from_uri_creates_file_database(tmp_path: Path) -> None:
    uri = f"sqlite+pysqlite:///{tmp_path / 'orders.db'}"

    store = SqlAlchemyOrderStore.from_uri(uri)
    try:
        with store.unit_of_work() as uow:
            assert len(uow.repositories.menu_items.list_active()) == 8
    finally:
        store.dispose()

    reopened = SqlAlchemyOrderStore.from_uri(uri)
    try:
        with reopened.unit_of_work() as uow:
            assert len(uow.repositories.menu_items.list_active()) == 8
    finally:
        reopened.dispose()


def test_store_starts_on_first_unit_of_work(tmp_path: Path) -> None:
    store = SqlAlchemyOrderStore.from_uri(f"sqlite+pysqlite:///{tmp_path / 'orders.db'}")
    try:
        assert not store.started
        assert not (tmp_path / "orders.db").exists()

        store.unit_of_work()

        assert store.started
    finally:
        store.dispose()


def test_unreachable_store_raises_store_error_and_retries(tmp_path: Path) -> None:
    db_dir = tmp_path / "missing-dir"
    store = SqlAlchemyOrderStore.from_uri(f"sqlite+pysqlite:///{db_dir / 'orders.db'}")
    try:
        with pytest.raises(OrderStoreError, match="Store startup failed"):
            store.unit_of_work()
        assert not store.started

        db_dir.mkdir()
        with store.unit_of_work() as uow:
            assert len(uow.repositories.menu_items.list_active()) == 8
    finally:
        store.dispose()


class _CommitFailsSession(Session):
    def commit(self) -> None:
        raise OperationalError("COMMIT", None, Exception("connection lost"))


def test_commit_failure_is_store_error(sqlite_engine: Engine) -> None:
    session_factory = sessionmaker(bind=sqlite_engine, class_=_CommitFailsSession)

    with (
        pytest.raises(OrderStoreError, match="connection lost"),
        SqlAlchemyUnitOfWork(session_factory) as uow,
    ):
        uow.repositories.customers.add(Customer(name="Asha Rao", mobile="9990001111"))
        uow.commit()

    with SqlAlchemyOrderStore(engine=sqlite_engine).unit_of_work() as uow:
        assert uow.repositories.customers.find_by_mobile("9990001111") is None
