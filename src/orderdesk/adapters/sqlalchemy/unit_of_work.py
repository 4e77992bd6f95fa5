"""SQLAlchemy-backed unit of work and store lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from threading import Lock
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from orderdesk.adapters.sqlalchemy.mappings import create_all_tables, seed_catalog
from orderdesk.adapters.sqlalchemy.repositories import (
    SqlAlchemyCustomerRepository,
    SqlAlchemyDiscountCodeRepository,
    SqlAlchemyMenuItemRepository,
    SqlAlchemyOrderItemRepository,
    SqlAlchemyOrderRepository,
    translate_errors,
)
from orderdesk.domain.catalog import DEFAULT_DISCOUNT_CODES, DEFAULT_MENU_ITEMS
from orderdesk.domain.errors import OrderStoreError
from orderdesk.domain.ports.unit_of_work import OrderStoreRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Connection, Engine

log = getLogger(__name__)


class UnitOfWorkError(RuntimeError):
    """Raised when a unit of work is used outside its ``with`` block."""


def create_store_engine(database_uri: str) -> Engine:
    """Create an engine; SQLite connections get foreign keys and real SAVEPOINTs."""

    engine = create_engine(database_uri, future=True)
    if engine.dialect.name == "sqlite":
        _configure_sqlite(engine)
    return engine


def _configure_sqlite(engine: Engine) -> None:
    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; take it over
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, _record: object) -> None:  # noqa: ANN401
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection: Connection) -> None:
        connection.exec_driver_sql("BEGIN")


def startup(engine: Engine, *, seed: bool = True) -> None:
    """Create the store tables and, if ``seed``, the default catalog.

    Raises ``OrderStoreError`` when the database cannot be reached.
    """

    try:
        create_all_tables(engine)
        if seed:
            seed_catalog(
                engine,
                menu_items=DEFAULT_MENU_ITEMS,
                discount_codes=DEFAULT_DISCOUNT_CODES,
            )
    except SQLAlchemyError as exc:
        raise OrderStoreError(f"Store startup failed: {exc}") from exc


class SqlAlchemyUnitOfWork:
    """Unit of work managing one SQLAlchemy session over the order store."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._session: Session | None = None
        self._repositories: OrderStoreRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self.session = self.session_factory()
        self._repositories = OrderStoreRepositories(
            customers=SqlAlchemyCustomerRepository(self.session),
            orders=SqlAlchemyOrderRepository(self.session),
            order_items=SqlAlchemyOrderItemRepository(self.session),
            menu_items=SqlAlchemyMenuItemRepository(self.session),
            discount_codes=SqlAlchemyDiscountCodeRepository(self.session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        self._repositories = None
        return False  # don't swallow exceptions

    @translate_errors
    def commit(self) -> None:
        self.session.commit()

    @translate_errors
    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> OrderStoreRepositories:
        if self._repositories is None:
            raise UnitOfWorkError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise UnitOfWorkError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise UnitOfWorkError("Unit of work session already initialised")
        self._session = session


@dataclass(slots=True)
class SqlAlchemyOrderStore:
    """An engine plus the session factory its units of work share.

    Tables and the default catalog are created on the first ``unit_of_work()``
    call rather than at construction, so an unreachable database surfaces as an
    ``OrderStoreError`` from that call. A failed startup is retried on the next one.
    """

    engine: Engine
    seed: bool = True
    session_factory: sessionmaker[Session] = field(init=False)
    _started: bool = field(init=False, default=False)
    _start_lock: Lock = field(init=False, default_factory=Lock)

    def __post_init__(self) -> None:
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    @classmethod
    def from_uri(cls, database_uri: str, *, seed: bool = True) -> SqlAlchemyOrderStore:
        engine = create_store_engine(database_uri)
        log.info("Live store configured at %s", engine.url.render_as_string(hide_password=True))
        return cls(engine=engine, seed=seed)

    @property
    def started(self) -> bool:
        return self._started

    def ensure_started(self) -> None:
        with self._start_lock:
            if self._started:
                return
            startup(self.engine, seed=self.seed)
            self._started = True
            log.info("Live store ready")

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        self.ensure_started()
        return SqlAlchemyUnitOfWork(self.session_factory)

    def dispose(self) -> None:
        self.engine.dispose()


if TYPE_CHECKING:
    from orderdesk.domain.ports.unit_of_work import OrderStoreUnitOfWork

    _uow_check: OrderStoreUnitOfWork = SqlAlchemyUnitOfWork(sessionmaker())
