from __future__ import annotations

from typing import TYPE_CHECKING

from orderdesk.domain.customers import resolve_customer
from orderdesk.domain.model import Customer
from tests.helpers.orders import StoreFaults, faulty_factory

if TYPE_CHECKING:
    from orderdesk.adapters.memory import MemoryOrderStore


def test_new_mobile_creates_customer(memory_store: MemoryOrderStore) -> None:
    with memory_store.unit_of_work() as uow:
        record = resolve_customer(uow.repositories.customers, Customer(name="Asha", mobile="1"))
        uow.commit()

    assert record.id.startswith("local-")
    assert record.name == "Asha"


def test_same_mobile_reuses_identity_and_renames(memory_store: MemoryOrderStore) -> None:
    with memory_store.unit_of_work() as uow:
        customers = uow.repositories.customers
        first = resolve_customer(customers, Customer(name="Asha", mobile="1"))
        same = resolve_customer(customers, Customer(name="Asha", mobile="1"))
        renamed = resolve_customer(customers, Customer(name="Asha Rao", mobile="1"))
        uow.commit()

    assert first.id == same.id == renamed.id
    assert renamed.name == "Asha Rao"
    with memory_store.unit_of_work() as uow:
        stored = uow.repositories.customers.find_by_mobile("1")
    assert stored is not None
    assert stored.name == "Asha Rao"


def test_failed_rename_returns_existing_identity(memory_store: MemoryOrderStore) -> None:
    with memory_store.unit_of_work() as uow:
        existing = resolve_customer(uow.repositories.customers, Customer(name="Asha", mobile="1"))
        uow.commit()

    factory = faulty_factory(memory_store, StoreFaults(rename=True))
    with factory() as uow:
        result = resolve_customer(uow.repositories.customers, Customer(name="Asha Rao", mobile="1"))

    assert result == existing
    assert result.name == "Asha"
