"""Find-or-create resolution of customer identities by mobile number."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import OrderStoreError

if TYPE_CHECKING:
    from .model import Customer, CustomerRecord
    from .ports.persistence import CustomerRepository

log = getLogger(__name__)


def resolve_customer(customers: CustomerRepository, customer: Customer) -> CustomerRecord:
    """Return the stored customer for ``customer.mobile``, creating it if needed.

    An existing record whose name differs is renamed (last write wins). A failed
    rename is logged and the existing identity is still returned; lookup and
    creation failures propagate.
    """

    existing = customers.find_by_mobile(customer.mobile)
    if existing is None:
        created = customers.add(customer)
        log.info("Created new customer %s (%s)", created.id, created.name)
        return created

    log.debug("Found existing customer %s (%s)", existing.id, existing.name)
    if existing.name == customer.name:
        return existing

    try:
        customers.rename(existing.id, customer.name)
    except OrderStoreError:
        log.exception("Error updating name of customer %s", existing.id)
        return existing

    log.info("Updated customer %s name to %r", existing.id, customer.name)
    return replace(existing, name=customer.name)
