"""Translate historical export text into canonical orders."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from orderdesk.domain.catalog import DEFAULT_MENU_BY_NAME
from orderdesk.domain.model import (
    Customer,
    Order,
    OrderItem,
    OrderSource,
    OrderStatus,
    PaymentType,
)
from orderdesk.domain.outlets import outlet_code
from orderdesk.domain.pricing import TAX_RATE, compute_totals, epoch_millis
from orderdesk.domain.ports.fetching import HistoricalFetchResult, SkippedLine

from .schema import BulkOrderRow
from .tokenizer import split_fields

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import tzinfo

    from orderdesk.domain.model import MenuItem

log = getLogger(__name__)

BULK_DB_ID_PREFIX: Final[str] = "bulk-order"
PAYMENT_ROTATION: Final[tuple[PaymentType, ...]] = (
    PaymentType.CASH,
    PaymentType.CARD,
    PaymentType.UPI,
)
_FALLBACK_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%d-%m-%Y %H:%M",
)


class _SkipLineError(ValueError):
    """Internal signal that the current line yields no order."""


def payment_type_for(customer_name: str) -> PaymentType:
    """Derive a stable payment type from the customer's name.

    The export has no payment column; summing character codes keeps the choice
    identical across reloads of the same file.
    """

    checksum = sum(ord(char) for char in customer_name)
    return PAYMENT_ROTATION[checksum % len(PAYMENT_ROTATION)]


def parse_placed_at(value: str, *, timezone: tzinfo = UTC) -> datetime:
    """Parse an export timestamp; naive values are taken to be in ``timezone``."""

    text = value.strip()
    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in _FALLBACK_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)  # noqa: DTZ007
                break
            except ValueError:
                continue
    if parsed is None:
        raise ValueError(f"Unrecognised date/time: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone)
    return parsed


def parse_bulk_orders(
    content: str,
    *,
    catalog: Mapping[str, MenuItem] = DEFAULT_MENU_BY_NAME,
    timezone: tzinfo = UTC,
) -> HistoricalFetchResult:
    """Parse the full export text. The first line is always a header."""

    result = HistoricalFetchResult()
    lines = content.split("\n")
    for index, raw_line in enumerate(lines[1:], start=1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            order = _parse_line(line, index, catalog=catalog, timezone=timezone)
        except _SkipLineError as exc:
            log.warning("Skipping export line %d: %s", index, exc)
            result.skipped.append(SkippedLine(line_number=index, reason=str(exc)))
            continue
        result.orders.append(order)
    return result


def _parse_line(
    line: str,
    index: int,
    *,
    catalog: Mapping[str, MenuItem],
    timezone: tzinfo,
) -> Order:
    try:
        row = BulkOrderRow.from_fields(split_fields(line))
    except ValidationError as exc:
        raise _SkipLineError(_describe_validation_error(exc)) from exc
    except ValueError as exc:
        raise _SkipLineError(str(exc)) from exc

    items = _resolve_items(row.item_names, catalog, index)
    if not items:
        raise _SkipLineError("no known menu items")

    try:
        placed_at = parse_placed_at(row.placed_at, timezone=timezone)
    except ValueError as exc:
        raise _SkipLineError(str(exc)) from exc

    totals = compute_totals(items, tax_rate=TAX_RATE)
    if row.stated_total is not None and row.stated_total != totals.total:
        log.debug(
            "Export line %d states total %s, recomputed %s", index, row.stated_total, totals.total
        )

    return Order(
        id=f"{outlet_code(row.outlet)}-{epoch_millis(placed_at)}-{index}",
        db_id=f"{BULK_DB_ID_PREFIX}-{index}",
        customer=Customer(name=row.customer_name, mobile=row.mobile),
        items=items,
        subtotal=totals.subtotal,
        discount_amount=Decimal(0),
        tax_rate=totals.tax_rate,
        tax_amount=totals.tax_amount,
        total=totals.total,
        payment_type=payment_type_for(row.customer_name),
        timestamp=placed_at,
        status=OrderStatus.COMPLETED,
        outlet=row.outlet,
        source=OrderSource.BULK,
    )


def _resolve_items(
    names: tuple[str, ...],
    catalog: Mapping[str, MenuItem],
    index: int,
) -> tuple[OrderItem, ...]:
    items: list[OrderItem] = []
    for name in names:
        menu_item = catalog.get(name)
        if menu_item is None:
            log.warning("Unknown menu item %r on export line %d", name, index)
            continue
        items.append(OrderItem(menu_item=menu_item, quantity=1))
    return tuple(items)


def _describe_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)
