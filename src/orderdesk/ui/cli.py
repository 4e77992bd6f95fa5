# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from orderdesk.app import build_order_book, check_import
from orderdesk.config import configure_logging
from orderdesk.domain.catalog import find_discount_code
from orderdesk.domain.model import Customer, OrderItem, PaymentType
from orderdesk.domain.pricing import build_order, percentage_discount

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from orderdesk.domain.model import DiscountCode, MenuItem, Order
    from orderdesk.domain.order_book import OrderBook

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class UsageError(ValueError):
    """Raised for arguments that only turn out invalid once the catalog is known."""


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Record and reconcile shop orders")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_cmd = subparsers.add_parser("list", help="Print the merged order timeline")
    list_cmd.add_argument(
        "--limit",
        type=int,
        help="Print at most this many orders (newest first)",
    )

    check = subparsers.add_parser(
        "check-import",
        help="Parse the historical export and report skipped lines",
    )
    check.add_argument(
        "--source",
        type=str,
        help="Path or http(s) URL to parse instead of the configured export",
    )

    create = subparsers.add_parser("create", help="Record a new order")
    create.add_argument("--name", type=str, required=True, help="Customer name")
    create.add_argument("--mobile", type=str, required=True, help="Customer mobile number")
    create.add_argument(
        "--item",
        dest="items",
        action="append",
        required=True,
        metavar="NAME[:QTY]",
        help="Menu item by name, optionally with a quantity; repeat for more items",
    )
    create.add_argument(
        "--payment",
        type=PaymentType,
        choices=list(PaymentType),
        required=True,
        help="Payment type",
    )
    discount = create.add_mutually_exclusive_group()
    discount.add_argument("--discount", type=str, help="Discount code")
    discount.add_argument(
        "--discount-percent",
        type=str,
        help="Manual percentage discount between 0 and 100",
    )
    create.add_argument("--outlet", type=str, help="Outlet label, e.g. Kondapur")

    delete = subparsers.add_parser("delete", help="Delete an order by its store id")
    delete.add_argument("db_id", type=str, help="Store id of the order")

    args = parser.parse_args(list(argv))
    if getattr(args, "limit", None) is not None and args.limit < 0:
        raise ValueError("--limit must be non-negative")
    return args


def _parse_item_arg(value: str) -> tuple[str, int]:
    name, sep, quantity_text = value.rpartition(":")
    if not sep or not quantity_text.strip().isdigit():
        return value.strip(), 1
    quantity = int(quantity_text)
    if quantity <= 0:
        raise UsageError(f"Quantity must be positive: {value}")
    return name.strip(), quantity


def _resolve_items(values: Sequence[str], menu: Sequence[MenuItem]) -> list[OrderItem]:
    by_name = {item.name.casefold(): item for item in menu}
    items: list[OrderItem] = []
    for value in values:
        name, quantity = _parse_item_arg(value)
        menu_item = by_name.get(name.casefold())
        if menu_item is None:
            raise UsageError(f"Unknown menu item: {name}")
        items.append(OrderItem(menu_item=menu_item, quantity=quantity))
    return items


def _resolve_discount(
    args: argparse.Namespace,
    codes: Sequence[DiscountCode],
) -> DiscountCode | None:
    if args.discount:
        found = find_discount_code(args.discount, codes)
        if found is None:
            raise UsageError(f"Unknown discount code: {args.discount}")
        return found
    if args.discount_percent is not None:
        try:
            return percentage_discount(Decimal(args.discount_percent))
        except (InvalidOperation, ValueError) as exc:
            raise UsageError(f"Invalid discount percentage: {args.discount_percent}") from exc
    return None


def _format_order(order: Order) -> str:
    placed = order.timestamp.strftime("%Y-%m-%d %H:%M")
    items = ", ".join(
        f"{item.menu_item.name} x{item.quantity}" if item.quantity > 1 else item.menu_item.name
        for item in order.items
    )
    return (
        f"{order.id:<22} {placed}  {order.customer.name} ({order.customer.mobile})  "
        f"{order.total:.2f}  {order.payment_type}  [{order.source}] db_id={order.db_id}\n"
        f"    {order.item_count} item(s): {items}"
    )


def _run_list(book: OrderBook, args: argparse.Namespace) -> int:
    orders = book.load()
    shown = orders if args.limit is None else orders[: args.limit]
    for order in shown:
        print(_format_order(order))
    mode = "offline" if book.offline else "live"
    print(f"{len(shown)} of {len(orders)} order(s) ({mode} mode)")
    if skipped := book.skipped_lines:
        print(f"{len(skipped)} historical line(s) skipped; run check-import for details")
    return EXIT_OK


def _run_create(book: OrderBook, args: argparse.Namespace) -> int:
    book.load()
    order = build_order(
        customer=Customer(name=args.name.strip(), mobile=args.mobile.strip()),
        items=_resolve_items(args.items, book.menu_items),
        payment_type=args.payment,
        discount=_resolve_discount(args, book.discount_codes),
        outlet=args.outlet,
    )
    book.create_order(order)
    print(f"Created order {order.id} total {order.total:.2f}")
    return EXIT_OK


def _run_delete(book: OrderBook, args: argparse.Namespace) -> int:
    book.load()
    if not book.delete_order(args.db_id):
        print(f"Order {args.db_id} was not deleted", file=sys.stderr)
        return EXIT_FAILURE
    print(f"Deleted order {args.db_id}")
    return EXIT_OK


def _run_check_import(args: argparse.Namespace) -> int:
    result = check_import(source=args.source)
    print(f"{len(result.orders)} order(s) parsed, {len(result.skipped)} line(s) skipped")
    for skipped in result.skipped:
        print(f"  line {skipped.line_number}: {skipped.reason}")
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else None)

    try:
        if parsed_args.command == "check-import":
            code = _run_check_import(parsed_args)
        else:
            with build_order_book() as book:
                if parsed_args.command == "list":
                    code = _run_list(book, parsed_args)
                elif parsed_args.command == "create":
                    code = _run_create(book, parsed_args)
                elif parsed_args.command == "delete":
                    code = _run_delete(book, parsed_args)
                else:
                    raise UsageError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)
    except Exception:
        log.exception("Command %s failed", parsed_args.command)
        sys.exit(EXIT_FAILURE)

    sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load ``.env`` and install the SIGINT handler."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
