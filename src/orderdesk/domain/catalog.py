"""Default catalog reference data.

Used to resolve item names in the historical export and as the fallback when the
live store has no catalog (or is not configured at all).
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Final

from .model import DiscountCode, DiscountType, MenuItem

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

_IMAGE_BASE = "https://ik.imagekit.io/8aj6efzgu/Kunafa%20Kingdom"

DEFAULT_MENU_ITEMS: Final[tuple[MenuItem, ...]] = (
    MenuItem(
        id="1",
        name="Kunafa Chocolate",
        price=Decimal(349),
        category="Chocolate",
        description="Rich chocolate kunafa with crispy kataifi pastry",
        images=(f"{_IMAGE_BASE}/kunafa_chocoalte.png",),
    ),
    MenuItem(
        id="2",
        name="Nutella Cream Cheese Kunafa",
        price=Decimal(399),
        category="Kunafa",
        description="Creamy kunafa with Nutella and cream cheese filling",
        images=(f"{_IMAGE_BASE}/nutella_cream_cheese.png",),
    ),
    MenuItem(
        id="3",
        name="Kataifi Cream Cheese Kunafa",
        price=Decimal(399),
        category="Kunafa",
        description="Traditional kataifi pastry with rich cream cheese",
        images=(f"{_IMAGE_BASE}/kataifi_cream_cheese.png",),
    ),
    MenuItem(
        id="4",
        name="Mixed Dry-Fruit Baklava",
        price=Decimal(449),
        category="Baklava",
        description="Layered phyllo pastry with mixed dry fruits and honey",
        images=(f"{_IMAGE_BASE}/mixed_baklava_3.png",),
    ),
    MenuItem(
        id="5",
        name="Pista Finger Baklava",
        price=Decimal(399),
        category="Baklava",
        description="Finger-shaped baklava filled with premium pistachios",
        images=(f"{_IMAGE_BASE}/pista_finger_baklava.png",),
    ),
    MenuItem(
        id="6",
        name="Triangle Baklava",
        price=Decimal(399),
        category="Baklava",
        description="Triangle-shaped baklava with nuts and sweet syrup",
        images=(f"{_IMAGE_BASE}/triangle_baklava.png",),
    ),
    MenuItem(
        id="7",
        name="Almond Basbousa",
        price=Decimal(299),
        category="Basbousa",
        description="Semolina cake soaked in syrup with almonds",
        images=(f"{_IMAGE_BASE}/almond_basbousa.png",),
    ),
    MenuItem(
        id="8",
        name="Cashew Basbousa",
        price=Decimal(299),
        category="Basbousa",
        description="Semolina cake soaked in syrup with cashews",
        images=(f"{_IMAGE_BASE}/cashew_basbousa.png",),
    ),
)

DEFAULT_DISCOUNT_CODES: Final[tuple[DiscountCode, ...]] = (
    DiscountCode(
        code="WELCOME10",
        type=DiscountType.PERCENTAGE,
        value=Decimal(10),
        description="10% off for new customers",
    ),
    DiscountCode(
        code="SAVE50",
        type=DiscountType.FIXED,
        value=Decimal(50),
        description="₹50 flat discount",
    ),
    DiscountCode(
        code="STUDENT15",
        type=DiscountType.PERCENTAGE,
        value=Decimal(15),
        description="15% student discount",
    ),
)


def menu_by_name(items: Iterable[MenuItem] = DEFAULT_MENU_ITEMS) -> dict[str, MenuItem]:
    """Index menu items by their exact display name."""

    return {item.name: item for item in items}


def find_discount_code(
    code: str,
    codes: Iterable[DiscountCode] = DEFAULT_DISCOUNT_CODES,
) -> DiscountCode | None:
    wanted = code.strip().upper()
    for candidate in codes:
        if candidate.code.upper() == wanted:
            return candidate
    return None


DEFAULT_MENU_BY_NAME: Final[Mapping[str, MenuItem]] = menu_by_name()
