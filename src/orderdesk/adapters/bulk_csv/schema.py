"""Pydantic model describing one row of the historical export."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

ITEM_SEPARATOR: Final[str] = ", "
MIN_FIELDS: Final[int] = 6


class BulkOrderRow(BaseModel):
    """Validated fields of an export line, before catalog resolution."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)

    customer_name: str
    mobile: str
    outlet: str
    placed_at: str
    item_names: tuple[str, ...]
    stated_total: Decimal | None = None

    @field_validator("customer_name", "mobile", "outlet", "placed_at")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("item_names", mode="before")
    @classmethod
    def _split_items(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValueError("must not be empty")
            return tuple(name.strip() for name in stripped.split(ITEM_SEPARATOR))
        return value

    @field_validator("stated_total", mode="before")
    @classmethod
    def _parse_total(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                parsed = Decimal(value.strip())
            except InvalidOperation:
                return None
            return parsed if parsed.is_finite() else None
        return value

    @classmethod
    def from_fields(cls, fields: list[str]) -> BulkOrderRow:
        if len(fields) < MIN_FIELDS:
            raise ValueError(f"expected at least {MIN_FIELDS} fields, got {len(fields)}")
        return cls(
            customer_name=fields[0],
            mobile=fields[1],
            outlet=fields[2],
            placed_at=fields[3],
            item_names=fields[4],  # pyright: ignore[reportArgumentType]
            stated_total=fields[5],  # pyright: ignore[reportArgumentType]
        )
