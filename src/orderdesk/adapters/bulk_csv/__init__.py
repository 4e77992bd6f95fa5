"""Historical CSV export adapter."""

from __future__ import annotations

from .fetcher import BulkCsvFetcher
from .source import FileHistoricalSource, HttpHistoricalSource, build_text_source
from .tokenizer import split_fields
from .translator import (
    BULK_DB_ID_PREFIX,
    parse_bulk_orders,
    parse_placed_at,
    payment_type_for,
)

__all__ = [
    "BULK_DB_ID_PREFIX",
    "BulkCsvFetcher",
    "FileHistoricalSource",
    "HttpHistoricalSource",
    "build_text_source",
    "parse_bulk_orders",
    "parse_placed_at",
    "payment_type_for",
    "split_fields",
]
