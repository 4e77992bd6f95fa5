"""Ports for fetching the historical order export."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from orderdesk.domain.model import Order


@dataclass(frozen=True, slots=True)
class SkippedLine:
    """Diagnostic for a historical export line that produced no order."""

    line_number: int
    reason: str


@dataclass(slots=True)
class HistoricalFetchResult:
    """Orders parsed from one read of the historical export."""

    orders: list[Order] = field(default_factory=list["Order"])
    skipped: list[SkippedLine] = field(default_factory=list[SkippedLine])


@runtime_checkable
class HistoricalOrderFetcher(Protocol):
    """Callable port reading and parsing the historical export.

    Implementations raise ``HistoricalSourceMissingError`` when the export does
    not exist and ``HistoricalSourceError`` for any other read or decode failure.
    Malformed lines never raise; they are reported in ``skipped``.
    """

    def __call__(self) -> HistoricalFetchResult: ...


__all__ = ["HistoricalFetchResult", "HistoricalOrderFetcher", "SkippedLine"]
