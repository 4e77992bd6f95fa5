"""Historical order fetcher combining a text source with the export parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC
from logging import getLogger
from typing import TYPE_CHECKING

from orderdesk.domain.catalog import DEFAULT_MENU_BY_NAME

from .translator import parse_bulk_orders

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import tzinfo

    from orderdesk.domain.model import MenuItem
    from orderdesk.domain.ports.fetching import HistoricalFetchResult

    from .source import TextSource

log = getLogger(__name__)


@dataclass(slots=True)
class BulkCsvFetcher:
    """Read and parse the export on every call; nothing is cached."""

    source: TextSource
    catalog: Mapping[str, MenuItem] = field(default_factory=lambda: dict(DEFAULT_MENU_BY_NAME))
    timezone: tzinfo = UTC

    def __call__(self) -> HistoricalFetchResult:
        log.debug("Reading historical export from %s", self.source.location)
        content = self.source()
        return parse_bulk_orders(content, catalog=self.catalog, timezone=self.timezone)
