"""Live store and historical source configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, tzinfo
from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .env import env_flag, optional_env_var
from .errors import ConfigurationError
from .storage import StorageConfig, get_storage_config


class StoreMode(StrEnum):
    DATABASE = "database"
    OFFLINE = "offline"


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Which live store to use and where the historical export lives."""

    mode: StoreMode
    database_uri: str | None
    historical_source: str
    timezone: tzinfo = UTC

    @property
    def offline(self) -> bool:
        return self.mode is StoreMode.OFFLINE

    @property
    def historical_source_is_url(self) -> bool:
        return self.historical_source.startswith(("http://", "https://"))


def _resolve_timezone(name: str | None) -> tzinfo:
    if name is None or name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone: {name}") from exc


def get_store_config(*, storage: StorageConfig | None = None) -> StoreConfig:
    """Build the store configuration from ``ORDERDESK_*`` environment variables.

    The live store counts as configured only when ``ORDERDESK_DATABASE_URI`` is set;
    otherwise the engine runs in offline mode against an in-memory store.
    """

    database_uri = optional_env_var("ORDERDESK_DATABASE_URI")
    offline = database_uri is None or env_flag("ORDERDESK_OFFLINE")
    source = optional_env_var("ORDERDESK_HISTORICAL_SOURCE")
    if source is None:
        storage_config = storage or get_storage_config()
        source = str(storage_config.historical_path())
    return StoreConfig(
        mode=StoreMode.OFFLINE if offline else StoreMode.DATABASE,
        database_uri=database_uri,
        historical_source=source,
        timezone=_resolve_timezone(optional_env_var("ORDERDESK_TIMEZONE")),
    )
