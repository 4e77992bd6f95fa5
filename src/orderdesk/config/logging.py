"""Logging setup for the orderdesk command line."""

from __future__ import annotations

import logging

from .env import optional_env_var

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# per-request chatter from these libraries drowns out order events at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    Without an explicit ``level`` the ``ORDERDESK_LOG_LEVEL`` variable is used,
    falling back to INFO. ``force=True`` replaces handlers installed earlier.
    """

    effective = level if level is not None else _level_from_env()
    logging.basicConfig(level=effective, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(effective, logging.WARNING))


def _level_from_env() -> int:
    name = optional_env_var("ORDERDESK_LOG_LEVEL")
    if name is None:
        return logging.INFO
    resolved = logging.getLevelNamesMapping().get(name.upper())
    return resolved if resolved is not None else logging.INFO
