"""Exceptions raised by the order engine."""

from __future__ import annotations


class OrderDeskError(RuntimeError):
    """Base class for order engine failures."""


class OrderStoreError(OrderDeskError):
    """Raised when the live store cannot complete a request."""


class HistoricalSourceError(OrderDeskError):
    """Raised when the historical export cannot be read or decoded."""


class HistoricalSourceMissingError(HistoricalSourceError):
    """Raised when the historical export does not exist."""


class InvalidOrderError(OrderDeskError):
    """Raised when an order handed to the writer is malformed."""


class InitializationError(OrderDeskError):
    """Raised when the first load of an order book fails.

    The caller may retry ``load()``; the failure is distinct from an empty result.
    """
