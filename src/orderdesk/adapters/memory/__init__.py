"""In-memory store adapter for offline mode."""

from __future__ import annotations

from .store import LOCAL_ID_PREFIX, MemoryOrderStore, MemoryUnitOfWork

__all__ = ["LOCAL_ID_PREFIX", "MemoryOrderStore", "MemoryUnitOfWork"]
