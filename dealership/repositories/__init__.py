"""
Record store factory.

Selects the store implementation based on configuration, the same way
adapters are switched between mock and real backends.
"""
from typing import Optional

from dealership.core.config import settings
from dealership.repositories.store_interface import (
    EntryNotFound,
    RecordNotFound,
    RecordStore,
)

_store: Optional[RecordStore] = None


def build_record_store(backend: str) -> RecordStore:
    """
    Factory function to get the appropriate record store.

    Returns:
        Record store instance for the requested backend
    """
    if backend == "memory":
        from dealership.repositories.memory_store import InMemoryRecordStore
        return InMemoryRecordStore()
    elif backend == "mongo":
        from dealership.repositories.mongo_store import MongoRecordStore
        return MongoRecordStore()
    else:
        raise ValueError(f"Unknown store backend: {backend}")


def get_record_store() -> RecordStore:
    """Process-wide store, created on first use. FastAPI dependency."""
    global _store
    if _store is None:
        _store = build_record_store(settings.STORE_BACKEND)
    return _store


__all__ = [
    "EntryNotFound",
    "RecordNotFound",
    "RecordStore",
    "build_record_store",
    "get_record_store",
]
