"""
Persistence adapters.

These modules encapsulate how the places/photos document is stored and
retrieved (JSON file by default, SQL when DATABASE_URL is configured).
Services depend on the Storage interface rather than touching files directly.
"""

from __future__ import annotations

from api.core.config import Settings

from .json_storage import JsonFileStorage, MemoryStorage, Storage


def build_storage(settings: Settings) -> Storage:
    """Pick the storage backend configured for this process."""
    if settings.database_url:
        from .sql_storage import SQLStorage

        storage = SQLStorage()
    else:
        storage = JsonFileStorage(settings.data_file)
    storage.initialize()
    return storage


__all__ = ["Storage", "JsonFileStorage", "MemoryStorage", "build_storage"]
