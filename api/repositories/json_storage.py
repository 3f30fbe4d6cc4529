"""
JSON-document persistence adapters.

The whole dataset (places, photos, id counters) lives in one document. Every
request loads it, mutates it in memory and saves it back; there is no locking,
so concurrent writers follow last-writer-wins.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Protocol

from api.domain.places import empty_store, store_defaults

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Anything able to load and save the full store document."""

    def load(self) -> dict:
        ...

    def save(self, store: dict) -> None:
        ...


class JsonFileStorage:
    """Store backed by a single JSON file on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def initialize(self) -> None:
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.save(empty_store())
        logger.info("Initialized empty data file at %s", self.path)

    def load(self) -> dict:
        if not self.path.exists():
            return empty_store()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read data file %s: %s", self.path, exc)
            return empty_store()
        if not isinstance(data, dict):
            logger.warning("Data file %s does not hold a JSON object; using an empty store", self.path)
            return empty_store()
        return store_defaults(data)

    def save(self, store: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(store, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)


class MemoryStorage:
    """In-memory store, mostly for tests."""

    def __init__(self, store: dict | None = None) -> None:
        self._store = store_defaults(copy.deepcopy(store)) if store else empty_store()

    def load(self) -> dict:
        return copy.deepcopy(self._store)

    def save(self, store: dict) -> None:
        self._store = copy.deepcopy(store)
