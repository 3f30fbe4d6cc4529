"""SQL-backed implementation of the Storage interface."""
from __future__ import annotations

import logging

from sqlalchemy import delete, select

from api.db.create_tables import create_all
from api.db.models import Counter, Photo, Place
from api.db.session import transaction
from api.domain.places import store_defaults, utc_timestamp

logger = logging.getLogger(__name__)

_PLACE_COLUMNS = (
    "id",
    "name",
    "address",
    "description",
    "latitude",
    "longitude",
    "date_visited",
    "sort_order",
    "created_at",
)
_PHOTO_COLUMNS = ("id", "place_id", "filename", "original_name", "created_at")
_COUNTERS = ("nextPlaceId", "nextPhotoId")

# NOT NULL columns that older documents may omit
_PLACE_FALLBACKS = {"description": "", "date_visited": "", "sort_order": 0}
_PHOTO_FALLBACKS = {"original_name": ""}


def _row_to_dict(entity, columns) -> dict:
    return {col: getattr(entity, col) for col in columns}


def _column_values(record: dict, columns, fallbacks: dict) -> dict:
    values = {col: record.get(col) for col in columns}
    for col, default in fallbacks.items():
        if values[col] is None:
            values[col] = default
    if not values.get("created_at"):
        values["created_at"] = utc_timestamp()
    return values


class SQLStorage:
    """
    Loads/saves the whole document through SQLAlchemy.

    save() rewrites every row inside one transaction, which keeps the same
    whole-document semantics as the JSON file (last writer wins).
    """

    def initialize(self) -> None:
        create_all()
        logger.info("SQL schema ready")

    def load(self) -> dict:
        with transaction() as session:
            places = session.execute(select(Place).order_by(Place.id)).scalars().all()
            photos = session.execute(select(Photo).order_by(Photo.id)).scalars().all()
            counters = session.execute(select(Counter)).scalars().all()
            store = {
                "places": [_row_to_dict(p, _PLACE_COLUMNS) for p in places],
                "photos": [_row_to_dict(p, _PHOTO_COLUMNS) for p in photos],
            }
            for counter in counters:
                if counter.name in _COUNTERS:
                    store[counter.name] = int(counter.value)
        return store_defaults(store)

    def save(self, store: dict) -> None:
        with transaction() as session:
            session.execute(delete(Photo))
            session.execute(delete(Place))
            session.execute(delete(Counter))
            session.add_all(
                Place(**_column_values(p, _PLACE_COLUMNS, _PLACE_FALLBACKS)) for p in store.get("places", [])
            )
            session.flush()
            session.add_all(
                Photo(**_column_values(p, _PHOTO_COLUMNS, _PHOTO_FALLBACKS)) for p in store.get("photos", [])
            )
            session.add_all(
                Counter(name=name, value=int(store.get(name) or 1)) for name in _COUNTERS
            )
