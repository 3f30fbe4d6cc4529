"""Domain helpers for the places/photos document (pure functions, no I/O)."""
from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

PLACE_FIELDS = (
    "name",
    "address",
    "description",
    "latitude",
    "longitude",
    "date_visited",
    "sort_order",
)

# Per-field overwrite rules for partial updates.
TRUTHY_FIELDS = ("name", "address")
PRESENT_FIELDS = ("description", "date_visited")
NOT_NULL_FIELDS = ("latitude", "longitude", "sort_order")

COLLECTIONS = ("places", "photos")
COUNTERS = {"nextPlaceId": "places", "nextPhotoId": "photos"}

logger = logging.getLogger(__name__)


def empty_store() -> dict:
    return {"places": [], "photos": [], "nextPlaceId": 1, "nextPhotoId": 1}


def store_defaults(store: dict) -> dict:
    """
    Repair a loaded document so callers can rely on its shape.

    Missing keys get their defaults. A collection that is not a list, or a
    counter that is not a positive integer, is replaced the same way and
    logged; records that are not objects are dropped.
    """
    for key in COLLECTIONS:
        value = store.get(key)
        if not isinstance(value, list):
            if key in store:
                logger.warning("Ignoring malformed %r in store: %r", key, value)
            store[key] = []
            continue
        records = [r for r in value if isinstance(r, dict)]
        if len(records) != len(value):
            logger.warning("Dropping %d malformed %s records", len(value) - len(records), key)
            store[key] = records
    for key, collection in COUNTERS.items():
        value = store.get(key)
        if not _is_counter(value):
            if key in store:
                logger.warning("Ignoring malformed %r in store: %r", key, value)
            store[key] = _next_id(store[collection])
    return store


def _is_counter(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _next_id(records: Iterable[Mapping[str, Any]] | None) -> int:
    ids = [_as_int(r.get("id")) for r in (records or []) if isinstance(r, Mapping)]
    return max(ids, default=0) + 1


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-02-14T18:30:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def missing_required(fields: Mapping[str, Any]) -> bool:
    return (
        not fields.get("name")
        or not fields.get("address")
        or fields.get("latitude") is None
        or fields.get("longitude") is None
    )


def new_place(place_id: int, fields: Mapping[str, Any], created_at: str | None = None) -> dict:
    return {
        "id": place_id,
        "name": fields["name"],
        "address": fields["address"],
        "description": fields.get("description") or "",
        "latitude": fields["latitude"],
        "longitude": fields["longitude"],
        "date_visited": fields.get("date_visited") or "",
        "sort_order": fields.get("sort_order") or 0,
        "created_at": created_at or utc_timestamp(),
    }


def merge_place(existing: Mapping[str, Any], fields: Mapping[str, Any]) -> dict:
    """
    Apply a partial update.

    name/address only change when the new value is truthy, description and
    date_visited change whenever the key is present (an empty string clears
    them), and latitude/longitude/sort_order change when present and not null.
    """
    merged = dict(existing)
    for key in TRUTHY_FIELDS:
        if fields.get(key):
            merged[key] = fields[key]
    for key in PRESENT_FIELDS:
        if key in fields:
            merged[key] = fields[key]
    for key in NOT_NULL_FIELDS:
        if fields.get(key) is not None:
            merged[key] = fields[key]
    return merged


def new_photo(photo_id: int, place_id: int, filename: str, original_name: str, created_at: str | None = None) -> dict:
    return {
        "id": photo_id,
        "place_id": place_id,
        "filename": filename,
        "original_name": original_name,
        "created_at": created_at or utc_timestamp(),
    }


def photos_for(store: Mapping[str, Any], place_id: int) -> list[dict]:
    return [copy.deepcopy(p) for p in store.get("photos", []) if p.get("place_id") == place_id]


def with_photos(store: Mapping[str, Any], place: Mapping[str, Any]) -> dict:
    result = copy.deepcopy(dict(place))
    result["photos"] = photos_for(store, place["id"])
    return result


def _as_number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def sort_key(place: Mapping[str, Any]) -> tuple:
    return (_as_number(place.get("sort_order")), _as_number(place.get("id")))


def ordered_places(store: Mapping[str, Any]) -> list[dict]:
    return [with_photos(store, p) for p in sorted(store.get("places", []), key=sort_key)]


def find_index(records: list[dict], record_id: int) -> int:
    for idx, record in enumerate(records):
        if record.get("id") == record_id:
            return idx
    return -1
