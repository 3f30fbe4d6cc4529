"""Place/photo use cases composing the storage and the uploads directory."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from api.domain import places as domain
from api.repositories.json_storage import Storage
from api.services.upload_service import StoredUpload, remove_file, remove_files

logger = logging.getLogger(__name__)


class PlaceError(Exception):
    """Base exception for place workflow."""


class PlaceNotFoundError(PlaceError):
    """Raised when a place id does not exist."""

    def __init__(self, place_id: int) -> None:
        super().__init__("Place not found")
        self.place_id = place_id


class PhotoNotFoundError(PlaceError):
    """Raised when a photo id does not exist."""

    def __init__(self, photo_id: int) -> None:
        super().__init__("Photo not found")
        self.photo_id = photo_id


class InvalidPlaceError(PlaceError):
    """Raised when required place fields are missing."""


class PlaceService:
    """
    CRUD over places and their photos.

    Every call loads the full document, mutates it and saves it back. Nothing
    is cached between calls.
    """

    def __init__(self, storage: Storage, uploads_dir: str) -> None:
        self.storage = storage
        self.uploads_dir = uploads_dir

    # -------------------------- places --------------------------
    def list_places(self) -> list[dict]:
        return domain.ordered_places(self.storage.load())

    def get_place(self, place_id: int) -> dict:
        store = self.storage.load()
        idx = domain.find_index(store["places"], place_id)
        if idx == -1:
            raise PlaceNotFoundError(place_id)
        return domain.with_photos(store, store["places"][idx])

    def create_place(self, fields: Mapping[str, Any]) -> dict:
        if domain.missing_required(fields):
            raise InvalidPlaceError("name, address, latitude, longitude are required")
        store = self.storage.load()
        place_id = store["nextPlaceId"]
        store["nextPlaceId"] = place_id + 1
        place = domain.new_place(place_id, fields)
        store["places"].append(place)
        self.storage.save(store)
        logger.info("Created place %s (%s)", place_id, place["name"])
        return {**place, "photos": []}

    def update_place(self, place_id: int, fields: Mapping[str, Any]) -> dict:
        store = self.storage.load()
        idx = domain.find_index(store["places"], place_id)
        if idx == -1:
            raise PlaceNotFoundError(place_id)
        store["places"][idx] = domain.merge_place(store["places"][idx], fields)
        self.storage.save(store)
        return domain.with_photos(store, store["places"][idx])

    def delete_place(self, place_id: int) -> None:
        store = self.storage.load()
        idx = domain.find_index(store["places"], place_id)
        if idx == -1:
            raise PlaceNotFoundError(place_id)
        owned = [p for p in store["photos"] if p.get("place_id") == place_id]
        remove_files(self.uploads_dir, [p["filename"] for p in owned])
        store["photos"] = [p for p in store["photos"] if p.get("place_id") != place_id]
        del store["places"][idx]
        self.storage.save(store)
        logger.info("Deleted place %s with %d photo(s)", place_id, len(owned))

    # -------------------------- photos --------------------------
    def add_photos(self, place_id: int, uploads: Iterable[StoredUpload]) -> list[dict]:
        uploads = list(uploads)
        store = self.storage.load()
        if domain.find_index(store["places"], place_id) == -1:
            # the place vanished between the existence check and the write
            remove_files(self.uploads_dir, [u.filename for u in uploads])
            raise PlaceNotFoundError(place_id)
        created = []
        for upload in uploads:
            photo_id = store["nextPhotoId"]
            store["nextPhotoId"] = photo_id + 1
            photo = domain.new_photo(photo_id, place_id, upload.filename, upload.original_name)
            store["photos"].append(photo)
            created.append(photo)
        self.storage.save(store)
        if created:
            logger.info("Added %d photo(s) to place %s", len(created), place_id)
        return created

    def delete_photo(self, photo_id: int) -> None:
        store = self.storage.load()
        idx = domain.find_index(store["photos"], photo_id)
        if idx == -1:
            raise PhotoNotFoundError(photo_id)
        photo = store["photos"].pop(idx)
        remove_file(self.uploads_dir, photo["filename"])
        self.storage.save(store)
        logger.info("Deleted photo %s of place %s", photo_id, photo.get("place_id"))
