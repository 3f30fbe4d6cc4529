from __future__ import annotations

import json

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api.core.config import get_settings
from api.services.place_service import (
    InvalidPlaceError,
    PhotoNotFoundError,
    PlaceNotFoundError,
    PlaceService,
)
from api.services.upload_service import (
    FileTooLargeError,
    TooManyFilesError,
    store_uploads,
)

router = APIRouter(prefix="/api", tags=["places"])


def _get_place_service(request: Request) -> PlaceService:
    svc = getattr(getattr(request.app, "state", None), "place_service", None)
    if not svc:
        raise RuntimeError("PlaceService not configured")
    return svc


def _get_settings(request: Request):
    return getattr(getattr(request.app, "state", None), "settings", None) or get_settings()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _reject_constant(name: str):
    # NaN and Infinity cannot be rendered back by JSONResponse
    raise ValueError(f"{name} is not a valid JSON number")


async def _json_object(request: Request) -> dict | None:
    """Request body as a dict; {} for an empty body, None when it is not an object."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


@router.get("/places")
def list_places(request: Request):
    return _get_place_service(request).list_places()


@router.get("/places/{place_id}")
def get_place(place_id: int, request: Request):
    try:
        return _get_place_service(request).get_place(place_id)
    except PlaceNotFoundError as exc:
        return _error(404, str(exc))


@router.post("/places", status_code=201)
async def create_place(request: Request):
    payload = await _json_object(request)
    if payload is None:
        return _error(400, "Request body must be a JSON object")
    try:
        return _get_place_service(request).create_place(payload)
    except InvalidPlaceError as exc:
        return _error(400, str(exc))


@router.put("/places/{place_id}")
async def update_place(place_id: int, request: Request):
    payload = await _json_object(request)
    if payload is None:
        return _error(400, "Request body must be a JSON object")
    try:
        return _get_place_service(request).update_place(place_id, payload)
    except PlaceNotFoundError as exc:
        return _error(404, str(exc))


@router.delete("/places/{place_id}")
def delete_place(place_id: int, request: Request):
    try:
        _get_place_service(request).delete_place(place_id)
    except PlaceNotFoundError as exc:
        return _error(404, str(exc))
    return {"success": True}


@router.post("/places/{place_id}/photos", status_code=201)
async def upload_photos(place_id: int, request: Request, photos: list[UploadFile] | None = File(None)):
    svc = _get_place_service(request)
    settings = _get_settings(request)
    # nothing is written to disk for an unknown place
    try:
        await run_in_threadpool(svc.get_place, place_id)
    except PlaceNotFoundError as exc:
        return _error(404, str(exc))
    try:
        stored = await store_uploads(
            photos or [],
            svc.uploads_dir,
            max_bytes=settings.max_upload_bytes,
            max_files=settings.max_upload_files,
        )
    except TooManyFilesError as exc:
        return _error(400, str(exc))
    except FileTooLargeError as exc:
        return _error(413, str(exc))
    try:
        return await run_in_threadpool(svc.add_photos, place_id, stored)
    except PlaceNotFoundError as exc:
        return _error(404, str(exc))


@router.delete("/photos/{photo_id}")
def delete_photo(photo_id: int, request: Request):
    try:
        _get_place_service(request).delete_photo(photo_id)
    except PhotoNotFoundError as exc:
        return _error(404, str(exc))
    return {"success": True}
