"""Upload handling: image allow-list, size ceiling, unique names on disk."""

from __future__ import annotations

import logging
import os
import re
import secrets
import time
from dataclasses import dataclass
from typing import Iterable

from fastapi import UploadFile

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_PATTERN = re.compile(r"jpeg|jpg|png|gif|webp")
CHUNK_SIZE = 1024 * 1024


class UploadError(Exception):
    """Base exception for upload workflow."""


class TooManyFilesError(UploadError):
    """Raised when a request carries more files than allowed."""


class FileTooLargeError(UploadError):
    """Raised when a single file exceeds the per-file ceiling."""


@dataclass(frozen=True)
class StoredUpload:
    filename: str
    original_name: str
    size: int


def is_allowed_image(filename: str | None, content_type: str | None) -> bool:
    """Both the extension and the declared MIME type must look like an image."""
    ext = os.path.splitext(filename or "")[1].lower()
    return bool(ALLOWED_IMAGE_PATTERN.search(ext)) and bool(ALLOWED_IMAGE_PATTERN.search(content_type or ""))


def unique_filename(original_name: str, now: float | None = None) -> str:
    """<epoch-millis>-<random><original extension>, e.g. 1707933000000-123456789.jpg"""
    millis = int((time.time() if now is None else now) * 1000)
    suffix = secrets.randbelow(10**9)
    ext = os.path.splitext(original_name or "")[1]
    return f"{millis}-{suffix}{ext}"


def remove_file(uploads_dir: str, filename: str) -> bool:
    """Best-effort delete; a missing file is not an error."""
    path = os.path.join(uploads_dir, os.path.basename(filename or ""))
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        logger.debug("Upload %s already gone", path)
        return False


def remove_files(uploads_dir: str, filenames: Iterable[str]) -> None:
    for filename in filenames:
        remove_file(uploads_dir, filename)


async def _write_upload(upload: UploadFile, dest_path: str, max_bytes: int) -> int:
    written = 0
    with open(dest_path, "wb") as f:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                break
            f.write(chunk)
    return written


async def store_uploads(
    files: list[UploadFile],
    uploads_dir: str,
    *,
    max_bytes: int,
    max_files: int,
) -> list[StoredUpload]:
    """
    Write every acceptable image of the batch into uploads_dir.

    Files that are not images are dropped silently. A file over max_bytes
    aborts the batch: files already written by this call are removed and
    FileTooLargeError is raised.
    """
    if len(files) > max_files:
        raise TooManyFilesError(f"At most {max_files} files per upload")
    os.makedirs(uploads_dir, exist_ok=True)
    stored: list[StoredUpload] = []
    for upload in files:
        original = upload.filename or ""
        if not original:
            continue
        if not is_allowed_image(original, upload.content_type):
            logger.info("Dropping upload %r (%s): not an allowed image", original, upload.content_type)
            continue
        filename = unique_filename(original)
        dest_path = os.path.join(uploads_dir, filename)
        size = await _write_upload(upload, dest_path, max_bytes)
        if size > max_bytes:
            remove_file(uploads_dir, filename)
            remove_files(uploads_dir, [s.filename for s in stored])
            logger.warning("Rejected upload batch: %r exceeds %d bytes", original, max_bytes)
            raise FileTooLargeError(f"{original} exceeds the {max_bytes} bytes limit")
        stored.append(StoredUpload(filename=filename, original_name=original, size=size))
    return stored
