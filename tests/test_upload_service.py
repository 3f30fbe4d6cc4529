from __future__ import annotations

import asyncio
import io
import os
import re

import pytest
from starlette.datastructures import Headers, UploadFile

from api.services.upload_service import (
    FileTooLargeError,
    TooManyFilesError,
    is_allowed_image,
    remove_file,
    store_uploads,
    unique_filename,
)


def _upload(name: str, data: bytes, content_type: str) -> UploadFile:
    return UploadFile(io.BytesIO(data), filename=name, headers=Headers({"content-type": content_type}))


@pytest.mark.parametrize(
    "filename,content_type",
    [
        ("photo.jpg", "image/jpeg"),
        ("PHOTO.JPEG", "image/jpeg"),
        ("shot.png", "image/png"),
        ("anim.gif", "image/gif"),
        ("pic.webp", "image/webp"),
    ],
)
def test_allowed_images(filename, content_type):
    assert is_allowed_image(filename, content_type)


@pytest.mark.parametrize(
    "filename,content_type",
    [
        ("notes.txt", "text/plain"),
        ("notes.txt", "image/png"),
        ("photo.jpg", "application/octet-stream"),
        ("photo", "image/jpeg"),
        ("", "image/jpeg"),
        ("photo.jpg", None),
    ],
)
def test_rejected_files(filename, content_type):
    assert not is_allowed_image(filename, content_type)


def test_unique_filename_format():
    name = unique_filename("Vacances.JPG", now=1707933000.5)
    assert re.fullmatch(r"1707933000500-\d{1,9}\.JPG", name)
    assert "." not in unique_filename("noext")


def test_store_uploads_drops_non_images(tmp_path):
    files = [
        _upload("a.jpg", b"\xff\xd8\xffdata", "image/jpeg"),
        _upload("notes.txt", b"hello", "text/plain"),
    ]
    stored = asyncio.run(store_uploads(files, str(tmp_path), max_bytes=1024, max_files=10))

    assert [s.original_name for s in stored] == ["a.jpg"]
    assert os.listdir(tmp_path) == [stored[0].filename]
    assert (tmp_path / stored[0].filename).read_bytes() == b"\xff\xd8\xffdata"
    assert stored[0].size == 7


def test_store_uploads_rejects_too_many_files(tmp_path):
    files = [_upload(f"{i}.png", b"x", "image/png") for i in range(3)]
    with pytest.raises(TooManyFilesError):
        asyncio.run(store_uploads(files, str(tmp_path), max_bytes=1024, max_files=2))
    assert os.listdir(tmp_path) == []


def test_oversized_file_aborts_batch_and_cleans_up(tmp_path):
    files = [
        _upload("small.png", b"x" * 10, "image/png"),
        _upload("big.png", b"x" * 2048, "image/png"),
    ]
    with pytest.raises(FileTooLargeError):
        asyncio.run(store_uploads(files, str(tmp_path), max_bytes=1024, max_files=10))
    assert os.listdir(tmp_path) == []


def test_remove_file_tolerates_missing(tmp_path):
    (tmp_path / "x.jpg").write_bytes(b"1")
    assert remove_file(str(tmp_path), "x.jpg") is True
    assert remove_file(str(tmp_path), "x.jpg") is False
