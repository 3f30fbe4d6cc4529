from __future__ import annotations

import pytest

from api.repositories.json_storage import MemoryStorage
from api.services.place_service import (
    InvalidPlaceError,
    PhotoNotFoundError,
    PlaceNotFoundError,
    PlaceService,
)
from api.services.upload_service import StoredUpload


def _fields(**overrides):
    fields = {"name": "Pont Neuf", "address": "75001 Paris", "latitude": 48.857, "longitude": 2.341}
    fields.update(overrides)
    return fields


@pytest.fixture()
def svc(tmp_path):
    return PlaceService(MemoryStorage(), str(tmp_path))


def _stored(tmp_path, name: str) -> StoredUpload:
    (tmp_path / name).write_bytes(b"img")
    return StoredUpload(filename=name, original_name=f"orig-{name}", size=3)


def test_create_place_defaults_and_listing(svc):
    place = svc.create_place(_fields())
    assert place["id"] == 1
    assert place["photos"] == []
    assert place["description"] == ""
    assert place["date_visited"] == ""
    assert place["sort_order"] == 0
    assert place["created_at"].endswith("Z")

    listed = svc.list_places()
    assert listed == [place]


def test_ids_follow_counter_and_are_never_reused(svc):
    first = svc.create_place(_fields(name="A"))
    second = svc.create_place(_fields(name="B"))
    assert second["id"] == first["id"] + 1

    svc.delete_place(second["id"])
    third = svc.create_place(_fields(name="C"))
    assert third["id"] == 3


@pytest.mark.parametrize(
    "missing",
    [{"name": ""}, {"address": None}, {"latitude": None}, {"longitude": None}],
)
def test_create_requires_fields(svc, missing):
    with pytest.raises(InvalidPlaceError):
        svc.create_place(_fields(**missing))
    assert svc.list_places() == []


def test_zero_coordinates_are_accepted(svc):
    place = svc.create_place(_fields(latitude=0, longitude=0))
    assert (place["latitude"], place["longitude"]) == (0, 0)


def test_listing_sorted_by_sort_order_then_id(svc):
    svc.create_place(_fields(name="late", sort_order=5))
    svc.create_place(_fields(name="first-zero"))
    svc.create_place(_fields(name="early", sort_order=-1))
    svc.create_place(_fields(name="second-zero", sort_order=0))
    assert [p["name"] for p in svc.list_places()] == ["early", "first-zero", "second-zero", "late"]


def test_update_with_empty_description_only_clears_description(svc):
    place = svc.create_place(_fields(description="Premier rendez-vous", date_visited="2020-02-14", sort_order=3))
    updated = svc.update_place(place["id"], {"description": ""})

    assert updated["description"] == ""
    for key in ("name", "address", "latitude", "longitude", "date_visited", "sort_order", "created_at", "id"):
        assert updated[key] == place[key]


def test_update_field_rules(svc):
    place = svc.create_place(_fields(sort_order=4))
    updated = svc.update_place(
        place["id"],
        {"name": "", "address": "Paris", "latitude": None, "longitude": 2.5, "sort_order": 0, "date_visited": ""},
    )
    assert updated["name"] == "Pont Neuf"
    assert updated["address"] == "Paris"
    assert updated["latitude"] == 48.857
    assert updated["longitude"] == 2.5
    assert updated["sort_order"] == 0
    assert updated["date_visited"] == ""


def test_update_unknown_place(svc):
    with pytest.raises(PlaceNotFoundError):
        svc.update_place(42, {"name": "x"})


def test_photos_are_embedded_per_place(svc, tmp_path):
    a = svc.create_place(_fields(name="A"))
    b = svc.create_place(_fields(name="B"))
    created = svc.add_photos(a["id"], [_stored(tmp_path, "1.jpg"), _stored(tmp_path, "2.jpg")])
    svc.add_photos(b["id"], [_stored(tmp_path, "3.jpg")])

    assert [p["id"] for p in created] == [1, 2]
    assert created[0]["original_name"] == "orig-1.jpg"
    got = svc.get_place(a["id"])
    assert [p["filename"] for p in got["photos"]] == ["1.jpg", "2.jpg"]
    assert [p["filename"] for p in svc.get_place(b["id"])["photos"]] == ["3.jpg"]


def test_delete_place_cascades_to_photos_and_files(svc, tmp_path):
    a = svc.create_place(_fields(name="A"))
    b = svc.create_place(_fields(name="B"))
    svc.add_photos(a["id"], [_stored(tmp_path, "1.jpg"), _stored(tmp_path, "2.jpg")])
    svc.add_photos(b["id"], [_stored(tmp_path, "3.jpg")])
    (tmp_path / "2.jpg").unlink()  # missing files are tolerated

    svc.delete_place(a["id"])

    assert [p["name"] for p in svc.list_places()] == ["B"]
    assert not (tmp_path / "1.jpg").exists()
    assert (tmp_path / "3.jpg").exists()
    assert [p["filename"] for p in svc.storage.load()["photos"]] == ["3.jpg"]


def test_add_photos_to_missing_place_removes_files(svc, tmp_path):
    upload = _stored(tmp_path, "orphan.jpg")
    with pytest.raises(PlaceNotFoundError):
        svc.add_photos(99, [upload])
    assert not (tmp_path / "orphan.jpg").exists()


def test_delete_photo(svc, tmp_path):
    place = svc.create_place(_fields())
    photo = svc.add_photos(place["id"], [_stored(tmp_path, "1.jpg")])[0]

    svc.delete_photo(photo["id"])
    assert svc.get_place(place["id"])["photos"] == []
    assert not (tmp_path / "1.jpg").exists()

    after = svc.add_photos(place["id"], [_stored(tmp_path, "2.jpg")])[0]
    assert after["id"] == photo["id"] + 1


def test_deleting_unknown_ids_leaves_store_untouched(svc):
    svc.create_place(_fields())
    before = svc.storage.load()
    with pytest.raises(PlaceNotFoundError):
        svc.delete_place(7)
    with pytest.raises(PhotoNotFoundError):
        svc.delete_photo(7)
    assert svc.storage.load() == before


def test_listing_tolerates_non_numeric_sort_order(svc):
    svc.create_place(_fields(name="text", sort_order="2"))
    svc.create_place(_fields(name="number", sort_order=1))
    svc.create_place(_fields(name="junk", sort_order="abc"))
    assert [p["name"] for p in svc.list_places()] == ["junk", "number", "text"]
