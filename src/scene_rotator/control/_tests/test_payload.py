from __future__ import annotations

import pytest

from scene_rotator.control import UpdatePayload, get_path, set_path


def test_set_path_creates_intermediate_mappings() -> None:
    doc: dict = {"background": "legacy"}
    set_path(doc, "background.offset_x", 5)
    set_path(doc, "grid.type", 4)

    assert doc == {"background": {"offset_x": 5}, "grid": {"type": 4}}
    assert get_path(doc, "grid.type") == 4
    assert get_path(doc, "grid.size", 100) == 100


def test_scene_fields_and_collections_are_kept_apart() -> None:
    payload = UpdatePayload()
    payload.update({"width": 500, "height": 1000})
    payload.add_records("tokens", [{"_id": "t1", "x": 1}])

    assert payload.as_dict() == {
        "width": 500,
        "height": 1000,
        "tokens": [{"_id": "t1", "x": 1}],
    }
    with pytest.raises(ValueError):
        payload.set("tokens.0.x", 3)


def test_records_for_same_id_merge() -> None:
    payload = UpdatePayload()
    payload.add_records("walls", [{"_id": "w1", "c": [0, 0, 1, 1]}])
    payload.add_records("walls", [{"_id": "w1", "door": 1}, {"_id": "w2", "c": [1, 1, 2, 2]}])

    assert payload.embedded["walls"] == [
        {"_id": "w1", "c": [0, 0, 1, 1], "door": 1},
        {"_id": "w2", "c": [1, 1, 2, 2]},
    ]


def test_invalid_records_rejected() -> None:
    payload = UpdatePayload()
    with pytest.raises(ValueError):
        payload.add_records("regions", [{"_id": "r"}])
    with pytest.raises(ValueError):
        payload.add_records("notes", [{"x": 1}])


def test_empty_record_batch_leaves_no_collection() -> None:
    payload = UpdatePayload()
    payload.add_records("sounds", [])

    assert payload.is_empty()
    assert payload.as_dict() == {}


def test_merge_combines_payloads() -> None:
    first = UpdatePayload()
    first.set("width", 10)
    first.add_records("tiles", [{"_id": "a", "x": 1}])
    second = UpdatePayload()
    second.set("grid.type", 2)
    second.add_records("tiles", [{"_id": "a", "rotation": 90}])

    merged = UpdatePayload.merge(first, second)

    assert merged.scene == {"width": 10, "grid.type": 2}
    assert merged.embedded == {"tiles": [{"_id": "a", "x": 1, "rotation": 90}]}
    assert first.embedded == {"tiles": [{"_id": "a", "x": 1}]}
