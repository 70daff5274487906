from __future__ import annotations

import json
from pathlib import Path

import imageio.v3 as iio
import numpy as np
import pytest

from scene_rotator.cli import build_parser, main


@pytest.fixture(autouse=True)
def _quiet_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SCENE_ROTATOR_CONFIG",
        "SCENE_ROTATOR_CACHE_DIR",
        "SCENE_ROTATOR_ROTATE_IMAGES",
        "SCENE_ROTATOR_BACKGROUND_ENCODING",
        "SCENE_ROTATOR_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SCENE_ROTATOR_FOG_SETTLE_S", "0")


def _write_scene(root: Path, **extra: object) -> Path:
    (root / "maps").mkdir()
    iio.imwrite(root / "maps" / "temple.png", np.zeros((10, 20, 3), dtype=np.uint8))
    scene = {
        "_id": "s1",
        "name": "Temple",
        "width": 2000,
        "height": 1000,
        "background": {"src": "maps/temple.png", "offset_x": 0, "offset_y": 0},
        "grid": {"type": 1, "size": 100},
        "fog": {"exploration": True},
        "tokens": [{"_id": "t1", "x": 0, "y": 0, "width": 1, "height": 1, "rotation": 0}],
    }
    scene.update(extra)
    path = root / "scene.json"
    path.write_text(json.dumps(scene), encoding="utf-8")
    return path


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["scene.json"])
    assert args.direction == "cw"
    assert args.no_images is False
    assert args.output is None


def test_rotates_scene_and_image_in_place(tmp_path: Path) -> None:
    scene_path = _write_scene(tmp_path)

    assert main([str(scene_path), "--direction", "ccw"]) == 0

    doc = json.loads(scene_path.read_text(encoding="utf-8"))
    assert (doc["width"], doc["height"]) == (1000, 2000)
    assert doc["background"]["src"] == "maps/rotated-images/temple_rotation270.jpg"
    assert doc["tokens"][0]["x"] == 0
    assert doc["tokens"][0]["y"] == 1900
    rotated = iio.imread(tmp_path / "maps" / "rotated-images" / "temple_rotation270.jpg")
    assert rotated.shape[:2] == (20, 10)


def test_no_images_writes_to_output(tmp_path: Path) -> None:
    scene_path = _write_scene(tmp_path)
    original = scene_path.read_text(encoding="utf-8")
    output = tmp_path / "rotated.json"

    assert main([str(scene_path), "--no-images", "--output", str(output)]) == 0

    assert scene_path.read_text(encoding="utf-8") == original
    doc = json.loads(output.read_text(encoding="utf-8"))
    assert doc["background"]["src"] == "maps/temple.png"
    assert (doc["width"], doc["height"]) == (1000, 2000)
    assert not (tmp_path / "maps" / "rotated-images").exists()


def test_missing_image_still_rotates_geometry(tmp_path: Path) -> None:
    scene_path = _write_scene(tmp_path, foreground="maps/missing.png")

    assert main([str(scene_path)]) == 0

    doc = json.loads(scene_path.read_text(encoding="utf-8"))
    assert doc["foreground"] == "maps/missing.png"
    assert doc["background"]["src"] == "maps/rotated-images/temple_rotation90.jpg"


def test_unreadable_scene_exits_2(tmp_path: Path) -> None:
    assert main([str(tmp_path / "absent.json")]) == 2
    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2, 3]", encoding="utf-8")
    assert main([str(bad)]) == 2


def test_bad_data_root_exits_2(tmp_path: Path) -> None:
    scene_path = _write_scene(tmp_path)
    assert main([str(scene_path), "--data-root", str(tmp_path / "nowhere")]) == 2


def test_rotation_failure_exits_1_and_leaves_file(tmp_path: Path) -> None:
    scene_path = _write_scene(tmp_path, notes=[{"x": 5, "y": 5}])
    original = scene_path.read_text(encoding="utf-8")

    assert main([str(scene_path), "--no-images"]) == 1
    assert scene_path.read_text(encoding="utf-8") == original
