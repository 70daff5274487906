from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from scene_rotator.errors import StorageError
from scene_rotator.stores import LocalFileStorage


def test_root_must_be_a_directory(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        LocalFileStorage(tmp_path / "missing")


def test_upload_list_and_read(tmp_path: Path) -> None:
    storage = LocalFileStorage(tmp_path)

    async def _run():
        await storage.create_directory("maps/rotated-images")
        path = await storage.upload("maps/rotated-images", "a_rotation90.jpg", b"data", "image/jpeg")
        listing = await storage.list("maps/rotated-images")
        data = await storage.read(path)
        return path, listing, data

    path, listing, data = asyncio.run(_run())

    assert path == "maps/rotated-images/a_rotation90.jpg"
    assert listing == {"maps/rotated-images/a_rotation90.jpg"}
    assert data == b"data"
    assert (tmp_path / "maps" / "rotated-images" / "a_rotation90.jpg").read_bytes() == b"data"


def test_list_skips_subdirectories(tmp_path: Path) -> None:
    (tmp_path / "maps" / "nested").mkdir(parents=True)
    (tmp_path / "maps" / "a.png").write_bytes(b"x")
    storage = LocalFileStorage(tmp_path)

    assert asyncio.run(storage.list("maps")) == {"maps/a.png"}


def test_missing_directory_listing_raises(tmp_path: Path) -> None:
    storage = LocalFileStorage(tmp_path)
    with pytest.raises(StorageError):
        asyncio.run(storage.list("nope"))


def test_encoded_paths_are_decoded(tmp_path: Path) -> None:
    (tmp_path / "my maps").mkdir()
    (tmp_path / "my maps" / "Old Temple.jpg").write_bytes(b"img")
    storage = LocalFileStorage(tmp_path)

    assert asyncio.run(storage.read("my%20maps/Old%20Temple.jpg")) == b"img"


@pytest.mark.parametrize("path", ["../outside.jpg", "maps/../../outside.jpg", "%2E%2E/outside.jpg"])
def test_paths_escaping_root_are_refused(tmp_path: Path, path: str) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (tmp_path / "outside.jpg").write_bytes(b"secret")
    storage = LocalFileStorage(root)

    with pytest.raises(StorageError):
        asyncio.run(storage.read(path))


@pytest.mark.parametrize("filename", ["", "a/b.jpg", ".."])
def test_invalid_upload_names_rejected(tmp_path: Path, filename: str) -> None:
    storage = LocalFileStorage(tmp_path)
    with pytest.raises(StorageError):
        asyncio.run(storage.upload("", filename, b"x", "image/png"))


def test_read_missing_file_raises(tmp_path: Path) -> None:
    storage = LocalFileStorage(tmp_path)
    with pytest.raises(StorageError):
        asyncio.run(storage.read("gone.png"))
