"""File storage backed by a local directory tree."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Union
from urllib.parse import unquote

from scene_rotator.errors import StorageError


logger = logging.getLogger(__name__)


class LocalFileStorage:
    """:class:`FileStorage` rooted at *root*.

    Paths are ``/``-separated and relative to the root; anything resolving
    outside it is refused. Returned paths use the same relative form.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        resolved = Path(root).expanduser().resolve()
        if not resolved.is_dir():
            raise StorageError(f"Storage root is not a directory: {resolved}")
        self._root = resolved

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        candidate = (self._root / unquote(str(path or "")).lstrip("/")).resolve()
        if candidate != self._root and self._root not in candidate.parents:
            raise StorageError(f"Path escapes storage root: {path}")
        return candidate

    def _relative(self, path: Path) -> str:
        return path.relative_to(self._root).as_posix()

    # ---- blocking helpers ------------------------------------------------
    def _list_sync(self, directory: str) -> set[str]:
        resolved = self._resolve(directory)
        if not resolved.is_dir():
            raise StorageError(f"Directory not found: {directory}")
        return {self._relative(child) for child in resolved.iterdir() if child.is_file()}

    def _mkdir_sync(self, directory: str) -> None:
        resolved = self._resolve(directory)
        try:
            resolved.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not create {directory}: {exc}") from exc

    def _upload_sync(self, directory: str, filename: str, data: bytes) -> str:
        if not filename or "/" in filename or filename in {".", ".."}:
            raise StorageError(f"Invalid file name: {filename!r}")
        target = self._resolve(directory) / filename
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Could not write {target}: {exc}") from exc
        logger.debug("storage: wrote %s (%d bytes)", target, len(data))
        return self._relative(target)

    def _read_sync(self, path: str) -> bytes:
        resolved = self._resolve(path)
        try:
            return resolved.read_bytes()
        except OSError as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    # ---- FileStorage -------------------------------------------------------
    async def list(self, directory: str) -> set[str]:
        return await asyncio.to_thread(self._list_sync, directory)

    async def create_directory(self, directory: str) -> None:
        await asyncio.to_thread(self._mkdir_sync, directory)

    async def upload(self, directory: str, filename: str, data: bytes, mime_type: str) -> str:
        return await asyncio.to_thread(self._upload_sync, directory, filename, data)

    async def read(self, path: str) -> bytes:
        return await asyncio.to_thread(self._read_sync, path)


__all__ = ["LocalFileStorage"]
