"""Rotated image cache backed by the host file storage service."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scene_rotator.config.logging_policy import DebugPolicy
from scene_rotator.config.models import RotationConfig
from scene_rotator.errors import ImageRotationFailed
from scene_rotator.images.naming import (
    DEFAULT_CACHE_DIR,
    RotatedImageName,
    derive_rotated_name,
    split_path,
)
from scene_rotator.images.render import render_rotated
from scene_rotator.interfaces import FileStorage


logger = logging.getLogger(__name__)

Renderer = Callable[[bytes, int, str, int], bytes]


class ProbeStatus(Enum):
    HIT = "hit"
    MISS = "miss"
    # Listing failed (usually the cache directory does not exist yet).
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class CacheProbe:
    status: ProbeStatus
    path: Optional[str] = None

    @property
    def hit(self) -> bool:
        return self.status is ProbeStatus.HIT


class ImageRotationCache:
    """Locate or render rotated variants of scene images."""

    def __init__(
        self,
        storage: FileStorage,
        *,
        cache_dir_name: str = DEFAULT_CACHE_DIR,
        quality: int = 90,
        renderer: Renderer = render_rotated,
        log_images: bool = False,
    ) -> None:
        self._storage = storage
        self._cache_dir_name = cache_dir_name
        self._quality = int(quality)
        self._renderer = renderer
        self._log_images = bool(log_images)

    @classmethod
    def from_config(
        cls,
        storage: FileStorage,
        config: RotationConfig,
        policy: Optional[DebugPolicy] = None,
    ) -> "ImageRotationCache":
        return cls(
            storage,
            cache_dir_name=config.cache_dir_name,
            quality=config.image_quality,
            log_images=bool(policy and policy.logging.log_images),
        )

    def target_for(self, source_path: str, step: object, encoding: str) -> RotatedImageName:
        return derive_rotated_name(source_path, step, encoding, cache_dir_name=self._cache_dir_name)

    async def probe(self, target: RotatedImageName) -> CacheProbe:
        """Look for *target* in its cache directory."""

        try:
            listing = await self._storage.list(target.directory)
        except Exception as exc:
            logger.debug("image cache: listing %s failed (%s); treating as miss", target.directory, exc)
            return CacheProbe(ProbeStatus.UNAVAILABLE)
        for path in sorted(listing):
            if split_path(path)[1] == target.filename:
                return CacheProbe(ProbeStatus.HIT, path)
        return CacheProbe(ProbeStatus.MISS)

    async def rotate_or_fetch(self, source_path: str, step: int, encoding: str) -> str:
        """Return the storage path of *source_path* rotated by *step*.

        Reuses an existing variant when one is found, otherwise renders and
        uploads a new one. Collaborator failures raise
        :class:`ImageRotationFailed`.
        """

        if not source_path:
            raise ImageRotationFailed("No image path to rotate", source=source_path)
        target = self.target_for(source_path, step, encoding)

        probe = await self.probe(target)
        if probe.hit:
            assert probe.path is not None
            if self._log_images:
                logger.info("image cache: hit %s -> %s", source_path, probe.path)
            return probe.path
        if self._log_images:
            logger.info(
                "image cache: %s for %s; rendering %s",
                probe.status.value,
                source_path,
                target.path,
            )
        return await self._render_and_upload(source_path, target, step, encoding)

    async def _render_and_upload(
        self,
        source_path: str,
        target: RotatedImageName,
        step: int,
        encoding: str,
    ) -> str:
        try:
            data = await self._storage.read(source_path)
        except Exception as exc:
            raise ImageRotationFailed(f"Could not read {source_path}: {exc}", source=source_path) from exc

        try:
            encoded = await asyncio.to_thread(self._renderer, data, step, encoding, self._quality)
        except Exception as exc:
            raise ImageRotationFailed(f"Could not rotate {source_path}: {exc}", source=source_path) from exc

        try:
            await self._storage.create_directory(target.directory)
        except Exception as exc:
            # Upload below reports the real failure if the directory is missing.
            logger.warning("image cache: could not create %s: %s", target.directory, exc)

        try:
            final_path = await self._storage.upload(target.directory, target.filename, encoded, encoding)
        except Exception as exc:
            raise ImageRotationFailed(
                f"Could not upload {target.path} (from {source_path}): {exc}",
                source=source_path,
            ) from exc
        if not final_path:
            raise ImageRotationFailed(f"Upload of {target.path} returned no path", source=source_path)

        if self._log_images:
            logger.info("image cache: uploaded %s (%d bytes)", final_path, len(encoded))
        return final_path


__all__ = ["CacheProbe", "ImageRotationCache", "ProbeStatus"]
