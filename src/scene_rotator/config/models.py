"""Configuration dataclasses shared across the rotation engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from scene_rotator.config.logging_policy import DebugPolicy


# Encodings the image cache knows how to produce, mapped to file extensions.
IMAGE_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass(frozen=True)
class RotationConfig:
    """Tunables for a rotation run."""

    cache_dir_name: str = "rotated-images"
    image_quality: int = 90
    background_encoding: str = "image/jpeg"  # opaque photographic content
    foreground_encoding: str = "image/png"  # keeps transparency
    fog_settle_s: float = 0.1
    rotate_images: bool = True


@dataclass(frozen=True)
class RotationCtx:
    """Resolved runtime context handed to the orchestrator."""

    config: RotationConfig = field(default_factory=RotationConfig)
    debug_policy: DebugPolicy = field(default_factory=DebugPolicy)
