"""Pixel rotation and encoding for scene images.

Quarter turns are lossless index shuffles, so the rotation itself is a
``numpy.rot90`` and only the final encode can lose information.
"""

from __future__ import annotations

import numpy as np
import imageio.v3 as iio

from scene_rotator.geometry import normalize_step
from scene_rotator.images.naming import extension_for


# numpy.rot90 turns counter-clockwise for positive k; canvas steps are clockwise.
_ROT90_K = {90: -1, -90: 1, 180: 2}

_LOSSY = frozenset({"jpg", "webp"})


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes into an ``(H, W[, C])`` array."""

    return np.asarray(iio.imread(data, index=0))


def rotate_pixels(image: np.ndarray, step: object) -> np.ndarray:
    """Rotate *image* about its center; the output canvas swaps on quarter turns."""

    k = _ROT90_K[normalize_step(step)]
    return np.ascontiguousarray(np.rot90(image, k=k, axes=(0, 1)))


def _drop_alpha(image: np.ndarray) -> np.ndarray:
    if image.ndim == 3 and image.shape[2] == 4:
        return image[..., :3]
    if image.ndim == 3 and image.shape[2] == 2:
        return image[..., 0]
    return image


def encode_image(image: np.ndarray, encoding: str, quality: int = 90) -> bytes:
    """Encode *image* with the given MIME encoding."""

    extension = extension_for(encoding)
    kwargs: dict[str, int] = {}
    if extension == "jpg":
        image = _drop_alpha(image)
    if extension in _LOSSY:
        kwargs["quality"] = int(quality)
    return iio.imwrite("<bytes>", image, extension=f".{extension}", **kwargs)


def render_rotated(data: bytes, step: object, encoding: str, quality: int = 90) -> bytes:
    """Decode, rotate and re-encode an image in one blocking call."""

    return encode_image(rotate_pixels(decode_image(data), step), encoding, quality)


__all__ = ["decode_image", "encode_image", "render_rotated", "rotate_pixels"]
