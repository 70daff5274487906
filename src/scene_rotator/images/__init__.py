"""Rotated image naming, rendering and caching."""

from .cache import CacheProbe, ImageRotationCache, ProbeStatus
from .naming import RotatedImageName, derive_rotated_name, extension_for, split_path
from .render import decode_image, encode_image, render_rotated, rotate_pixels

__all__ = [
    "CacheProbe",
    "ImageRotationCache",
    "ProbeStatus",
    "RotatedImageName",
    "decode_image",
    "derive_rotated_name",
    "encode_image",
    "extension_for",
    "render_rotated",
    "rotate_pixels",
    "split_path",
]
