"""Deterministic file names for rotated image variants.

A variant is named ``<base>_rotation<angle>.<ext>`` where ``angle`` is the
cumulative rotation relative to the original image. Rotating a variant
therefore resolves to the same name as rotating the original by the summed
angle, whichever intermediate file was used as the source.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import unquote

from scene_rotator.config.models import IMAGE_EXTENSIONS
from scene_rotator.geometry import normalize_step


__all__ = [
    "RotatedImageName",
    "derive_rotated_name",
    "extension_for",
    "split_path",
]

DEFAULT_CACHE_DIR = "rotated-images"

_VARIANT_RE = re.compile(r"^(.*)_rotation(-?\d+)$")


@dataclass(frozen=True)
class RotatedImageName:
    directory: str
    base: str
    source_angle: int
    angle: int
    extension: str

    @property
    def filename(self) -> str:
        return f"{self.base}_rotation{self.angle}.{self.extension}"

    @property
    def path(self) -> str:
        return f"{self.directory}/{self.filename}" if self.directory else self.filename


def extension_for(encoding: str) -> str:
    """File extension for an output encoding; unknown encodings map to ``jpg``."""

    return IMAGE_EXTENSIONS.get(str(encoding).strip().lower(), "jpg")


def split_path(path: str) -> tuple[str, str]:
    """Split into ``(directory, decoded filename)``; the directory keeps its escaping."""

    directory, _, filename = str(path).rpartition("/")
    return directory, unquote(filename)


def _stem(filename: str) -> str:
    dot = filename.rfind(".")
    return filename[:dot] if dot > 0 else filename


def _join(directory: str, name: str) -> str:
    return f"{directory}/{name}" if directory else name


def derive_rotated_name(
    source_path: str,
    step: object,
    encoding: str,
    *,
    cache_dir_name: str = DEFAULT_CACHE_DIR,
) -> RotatedImageName:
    """Resolve where the rotation of *source_path* by *step* lives."""

    canonical = normalize_step(step)
    parent, filename = split_path(source_path)
    stem = _stem(filename)

    match = _VARIANT_RE.match(stem)
    if match:
        base = match.group(1)
        current = int(match.group(2))
        already_cached = parent.rpartition("/")[2] == cache_dir_name
        directory = parent if already_cached else _join(parent, cache_dir_name)
    else:
        base = stem
        current = 0
        directory = _join(parent, cache_dir_name)

    return RotatedImageName(
        directory=directory,
        base=base,
        source_angle=current,
        angle=(current + canonical) % 360,
        extension=extension_for(encoding),
    )
