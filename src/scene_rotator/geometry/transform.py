"""Pure helpers for quarter-turn canvas rotation.

These functions hold no scene state so the entity planner, the scene-level
offset handling and the tests all share the exact same conventions. Canvas
coordinates have their origin at the top-left corner with y pointing down, so
a positive step is a clockwise turn.
"""

from __future__ import annotations

import math
from numbers import Integral, Real
from typing import Tuple

from scene_rotator.errors import InvalidRotationStep


__all__ = [
    "normalize_angle",
    "normalize_step",
    "rotate_offset",
    "rotated_dimensions",
    "swaps_axes",
    "transform_point",
]

Point = Tuple[float, float]

_VALID_STEPS = frozenset({90, -90, 180, -180, 270, -270})


def normalize_step(step: object) -> int:
    """Return the canonical step (``90``, ``-90`` or ``180``) for *step*.

    ``±270`` folds onto the opposite-sign quarter turn and ``-180`` onto
    ``180``. Anything else raises :class:`InvalidRotationStep`.
    """

    if isinstance(step, bool) or not isinstance(step, Real):
        raise InvalidRotationStep(step)
    if not isinstance(step, Integral):
        if not math.isfinite(step) or float(step) != int(step):
            raise InvalidRotationStep(step)
    value = int(step)
    if value not in _VALID_STEPS:
        raise InvalidRotationStep(step)
    if value in (90, -270):
        return 90
    if value in (-90, 270):
        return -90
    return 180


def swaps_axes(step: object) -> bool:
    """True when the step exchanges the roles of width and height."""

    return abs(normalize_step(step)) % 180 != 0


def normalize_angle(angle: float) -> float:
    """Wrap *angle* into ``[0, 360)``."""

    wrapped = float(angle) % 360.0
    # -0.0 and float residue from tiny negatives both land here
    if wrapped >= 360.0 or wrapped == 0.0:
        return 0.0
    return wrapped


def transform_point(x: float, y: float, old_width: float, old_height: float, step: object) -> Point:
    """Map ``(x, y)`` on the original canvas onto the rotated canvas."""

    canonical = normalize_step(step)
    if canonical == 90:
        return (old_height - y, x)
    if canonical == -90:
        return (y, old_width - x)
    return (old_width - x, old_height - y)


def rotate_offset(offset_x: float, offset_y: float, step: object) -> Point:
    """Rotate a displacement vector about the origin (not about the canvas)."""

    canonical = normalize_step(step)
    if canonical == 90:
        return (-offset_y, offset_x)
    if canonical == -90:
        return (offset_y, -offset_x)
    return (-offset_x, -offset_y)


def rotated_dimensions(width: float, height: float, step: object) -> Point:
    """Return the ``(width, height)`` pair after rotating by *step*."""

    if swaps_axes(step):
        return (height, width)
    return (width, height)
