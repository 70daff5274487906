"""Coordinate transforms shared by the planner and the orchestrator."""

from .transform import (
    normalize_angle,
    normalize_step,
    rotate_offset,
    rotated_dimensions,
    swaps_axes,
    transform_point,
)

__all__ = [
    "normalize_angle",
    "normalize_step",
    "rotate_offset",
    "rotated_dimensions",
    "swaps_axes",
    "transform_point",
]
