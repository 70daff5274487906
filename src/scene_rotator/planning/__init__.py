"""Planning helpers that produce update records without touching the store."""

from .entities import (
    EntityTransformPlanner,
    PlanContext,
    UpdateRecord,
    box_pixel_extent,
    lookup,
)
from .grid import remap_grid_type

__all__ = [
    "EntityTransformPlanner",
    "PlanContext",
    "UpdateRecord",
    "box_pixel_extent",
    "lookup",
    "remap_grid_type",
]
